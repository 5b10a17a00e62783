from sqlalchemy.orm import Session
from sqlalchemy import desc, func
from sqlalchemy.exc import IntegrityError
from typing import Dict, List, Optional
import logging

from app.models import (
    User, UserRole, Client, Case, CaseUser, CaseSession, Document, Invoice, Task, ActivityLog
)
from app.auth.schemas import UserCreate, UserUpdate
from app.auth.utils import get_password_hash, verify_password
from app.services.exceptions import ConstraintViolationError, NotFoundError, reject_nulls

logger = logging.getLogger(__name__)

# Every column that points at users.id
_USER_REFERENCES = (
    ("clients", Client.created_by),
    ("cases", Case.created_by),
    ("case_assignments", CaseUser.user_id),
    ("sessions", CaseSession.created_by),
    ("documents", Document.uploaded_by),
    ("invoices", Invoice.created_by),
    ("tasks_created", Task.created_by),
    ("tasks_assigned", Task.assigned_to),
    ("activity_log", ActivityLog.user_id),
)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get_all_users(self) -> List[User]:
        return self.db.query(User).order_by(desc(User.created_at), desc(User.id)).all()

    def authenticate(self, username: str, password: str) -> Optional[User]:
        user = self.get_user_by_username(username)
        if not user or not verify_password(password, user.password):
            return None
        return user

    def create_user(self, user_data: UserCreate) -> User:
        if self.get_user_by_username(user_data.username):
            raise ConstraintViolationError(
                "Username already exists", {"username": user_data.username}
            )

        data = user_data.dict()
        data["password"] = get_password_hash(data["password"])
        user = User(**data)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConstraintViolationError("Username already exists", {"username": user_data.username})
        self.db.refresh(user)
        return user

    def update_user(self, user_id: int, user_update: UserUpdate) -> User:
        user = self.get_user(user_id)
        if not user:
            raise NotFoundError("user", user_id)

        update_data = user_update.dict(exclude_unset=True)
        reject_nulls(update_data, ("username", "name", "role"))
        if update_data.get("username") and update_data["username"] != user.username:
            if self.get_user_by_username(update_data["username"]):
                raise ConstraintViolationError(
                    "Username already exists", {"username": update_data["username"]}
                )
        if update_data.get("password"):
            update_data["password"] = get_password_hash(update_data["password"])
        else:
            update_data.pop("password", None)

        for field, value in update_data.items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def count_references(self, user_id: int) -> Dict[str, int]:
        """Rows in other tables that still point at this user."""
        counts = {}
        for label, column in _USER_REFERENCES:
            count = self.db.query(func.count()).select_from(column.class_).filter(column == user_id).scalar() or 0
            if count:
                counts[label] = count
        return counts

    def delete_user(self, user_id: int) -> None:
        """Delete a user nothing refers to.

        Users are not covered by any cascade; a referenced user is refused
        with the per-table counts instead of orphaning history.
        """
        user = self.get_user(user_id)
        if not user:
            raise NotFoundError("user", user_id)

        references = self.count_references(user_id)
        if references:
            logger.warning("Refusing to delete user %s, still referenced: %s", user_id, references)
            raise ConstraintViolationError("User is still referenced by other records", references)

        self.db.delete(user)
        self.db.commit()

    def ensure_admin(self, username: str, password: str, name: str) -> Optional[User]:
        """Create the first admin account when the users table is empty."""
        if self.db.query(User.id).first():
            return None
        user = User(
            username=username,
            password=get_password_hash(password),
            name=name,
            role=UserRole.ADMIN
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.warning("Created initial admin account %r; change its password", username)
        return user
