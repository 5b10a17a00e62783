from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_, desc
from typing import List, Optional, Union
import logging

from app.models import Case, CaseUser, Client, User, UserRole, AssignmentRole
from app.cases.schemas import CaseCreate, CaseUpdate as CaseUpdateSchema
from app.services.cascade import CASE_DELETE_STEPS, remove_case
from app.services.exceptions import NotFoundError, ValidationError, reject_nulls

logger = logging.getLogger(__name__)


class CaseService:
    def __init__(self, db: Session):
        self.db = db

    def _visible_to(self, query, user_id: int, role: Union[str, UserRole]):
        """Restrict a Case query to what ``user_id`` may see.

        Admins see every case; everyone else only cases they hold a
        CaseUser assignment on. A case nobody is assigned to is therefore
        invisible to all non-admins.
        """
        if role == UserRole.ADMIN:
            return query
        return query.join(CaseUser, CaseUser.case_id == Case.id).filter(
            CaseUser.user_id == user_id
        ).distinct()

    def get_case(self, case_id: int) -> Optional[Case]:
        return self.db.query(Case).filter(Case.id == case_id).first()

    def get_case_with_relationships(self, case_id: int) -> Optional[Case]:
        """Get case with its assignments loaded."""
        return self.db.query(Case).options(
            joinedload(Case.assignments)
        ).filter(Case.id == case_id).first()

    def get_all_cases(self) -> List[Case]:
        return self.db.query(Case).order_by(desc(Case.created_at), desc(Case.id)).all()

    def get_cases_for_user(self, user_id: int, role: Union[str, UserRole]) -> List[Case]:
        """Get cases for a user with role-based filtering."""
        if role == UserRole.ADMIN:
            return self.get_all_cases()
        query = self._visible_to(self.db.query(Case), user_id, role)
        return query.order_by(desc(Case.created_at), desc(Case.id)).all()

    def get_case_for_user(self, case_id: int, user_id: int, role: Union[str, UserRole]) -> Optional[Case]:
        """Get case with user permission checks."""
        query = self.db.query(Case).options(joinedload(Case.assignments)).filter(Case.id == case_id)
        return self._visible_to(query, user_id, role).first()

    def create_case(self, case_data: CaseCreate, created_by: int) -> Case:
        """Create a new case and assign its creator as primary."""
        if not self.db.query(Client.id).filter(Client.id == case_data.client_id).first():
            raise ValidationError(f"Client {case_data.client_id} does not exist")

        db_case = Case(**case_data.dict(), created_by=created_by)
        self.db.add(db_case)
        self.db.flush()

        # Creator can always see their own case
        self.db.add(CaseUser(case_id=db_case.id, user_id=created_by, role=AssignmentRole.PRIMARY.value))
        self.db.commit()
        self.db.refresh(db_case)

        logger.info("Case %s created by user %s", db_case.id, created_by)
        return db_case

    def update_case(self, case_id: int, case_update: CaseUpdateSchema) -> Case:
        case = self.get_case(case_id)
        if not case:
            raise NotFoundError("case", case_id)

        update_data = case_update.dict(exclude_unset=True)
        reject_nulls(update_data, ("title", "type", "status"))
        if "client_id" in update_data:
            if update_data["client_id"] is None:
                raise ValidationError("A case must belong to a client")
            if not self.db.query(Client.id).filter(Client.id == update_data["client_id"]).first():
                raise ValidationError(f"Client {update_data['client_id']} does not exist")

        for field, value in update_data.items():
            setattr(case, field, value)

        self.db.commit()
        self.db.refresh(case)
        return case

    def delete_case(self, case_id: int) -> None:
        """Delete a case and its dependents; its invoices are kept with case_id nulled."""
        if not self.get_case(case_id):
            raise NotFoundError("case", case_id)

        try:
            affected = remove_case(self.db, case_id, CASE_DELETE_STEPS)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Cascade delete of case %s failed, rolled back", case_id)
            raise

        logger.info("Deleted case %s (%s)", case_id, affected)

    def assign_user_to_case(self, case_id: int, user_id: int, role: Optional[str] = None) -> CaseUser:
        """Assign a user to a case; an existing assignment is returned unchanged."""
        if not self.get_case(case_id):
            raise NotFoundError("case", case_id)
        if not self.db.query(User.id).filter(User.id == user_id).first():
            raise NotFoundError("user", user_id)

        existing = self.db.query(CaseUser).filter(
            CaseUser.case_id == case_id,
            CaseUser.user_id == user_id
        ).first()
        if existing:
            return existing

        assignment = CaseUser(case_id=case_id, user_id=user_id, role=role)
        self.db.add(assignment)
        self.db.commit()
        self.db.refresh(assignment)
        return assignment

    def search_cases(self, term: str) -> List[Case]:
        """Case-insensitive substring match on title, type or court."""
        term = (term or "").strip()
        if not term:
            return []
        like = f"%{term}%"
        return self.db.query(Case).filter(
            or_(
                Case.title.ilike(like),
                Case.type.ilike(like),
                Case.court.ilike(like)
            )
        ).order_by(desc(Case.created_at), desc(Case.id)).all()
