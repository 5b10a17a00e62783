from sqlalchemy.orm import Session
from sqlalchemy import or_, desc
from typing import List, Optional
from datetime import datetime

from app.models import Case, Task, TaskStatus, User
from app.tasks.schemas import TaskCreate, TaskUpdate
from app.services.exceptions import NotFoundError, ValidationError, reject_nulls


class TaskService:
    def __init__(self, db: Session):
        self.db = db

    def _check_references(self, data: dict) -> None:
        case_id = data.get("case_id")
        if case_id is not None and not self.db.query(Case.id).filter(Case.id == case_id).first():
            raise ValidationError(f"Case {case_id} does not exist")
        assigned_to = data.get("assigned_to")
        if assigned_to is not None and not self.db.query(User.id).filter(User.id == assigned_to).first():
            raise ValidationError(f"User {assigned_to} does not exist")

    def get_task(self, task_id: int) -> Optional[Task]:
        return self.db.query(Task).filter(Task.id == task_id).first()

    def get_all_tasks(self) -> List[Task]:
        return self.db.query(Task).order_by(desc(Task.created_at), desc(Task.id)).all()

    def get_tasks_for_user(self, user_id: int) -> List[Task]:
        """Tasks assigned to or created by the user."""
        return self.db.query(Task).filter(
            or_(
                Task.assigned_to == user_id,
                Task.created_by == user_id
            )
        ).order_by(desc(Task.created_at), desc(Task.id)).all()

    def create_task(self, task_data: TaskCreate, created_by: int) -> Task:
        data = task_data.dict()
        self._check_references(data)

        task = Task(**data, created_by=created_by)
        if task.status == TaskStatus.COMPLETED:
            task.completed_at = datetime.utcnow()
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def update_task(self, task_id: int, task_update: TaskUpdate) -> Task:
        task = self.get_task(task_id)
        if not task:
            raise NotFoundError("task", task_id)

        update_data = task_update.dict(exclude_unset=True)
        reject_nulls(update_data, ("title", "status"))
        self._check_references(update_data)

        if "status" in update_data and update_data["status"] != task.status:
            task.completed_at = datetime.utcnow() if update_data["status"] == TaskStatus.COMPLETED else None

        for field, value in update_data.items():
            setattr(task, field, value)

        self.db.commit()
        self.db.refresh(task)
        return task

    def delete_task(self, task_id: int) -> None:
        task = self.get_task(task_id)
        if not task:
            raise NotFoundError("task", task_id)
        self.db.delete(task)
        self.db.commit()
