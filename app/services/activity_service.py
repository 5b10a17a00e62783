from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List, Optional

from app.models import ActivityLog


class ActivityService:
    """Append-only audit trail; there is deliberately no update or delete."""

    def __init__(self, db: Session):
        self.db = db

    def log_activity(
        self,
        user_id: Optional[int],
        action: str,
        target_type: str,
        target_id: int,
        details: Optional[str] = None
    ) -> ActivityLog:
        entry = ActivityLog(
            user_id=user_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            details=details
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def get_activity_log(self, limit: int = 100) -> List[ActivityLog]:
        return self.db.query(ActivityLog).order_by(
            desc(ActivityLog.created_at), desc(ActivityLog.id)
        ).limit(limit).all()
