from sqlalchemy.orm import Session
from sqlalchemy import desc, func
from typing import List, Optional, Union
from datetime import date, time
import logging

from app.models import Case, CaseSession, CaseUser, SessionStatus
from app.sessions.schemas import SessionCreate, SessionUpdate
from app.services.exceptions import NotFoundError, ValidationError, reject_nulls

logger = logging.getLogger(__name__)


def _as_date(value: Union[str, date]) -> date:
    return date.fromisoformat(value) if isinstance(value, str) else value


def _as_time(value: Union[str, time]) -> time:
    return time.fromisoformat(value) if isinstance(value, str) else value


class SessionService:
    def __init__(self, db: Session):
        self.db = db

    def get_session(self, session_id: int) -> Optional[CaseSession]:
        return self.db.query(CaseSession).filter(CaseSession.id == session_id).first()

    def get_all_sessions(self) -> List[CaseSession]:
        return self.db.query(CaseSession).order_by(desc(CaseSession.created_at), desc(CaseSession.id)).all()

    def get_sessions_for_date(self, on: Union[str, date]) -> List[CaseSession]:
        return self.db.query(CaseSession).filter(
            CaseSession.date == _as_date(on)
        ).order_by(CaseSession.time, CaseSession.id).all()

    def create_session(self, session_data: SessionCreate, created_by: int) -> CaseSession:
        if not self.db.query(Case.id).filter(Case.id == session_data.case_id).first():
            raise ValidationError(f"Case {session_data.case_id} does not exist")

        session = CaseSession(**session_data.dict(), created_by=created_by)
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def update_session(self, session_id: int, session_update: SessionUpdate) -> CaseSession:
        session = self.get_session(session_id)
        if not session:
            raise NotFoundError("session", session_id)

        update_data = session_update.dict(exclude_unset=True)
        reject_nulls(update_data, ("case_id", "title", "date", "time", "status"))
        if "case_id" in update_data:
            if not self.db.query(Case.id).filter(Case.id == update_data["case_id"]).first():
                raise ValidationError(f"Case {update_data['case_id']} does not exist")

        for field, value in update_data.items():
            setattr(session, field, value)

        self.db.commit()
        self.db.refresh(session)
        return session

    def delete_session(self, session_id: int) -> None:
        session = self.get_session(session_id)
        if not session:
            raise NotFoundError("session", session_id)
        self.db.delete(session)
        self.db.commit()

    def count_scheduled_in_slot(self, on: Union[str, date], at: Union[str, time], user_id: int) -> int:
        """Scheduled sessions at exactly this date and time on cases assigned to the user."""
        return self.db.query(func.count(func.distinct(CaseSession.id))).join(
            CaseUser, CaseUser.case_id == CaseSession.case_id
        ).filter(
            CaseSession.date == _as_date(on),
            CaseSession.time == _as_time(at),
            CaseSession.status == SessionStatus.SCHEDULED,
            CaseUser.user_id == user_id
        ).scalar() or 0

    def check_session_conflict(
        self,
        on: Union[str, date],
        at: Union[str, time],
        user_id: int,
        proposed: bool = False
    ) -> bool:
        """Whether the user is double-booked at this exact date and time.

        Sessions are points in time; only exact matches collide. With
        ``proposed`` the caller is about to add one more booking to the slot,
        so a single existing scheduled session is already a conflict.

        Nothing is reserved: two requests may both pass this check and both
        insert.
        """
        bookings = self.count_scheduled_in_slot(on, at, user_id)
        if proposed:
            bookings += 1
        return bookings > 1
