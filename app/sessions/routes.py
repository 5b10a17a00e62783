from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from app.database import get_db
from app.models import User, SessionStatus
from app.sessions.schemas import SessionCreate, SessionUpdate, SessionResponse
from app.services.session_service import SessionService
from app.services.activity_service import ActivityService
from app.auth.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])

@router.get("", response_model=List[SessionResponse])
def list_sessions(
    on: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """All sessions, or the sessions of one day in time order with ``?date=``."""
    service = SessionService(db)
    if on is not None:
        return service.get_sessions_for_date(on)
    return service.get_all_sessions()

@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    session_data: SessionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = SessionService(db)

    # Only a scheduled session occupies the slot
    if session_data.status == SessionStatus.SCHEDULED and service.check_session_conflict(
        session_data.date, session_data.time, current_user.id, proposed=True
    ):
        logger.info(
            "Session conflict for user %s at %s %s",
            current_user.id, session_data.date, session_data.time
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You already have a scheduled session at this date and time"
        )

    session = service.create_session(session_data, created_by=current_user.id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="create_session",
        target_type="session",
        target_id=session.id,
        details=f"Scheduled session: {session.title} on {session.date} {session.time}"
    )
    return session

@router.get("/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    session = SessionService(db).get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session

@router.put("/{session_id}", response_model=SessionResponse)
def update_session(
    session_id: int,
    session_update: SessionUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    session = SessionService(db).update_session(session_id, session_update)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="update_session",
        target_type="session",
        target_id=session_id,
        details=f"Updated session: {session.title}"
    )
    return session

@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    SessionService(db).delete_session(session_id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="delete_session",
        target_type="session",
        target_id=session_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
