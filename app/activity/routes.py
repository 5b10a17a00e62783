from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.models import User
from app.activity.schemas import ActivityLogResponse
from app.services.activity_service import ActivityService
from app.auth.dependencies import get_current_user

router = APIRouter(prefix="/api/activity", tags=["Activity"])

@router.get("", response_model=List[ActivityLogResponse])
def recent_activity(
    limit: int = Query(50, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Most recent audit entries, newest first."""
    return ActivityService(db).get_activity_log(limit=limit)
