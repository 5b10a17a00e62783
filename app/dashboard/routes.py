from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import User
from app.dashboard.schemas import DashboardStats, SidebarStats
from app.services.stats_service import StatsService
from app.auth.dependencies import get_current_user

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])

@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return StatsService(db).get_dashboard_stats(current_user.id, current_user.role)

@router.get("/sidebar", response_model=SidebarStats)
def sidebar_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return StatsService(db).get_sidebar_stats(current_user.id, current_user.role)
