from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Any, Dict, Optional, Tuple, Union
from datetime import date, timedelta
from decimal import Decimal

from app.models import (
    Client, Case, CaseStatus, CaseSession, Invoice, Task, TaskStatus, UserRole
)


def week_bounds(today: Optional[date] = None) -> Tuple[date, date]:
    """Monday of the current week and the Monday after it."""
    today = today or date.today()
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=7)


class StatsService:
    def __init__(self, db: Session):
        self.db = db

    def _scope(self, query, user_id: int, role: Union[str, UserRole]):
        """Single place for per-role restriction of the counters.

        Every figure is currently global, whatever the role.
        """
        return query

    def get_dashboard_stats(
        self,
        user_id: int,
        role: Union[str, UserRole],
        today: Optional[date] = None
    ) -> Dict[str, Any]:
        start, end = week_bounds(today)

        total_clients = self._scope(
            self.db.query(func.count(Client.id)), user_id, role
        ).scalar()
        active_cases = self._scope(
            self.db.query(func.count(Case.id)).filter(Case.status == CaseStatus.ACTIVE), user_id, role
        ).scalar()
        pending_invoices = self._scope(
            self.db.query(func.coalesce(func.sum(Invoice.amount), 0)).filter(Invoice.paid.is_(False)),
            user_id, role
        ).scalar()
        this_week_sessions = self._scope(
            self.db.query(func.count(CaseSession.id)).filter(
                CaseSession.date >= start,
                CaseSession.date < end
            ), user_id, role
        ).scalar()

        return {
            "total_clients": total_clients or 0,
            "active_cases": active_cases or 0,
            "pending_invoices": Decimal(str(pending_invoices or 0)),
            "this_week_sessions": this_week_sessions or 0,
        }

    def get_sidebar_stats(
        self,
        user_id: int,
        role: Union[str, UserRole],
        today: Optional[date] = None
    ) -> Dict[str, Any]:
        stats = self.get_dashboard_stats(user_id, role, today=today)

        stats["unpaid_invoice_count"] = self._scope(
            self.db.query(func.count(Invoice.id)).filter(Invoice.paid.is_(False)), user_id, role
        ).scalar() or 0
        stats["open_tasks"] = self._scope(
            self.db.query(func.count(Task.id)).filter(
                Task.status.in_([TaskStatus.PENDING, TaskStatus.IN_PROGRESS])
            ), user_id, role
        ).scalar() or 0
        return stats
