from pydantic import BaseModel
from decimal import Decimal


class DashboardStats(BaseModel):
    total_clients: int
    active_cases: int
    pending_invoices: Decimal
    this_week_sessions: int

class SidebarStats(DashboardStats):
    unpaid_invoice_count: int
    open_tasks: int
