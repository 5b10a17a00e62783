from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from io import StringIO
from enum import Enum
from datetime import date
import csv

from app.database import get_db
from app.models import User
from app.services.case_service import CaseService
from app.services.client_service import ClientService
from app.services.document_service import DocumentService
from app.services.invoice_service import InvoiceService
from app.services.session_service import SessionService
from app.services.task_service import TaskService
from app.auth.dependencies import get_current_user

router = APIRouter(prefix="/api/export", tags=["Export"])

# Columns written per entity, in order
EXPORT_COLUMNS = {
    "clients": ["id", "name", "phone", "email", "address", "national_id", "notes", "created_at"],
    "cases": ["id", "title", "type", "status", "court", "client_id", "start_date", "end_date", "created_at"],
    "sessions": ["id", "case_id", "title", "date", "time", "location", "status", "created_at"],
    "documents": ["id", "case_id", "title", "file_type", "file_size", "uploaded_by", "uploaded_at"],
    "invoices": ["id", "case_id", "amount", "description", "paid", "due_date", "paid_date", "created_at"],
    "tasks": ["id", "title", "status", "priority", "assigned_to", "case_id", "due_date", "completed_at", "created_at"],
}


def _records(entity: str, db: Session, current_user: User):
    if entity == "clients":
        return ClientService(db).get_all_clients()
    if entity == "cases":
        return CaseService(db).get_cases_for_user(current_user.id, current_user.role)
    if entity == "sessions":
        return SessionService(db).get_all_sessions()
    if entity == "documents":
        return DocumentService(db).get_all_documents()
    if entity == "invoices":
        return InvoiceService(db).get_all_invoices()
    return TaskService(db).get_all_tasks()


def _cell(value):
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def render_csv(records, columns) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(columns)
    for record in records:
        writer.writerow([_cell(getattr(record, column)) for column in columns])
    return buffer.getvalue()


@router.get("/{entity}")
def export_entity(
    entity: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Download one table as CSV."""
    columns = EXPORT_COLUMNS.get(entity)
    if columns is None:
        raise HTTPException(status_code=404, detail=f"Unknown export: {entity}")

    content = render_csv(_records(entity, db, current_user), columns)
    filename = f"{entity}_{date.today().isoformat()}.csv"
    return StreamingResponse(
        iter([content]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
