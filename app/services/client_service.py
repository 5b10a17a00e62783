from sqlalchemy.orm import Session
from sqlalchemy import or_, desc, func
from typing import Any, Dict, List, Optional
import logging

from app.models import Client, Case, CaseSession, Document, Invoice, Task
from app.clients.schemas import ClientCreate, ClientUpdate
from app.services.cascade import CLIENT_CASE_DELETE_STEPS, remove_case
from app.services.exceptions import NotFoundError, reject_nulls

logger = logging.getLogger(__name__)

# Category order used in the "cannot delete" summary
_CONSTRAINT_LABELS = (
    ("related_cases", "case(s)"),
    ("related_sessions", "session(s)"),
    ("related_documents", "document(s)"),
    ("related_invoices", "invoice(s)"),
    ("related_tasks", "task(s)"),
)


class ClientService:
    def __init__(self, db: Session):
        self.db = db

    def get_client(self, client_id: int) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def get_all_clients(self) -> List[Client]:
        return self.db.query(Client).order_by(desc(Client.created_at), desc(Client.id)).all()

    def create_client(self, client_data: ClientCreate, created_by: int) -> Client:
        client = Client(**client_data.dict(), created_by=created_by)
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        return client

    def update_client(self, client_id: int, client_update: ClientUpdate) -> Client:
        client = self.get_client(client_id)
        if not client:
            raise NotFoundError("client", client_id)

        update_data = client_update.dict(exclude_unset=True)
        reject_nulls(update_data, ("name",))

        for field, value in update_data.items():
            setattr(client, field, value)

        self.db.commit()
        self.db.refresh(client)
        return client

    def search_clients(self, term: str) -> List[Client]:
        """Case-insensitive substring match on name, phone or email."""
        term = (term or "").strip()
        if not term:
            return []
        like = f"%{term}%"
        return self.db.query(Client).filter(
            or_(
                Client.name.ilike(like),
                Client.phone.ilike(like),
                Client.email.ilike(like)
            )
        ).order_by(desc(Client.created_at), desc(Client.id)).all()

    def _count_for_cases(self, model, case_ids: List[int]) -> int:
        if not case_ids:
            return 0
        return self.db.query(func.count(model.id)).filter(model.case_id.in_(case_ids)).scalar() or 0

    def check_client_deletion_constraints(self, client_id: int) -> Dict[str, Any]:
        """Report what would be lost by deleting a client.

        Absence is reported in the result rather than raised, so callers can
        render it like any other blocked deletion. Invoices whose case_id was
        already nulled belong to no case and are never counted here.
        """
        result = {
            "can_delete": False,
            "related_cases": 0,
            "related_sessions": 0,
            "related_documents": 0,
            "related_invoices": 0,
            "related_tasks": 0,
            "message": None,
        }

        if not self.get_client(client_id):
            result["message"] = "Client not found"
            return result

        case_ids = [row.id for row in self.db.query(Case.id).filter(Case.client_id == client_id).all()]
        result["related_cases"] = len(case_ids)
        result["related_sessions"] = self._count_for_cases(CaseSession, case_ids)
        result["related_documents"] = self._count_for_cases(Document, case_ids)
        result["related_invoices"] = self._count_for_cases(Invoice, case_ids)
        result["related_tasks"] = self._count_for_cases(Task, case_ids)

        parts = [f"{result[key]} {label}" for key, label in _CONSTRAINT_LABELS if result[key]]
        result["can_delete"] = not parts
        if parts:
            result["message"] = "Client has related records: " + ", ".join(parts)
        return result

    def delete_client(self, client_id: int) -> None:
        """Delete a client and everything under its cases, invoices included.

        This does not consult check_client_deletion_constraints; calling it directly
        always cascades.
        """
        if not self.get_client(client_id):
            raise NotFoundError("client", client_id)

        case_ids = [row.id for row in self.db.query(Case.id).filter(Case.client_id == client_id).all()]
        try:
            for case_id in case_ids:
                remove_case(self.db, case_id, CLIENT_CASE_DELETE_STEPS)
            self.db.query(Client).filter(Client.id == client_id).delete(synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Cascade delete of client %s failed, rolled back", client_id)
            raise

        logger.info("Deleted client %s with %d case(s)", client_id, len(case_ids))
