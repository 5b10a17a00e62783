from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List, Optional

from app.models import Case, Invoice
from app.invoices.schemas import InvoiceCreate, InvoiceUpdate
from app.services.exceptions import NotFoundError, ValidationError, reject_nulls


class InvoiceService:
    def __init__(self, db: Session):
        self.db = db

    def _check_case(self, case_id: Optional[int]) -> None:
        # None is allowed: standalone invoice
        if case_id is not None and not self.db.query(Case.id).filter(Case.id == case_id).first():
            raise ValidationError(f"Case {case_id} does not exist")

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def get_all_invoices(self) -> List[Invoice]:
        return self.db.query(Invoice).order_by(desc(Invoice.created_at), desc(Invoice.id)).all()

    def get_invoices_by_case(self, case_id: int) -> List[Invoice]:
        return self.db.query(Invoice).filter(
            Invoice.case_id == case_id
        ).order_by(desc(Invoice.created_at), desc(Invoice.id)).all()

    def create_invoice(self, invoice_data: InvoiceCreate, created_by: int) -> Invoice:
        self._check_case(invoice_data.case_id)

        invoice = Invoice(**invoice_data.dict(), created_by=created_by)
        self.db.add(invoice)
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def update_invoice(self, invoice_id: int, invoice_update: InvoiceUpdate) -> Invoice:
        invoice = self.get_invoice(invoice_id)
        if not invoice:
            raise NotFoundError("invoice", invoice_id)

        update_data = invoice_update.dict(exclude_unset=True)
        reject_nulls(update_data, ("amount",))
        if "case_id" in update_data:
            self._check_case(update_data["case_id"])

        for field, value in update_data.items():
            setattr(invoice, field, value)

        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def delete_invoice(self, invoice_id: int) -> None:
        invoice = self.get_invoice(invoice_id)
        if not invoice:
            raise NotFoundError("invoice", invoice_id)
        self.db.delete(invoice)
        self.db.commit()
