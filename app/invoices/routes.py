from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models import User
from app.invoices.schemas import InvoiceCreate, InvoiceUpdate, InvoiceResponse
from app.services.invoice_service import InvoiceService
from app.services.activity_service import ActivityService
from app.auth.dependencies import get_current_user

router = APIRouter(prefix="/api/invoices", tags=["Invoices"])

@router.get("", response_model=List[InvoiceResponse])
def list_invoices(
    case_id: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = InvoiceService(db)
    if case_id is not None:
        return service.get_invoices_by_case(case_id)
    return service.get_all_invoices()

@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice_data: InvoiceCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    invoice = InvoiceService(db).create_invoice(invoice_data, created_by=current_user.id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="create_invoice",
        target_type="invoice",
        target_id=invoice.id,
        details=f"Issued invoice for {invoice.amount}"
    )
    return invoice

@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(
    invoice_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    invoice = InvoiceService(db).get_invoice(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice

@router.put("/{invoice_id}", response_model=InvoiceResponse)
def update_invoice(
    invoice_id: int,
    invoice_update: InvoiceUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    invoice = InvoiceService(db).update_invoice(invoice_id, invoice_update)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="update_invoice",
        target_type="invoice",
        target_id=invoice_id,
        details="Marked paid" if invoice.paid else None
    )
    return invoice

@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    InvoiceService(db).delete_invoice(invoice_id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="delete_invoice",
        target_type="invoice",
        target_id=invoice_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
