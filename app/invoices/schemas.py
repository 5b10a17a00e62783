from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, date
from decimal import Decimal


class InvoiceBase(BaseModel):
    case_id: Optional[int] = None  # None for a standalone invoice
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None
    paid: bool = False
    due_date: Optional[date] = None
    paid_date: Optional[date] = None

class InvoiceCreate(InvoiceBase):
    pass

class InvoiceUpdate(BaseModel):
    case_id: Optional[int] = None
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None
    paid: Optional[bool] = None
    due_date: Optional[date] = None
    paid_date: Optional[date] = None

class InvoiceResponse(InvoiceBase):
    id: int
    paid: Optional[bool] = False
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None

    class Config:
        from_attributes = True
