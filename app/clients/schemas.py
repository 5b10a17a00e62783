from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ClientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    national_id: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

class ClientCreate(ClientBase):
    pass

class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    national_id: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

class ClientResponse(ClientBase):
    id: int
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None

    class Config:
        from_attributes = True

class ClientDeletionConstraints(BaseModel):
    can_delete: bool
    related_cases: int = 0
    related_sessions: int = 0
    related_documents: int = 0
    related_invoices: int = 0
    related_tasks: int = 0
    message: Optional[str] = None
