from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date
from app.models import CaseStatus, AssignmentRole

# Base schemas
class CaseBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100)
    status: CaseStatus = CaseStatus.ACTIVE
    court: Optional[str] = Field(None, max_length=255)
    client_id: int

    # Case details
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    notes: Optional[str] = None

class CaseCreate(CaseBase):
    pass

class CaseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[CaseStatus] = None
    court: Optional[str] = Field(None, max_length=255)
    client_id: Optional[int] = None

    # Case details
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    notes: Optional[str] = None

class CaseUserResponse(BaseModel):
    id: int
    case_id: int
    user_id: int
    role: Optional[str] = None
    assigned_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CaseResponse(CaseBase):
    id: int
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None

    class Config:
        from_attributes = True

class CaseDetailResponse(CaseResponse):
    # Relationships
    assignments: List[CaseUserResponse] = []

# Case assignment schemas
class CaseAssignmentCreate(BaseModel):
    user_id: int
    role: AssignmentRole = AssignmentRole.SECONDARY
