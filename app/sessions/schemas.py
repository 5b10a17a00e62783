from pydantic import BaseModel, Field
from typing import Optional
import datetime
from app.models import SessionStatus


class SessionBase(BaseModel):
    case_id: int
    title: str = Field(..., min_length=1, max_length=255)
    date: datetime.date
    time: datetime.time
    location: Optional[str] = Field(None, max_length=255)
    status: SessionStatus = SessionStatus.SCHEDULED
    notes: Optional[str] = None

class SessionCreate(SessionBase):
    pass

class SessionUpdate(BaseModel):
    case_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[datetime.date] = None
    time: Optional[datetime.time] = None
    location: Optional[str] = Field(None, max_length=255)
    status: Optional[SessionStatus] = None
    notes: Optional[str] = None

class SessionResponse(SessionBase):
    id: int
    created_at: Optional[datetime.datetime] = None
    created_by: Optional[int] = None

    class Config:
        from_attributes = True
