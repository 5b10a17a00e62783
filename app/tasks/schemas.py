from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, date
from app.models import TaskStatus


class TaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: str = Field("medium", max_length=20)
    assigned_to: Optional[int] = None
    case_id: Optional[int] = None
    due_date: Optional[date] = None

class TaskCreate(TaskBase):
    pass

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[str] = Field(None, max_length=20)
    assigned_to: Optional[int] = None
    case_id: Optional[int] = None
    due_date: Optional[date] = None

class TaskResponse(TaskBase):
    id: int
    priority: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None

    class Config:
        from_attributes = True
