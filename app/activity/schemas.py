from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ActivityLogResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    action: str
    target_type: str
    target_id: int
    details: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
