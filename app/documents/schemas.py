from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class DocumentBase(BaseModel):
    case_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

class DocumentCreate(DocumentBase):
    file_path: str = Field(..., min_length=1, max_length=500)
    file_size: Optional[int] = Field(None, ge=0)
    file_type: Optional[str] = Field(None, max_length=100)

class DocumentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None

class DocumentResponse(DocumentBase):
    id: int
    file_path: str
    file_size: Optional[int] = None
    file_type: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    uploaded_by: Optional[int] = None

    class Config:
        from_attributes = True

# Upload response
class DocumentUploadResponse(BaseModel):
    document: DocumentResponse
    message: str
