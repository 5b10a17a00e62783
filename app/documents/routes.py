from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Form, Query, Response
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from decouple import config
import logging
import os
import uuid
import mimetypes
from pathlib import Path

from app.database import get_db
from app.models import User, Document
from app.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentUploadResponse
)
from app.services.case_service import CaseService
from app.services.document_service import DocumentService
from app.services.activity_service import ActivityService
from app.auth.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["Documents"])

# Configuration
UPLOAD_DIR = config("UPLOAD_DIR", default="uploads/documents")
MAX_FILE_SIZE = config("MAX_UPLOAD_SIZE", default=10 * 1024 * 1024, cast=int)  # 10MB
ALLOWED_EXTENSIONS = {
    '.pdf', '.doc', '.docx', '.txt', '.rtf',
    '.jpg', '.jpeg', '.png', '.gif',
    '.xls', '.xlsx'
}

def validate_file(file: UploadFile) -> None:
    """Validate uploaded file."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    file_extension = Path(file.filename).suffix.lower()
    if file_extension not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"File type not allowed. Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

async def save_uploaded_file(file: UploadFile) -> tuple[str, int]:
    """Save uploaded file under a random name and return path and size."""
    content = await file.read()
    file_size = len(content)

    if file_size > MAX_FILE_SIZE:
        raise HTTPException(status_code=400, detail="File too large")

    os.makedirs(UPLOAD_DIR, exist_ok=True)
    filename = f"{uuid.uuid4()}{Path(file.filename).suffix.lower()}"
    file_path = os.path.join(UPLOAD_DIR, filename)

    with open(file_path, "wb") as f:
        f.write(content)

    return file_path, file_size

def remove_stored_file(file_path: str) -> None:
    try:
        if os.path.exists(file_path):
            os.remove(file_path)
    except OSError:
        # The row is already gone; a stray file is not worth failing the request
        logger.warning("Could not remove stored file %s", file_path, exc_info=True)

def _document_or_404(db: Session, document_id: int) -> Document:
    document = DocumentService(db).get_document(document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return document

def _stored_file(document: Document, disposition: str) -> FileResponse:
    if not os.path.exists(document.file_path):
        raise HTTPException(status_code=404, detail="File not found on disk")

    media_type = document.file_type or mimetypes.guess_type(document.file_path)[0] or 'application/octet-stream'
    filename = f"{document.title}{Path(document.file_path).suffix}"
    return FileResponse(
        document.file_path,
        media_type=media_type,
        filename=filename,
        content_disposition_type=disposition
    )

# =====================================================
# DOCUMENT CRUD OPERATIONS
# =====================================================

@router.post("", response_model=DocumentUploadResponse, status_code=status.HTTP_201_CREATED)
@router.post("/upload", response_model=DocumentUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    case_id: int = Form(...),
    title: str = Form(...),
    description: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Upload a file and attach it to a case."""
    validate_file(file)
    if not CaseService(db).get_case(case_id):
        raise HTTPException(status_code=400, detail=f"Case {case_id} does not exist")

    file_path, file_size = await save_uploaded_file(file)
    file_type = file.content_type or mimetypes.guess_type(file.filename)[0] or 'application/octet-stream'

    document = DocumentService(db).create_document(
        DocumentCreate(
            case_id=case_id,
            title=title,
            description=description,
            file_path=file_path,
            file_size=file_size,
            file_type=file_type
        ),
        uploaded_by=current_user.id
    )

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="upload_document",
        target_type="document",
        target_id=document.id,
        details=f"Uploaded document: {document.title}"
    )

    return DocumentUploadResponse(
        document=document,
        message="Document uploaded successfully"
    )

@router.get("", response_model=List[DocumentResponse])
def list_documents(
    case_id: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = DocumentService(db)
    if case_id is not None:
        return service.get_documents_by_case(case_id)
    return service.get_all_documents()

@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _document_or_404(db, document_id)

@router.get("/{document_id}/download")
def download_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _stored_file(_document_or_404(db, document_id), "attachment")

@router.get("/{document_id}/view")
def view_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _stored_file(_document_or_404(db, document_id), "inline")

@router.put("/{document_id}", response_model=DocumentResponse)
def update_document(
    document_id: int,
    document_update: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    document = DocumentService(db).update_document(document_id, document_update)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="update_document",
        target_type="document",
        target_id=document_id,
        details=f"Updated document: {document.title}"
    )
    return document

@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a document row and its stored file."""
    file_path = DocumentService(db).delete_document(document_id)
    remove_stored_file(file_path)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="delete_document",
        target_type="document",
        target_id=document_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
