from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List, Optional

from app.models import Case, Document
from app.documents.schemas import DocumentCreate, DocumentUpdate
from app.services.exceptions import NotFoundError, ValidationError, reject_nulls


class DocumentService:
    def __init__(self, db: Session):
        self.db = db

    def get_document(self, document_id: int) -> Optional[Document]:
        return self.db.query(Document).filter(Document.id == document_id).first()

    def get_all_documents(self) -> List[Document]:
        return self.db.query(Document).order_by(desc(Document.uploaded_at), desc(Document.id)).all()

    def get_documents_by_case(self, case_id: int) -> List[Document]:
        return self.db.query(Document).filter(
            Document.case_id == case_id
        ).order_by(desc(Document.uploaded_at), desc(Document.id)).all()

    def get_documents_for_client(self, client_id: int) -> List[Document]:
        """Documents across every case of a client."""
        return self.db.query(Document).join(Case, Case.id == Document.case_id).filter(
            Case.client_id == client_id
        ).order_by(desc(Document.uploaded_at), desc(Document.id)).all()

    def create_document(self, document_data: DocumentCreate, uploaded_by: int) -> Document:
        if not self.db.query(Case.id).filter(Case.id == document_data.case_id).first():
            raise ValidationError(f"Case {document_data.case_id} does not exist")

        document = Document(**document_data.dict(), uploaded_by=uploaded_by)
        self.db.add(document)
        self.db.commit()
        self.db.refresh(document)
        return document

    def update_document(self, document_id: int, document_update: DocumentUpdate) -> Document:
        document = self.get_document(document_id)
        if not document:
            raise NotFoundError("document", document_id)

        update_data = document_update.dict(exclude_unset=True)
        reject_nulls(update_data, ("title",))

        for field, value in update_data.items():
            setattr(document, field, value)

        self.db.commit()
        self.db.refresh(document)
        return document

    def delete_document(self, document_id: int) -> str:
        """Delete the row and return its file path so the caller can remove the file."""
        document = self.get_document(document_id)
        if not document:
            raise NotFoundError("document", document_id)
        file_path = document.file_path
        self.db.delete(document)
        self.db.commit()
        return file_path
