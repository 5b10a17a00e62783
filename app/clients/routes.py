from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models import User
from app.clients.schemas import ClientCreate, ClientUpdate, ClientResponse, ClientDeletionConstraints
from app.documents.schemas import DocumentResponse
from app.services.client_service import ClientService
from app.services.document_service import DocumentService
from app.services.activity_service import ActivityService
from app.auth.dependencies import get_current_user, require_lawyer_or_admin

router = APIRouter(prefix="/api/clients", tags=["Clients"])

@router.get("", response_model=List[ClientResponse])
def list_clients(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List clients, newest first."""
    return ClientService(db).get_all_clients()

@router.get("/search", response_model=List[ClientResponse])
def search_clients(
    q: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return ClientService(db).search_clients(q or "")

@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    client_data: ClientCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    client = ClientService(db).create_client(client_data, created_by=current_user.id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="create_client",
        target_type="client",
        target_id=client.id,
        details=f"Added client: {client.name}"
    )
    return client

@router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    client = ClientService(db).get_client(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client

@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    client_update: ClientUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    client = ClientService(db).update_client(client_id, client_update)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="update_client",
        target_type="client",
        target_id=client_id,
        details=f"Updated client: {client.name}"
    )
    return client

@router.get("/{client_id}/deletion-constraints", response_model=ClientDeletionConstraints)
def get_deletion_constraints(
    client_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """What a delete of this client would take with it. Advisory only."""
    return ClientService(db).check_client_deletion_constraints(client_id)

@router.get("/{client_id}/documents", response_model=List[DocumentResponse])
def list_client_documents(
    client_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not ClientService(db).get_client(client_id):
        raise HTTPException(status_code=404, detail="Client not found")
    return DocumentService(db).get_documents_for_client(client_id)

@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: int,
    current_user: User = Depends(require_lawyer_or_admin()),
    db: Session = Depends(get_db)
):
    """Delete a client and cascade through all of its cases (lawyer/admin only)."""
    ClientService(db).delete_client(client_id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="delete_client",
        target_type="client",
        target_id=client_id,
        details="Deleted client"
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
