from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models import User
from app.cases.schemas import (
    CaseCreate, CaseUpdate as CaseUpdateSchema, CaseResponse, CaseDetailResponse,
    CaseAssignmentCreate, CaseUserResponse
)
from app.services.case_service import CaseService
from app.services.activity_service import ActivityService
from app.auth.dependencies import get_current_user, require_lawyer_or_admin

router = APIRouter(prefix="/api/cases", tags=["Cases"])

# =====================================================
# CASE CRUD OPERATIONS
# =====================================================

def _visible_case_or_404(service: CaseService, case_id: int, current_user: User):
    case = service.get_case_for_user(case_id, current_user.id, current_user.role)
    if not case:
        raise HTTPException(status_code=404, detail="Case not found")
    return case

@router.post("", response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
def create_case(
    case_data: CaseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new case. The creator is assigned to it as primary."""
    case = CaseService(db).create_case(case_data, created_by=current_user.id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="create_case",
        target_type="case",
        target_id=case.id,
        details=f"Opened case: {case.title}"
    )
    return case

@router.get("", response_model=List[CaseResponse])
def list_cases(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List cases the current user may see."""
    return CaseService(db).get_cases_for_user(current_user.id, current_user.role)

@router.get("/search", response_model=List[CaseResponse])
def search_cases(
    q: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = CaseService(db)
    matches = service.search_cases(q or "")
    visible = {case.id for case in service.get_cases_for_user(current_user.id, current_user.role)}
    return [case for case in matches if case.id in visible]

@router.get("/{case_id}", response_model=CaseDetailResponse)
def get_case(
    case_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a case with its assignments."""
    return _visible_case_or_404(CaseService(db), case_id, current_user)

@router.put("/{case_id}", response_model=CaseResponse)
def update_case(
    case_id: int,
    case_update: CaseUpdateSchema,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = CaseService(db)
    _visible_case_or_404(service, case_id, current_user)
    case = service.update_case(case_id, case_update)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="update_case",
        target_type="case",
        target_id=case_id,
        details=f"Updated case: {case.title}"
    )
    return case

@router.delete("/{case_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_case(
    case_id: int,
    current_user: User = Depends(require_lawyer_or_admin()),
    db: Session = Depends(get_db)
):
    """Delete a case (lawyer/admin only). Its invoices survive without a case."""
    service = CaseService(db)
    case = _visible_case_or_404(service, case_id, current_user)
    title = case.title
    service.delete_case(case_id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="delete_case",
        target_type="case",
        target_id=case_id,
        details=f"Deleted case: {title}"
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# =====================================================
# CASE ASSIGNMENTS
# =====================================================

@router.post("/{case_id}/users", response_model=CaseUserResponse, status_code=status.HTTP_201_CREATED)
def assign_user(
    case_id: int,
    assignment: CaseAssignmentCreate,
    current_user: User = Depends(require_lawyer_or_admin()),
    db: Session = Depends(get_db)
):
    service = CaseService(db)
    _visible_case_or_404(service, case_id, current_user)
    case_user = service.assign_user_to_case(case_id, assignment.user_id, assignment.role.value)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="assign_case",
        target_type="case",
        target_id=case_id,
        details=f"Assigned user {assignment.user_id} as {assignment.role.value}"
    )
    return case_user
