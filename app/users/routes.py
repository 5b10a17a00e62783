from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.models import User
from app.auth.schemas import UserCreate, UserUpdate, UserResponse
from app.services.user_service import UserService
from app.services.activity_service import ActivityService
from app.auth.dependencies import require_admin

router = APIRouter(prefix="/api/users", tags=["Users"])

@router.get("", response_model=List[UserResponse])
def list_users(
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db)
):
    return UserService(db).get_all_users()

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db)
):
    user = UserService(db).create_user(user_data)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="create_user",
        target_type="user",
        target_id=user.id,
        details=f"Created {user.role.value} account: {user.username}"
    )
    return user

@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db)
):
    user = UserService(db).get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db)
):
    user = UserService(db).update_user(user_id, user_update)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="update_user",
        target_type="user",
        target_id=user_id,
        details=f"Updated account: {user.username}"
    )
    return user

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db)
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    UserService(db).delete_user(user_id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="delete_user",
        target_type="user",
        target_id=user_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
