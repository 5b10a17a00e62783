from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.models import User
from app.tasks.schemas import TaskCreate, TaskUpdate, TaskResponse
from app.services.task_service import TaskService
from app.services.activity_service import ActivityService
from app.auth.dependencies import get_current_user

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])

@router.get("", response_model=List[TaskResponse])
def list_tasks(
    mine: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """All tasks, or with ``?mine=true`` those assigned to or created by the caller."""
    service = TaskService(db)
    if mine:
        return service.get_tasks_for_user(current_user.id)
    return service.get_all_tasks()

@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task = TaskService(db).create_task(task_data, created_by=current_user.id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="create_task",
        target_type="task",
        target_id=task.id,
        details=f"Created task: {task.title}"
    )
    return task

@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task = TaskService(db).get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task

@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task = TaskService(db).update_task(task_id, task_update)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="update_task",
        target_type="task",
        target_id=task_id,
        details=f"Task {task.title} is {task.status.value}"
    )
    return task

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    TaskService(db).delete_task(task_id)

    ActivityService(db).log_activity(
        user_id=current_user.id,
        action="delete_task",
        target_type="task",
        target_id=task_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
