"""Task endpoints"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.dependencies import get_current_user
from backend.models import User
from backend.schemas import TaskCreate, TaskProgressUpdate, TaskResponse, TaskUpdate
from backend.services import tasks as task_service

router = APIRouter()


@router.post("/{project_id}/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    project_id: int,
    task_in: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a task; viewers are not allowed to."""
    task = task_service.create_task(
        db, project_id, current_user.id, task_in.name, task_in.description, task_in.deadline
    )
    return TaskResponse.model_validate(task)


@router.get("/{project_id}/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    project_id: int,
    task_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.get_task(db, project_id, task_id, current_user.id)
    return TaskResponse.model_validate(task)


@router.patch("/{project_id}/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    project_id: int,
    task_id: int,
    task_update: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.update_task(
        db, project_id, task_id, current_user.id, task_update.model_dump(exclude_unset=True)
    )
    return TaskResponse.model_validate(task)


@router.put("/{project_id}/tasks/{task_id}/assign/{member_id}", response_model=TaskResponse)
async def assign_task(
    project_id: int,
    task_id: int,
    member_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.assign_task(db, project_id, task_id, member_id, current_user.id)
    return TaskResponse.model_validate(task)


@router.put("/{project_id}/tasks/{task_id}/progress", response_model=TaskResponse)
async def update_progress(
    project_id: int,
    task_id: int,
    progress_in: TaskProgressUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.update_progress(db, project_id, task_id, current_user.id, progress_in.progress)
    return TaskResponse.model_validate(task)


@router.delete("/{project_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    project_id: int,
    task_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task_service.delete_task(db, project_id, task_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
