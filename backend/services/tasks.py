"""Project tasks and their progress lifecycle."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session, selectinload

from backend.exceptions import NotAuthorized, TaskNotFound, ValidationFailed
from backend.models import Project, RoleName, Task, TaskProgress, TaskProgressEntry
from backend.services import guards
from backend.services.store import load_project, run_in_transaction

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description", "deadline")


def _is_past(moment: datetime) -> bool:
    # Naive deadlines are taken as UTC
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment < datetime.now(timezone.utc)


def _load_task(db: Session, project: Project, task_id: int) -> Task:
    task = (
        db.query(Task)
        .options(selectinload(Task.progress_history))
        .filter(Task.id == task_id, Task.project_id == project.id)
        .first()
    )
    if task is None:
        raise TaskNotFound("Task not found in this project")
    return task


def get_task(db: Session, project_id: int, task_id: int, user_id: int) -> Task:
    project = load_project(db, project_id)
    guards.require_member(project, user_id)
    return _load_task(db, project, task_id)


def _create_task(
    db: Session,
    project_id: int,
    user_id: int,
    name: str,
    description: Optional[str],
    deadline: datetime,
) -> Task:
    project = load_project(db, project_id)
    member = guards.require_member(project, user_id)
    if member.role.name == RoleName.VIEWER.value:
        raise NotAuthorized("Viewers are not authorized to create tasks")
    if _is_past(deadline):
        raise ValidationFailed("Task deadline cannot be in the past")

    task = Task(
        name=name,
        description=description,
        deadline=deadline,
        project_id=project.id,
        created_by_id=user_id,
        progress=TaskProgress.TODO,
    )
    db.add(task)
    db.flush()
    logger.info("User %s created task %s in project %s", user_id, task.id, project_id)
    return task


def create_task(
    db: Session,
    project_id: int,
    user_id: int,
    name: str,
    description: Optional[str],
    deadline: datetime,
) -> Task:
    return run_in_transaction(db, _create_task, project_id, user_id, name, description, deadline)


def _update_task(db: Session, project_id: int, task_id: int, user_id: int, updates: Dict[str, Any]) -> Task:
    project = load_project(db, project_id)
    task = _load_task(db, project, task_id)
    if user_id not in (project.owner_id, task.created_by_id):
        raise NotAuthorized("You are not authorized to update this task")

    if updates.get("progress") is not None:
        _record_progress(project, task, user_id, TaskProgress(updates["progress"]))
    for field_name in UPDATABLE_FIELDS:
        if updates.get(field_name) is not None:
            setattr(task, field_name, updates[field_name])
    return task


def update_task(db: Session, project_id: int, task_id: int, user_id: int, updates: Dict[str, Any]) -> Task:
    """Apply the non-null ``updates``; allowed for the project owner and the task creator.

    A ``progress`` value is recorded like :func:`update_progress` and needs the
    owner or the assignee.
    """
    return run_in_transaction(db, _update_task, project_id, task_id, user_id, updates)


def _assign_task(db: Session, project_id: int, task_id: int, member_id: int, user_id: int) -> Task:
    project = load_project(db, project_id)
    task = _load_task(db, project, task_id)
    guards.require_target_member(project, member_id)
    if project.owner_id != user_id:
        raise NotAuthorized("Only the project owner can assign tasks")

    task.assigned_to_id = member_id
    logger.info("Task %s in project %s assigned to user %s", task_id, project_id, member_id)
    return task


def assign_task(db: Session, project_id: int, task_id: int, member_id: int, user_id: int) -> Task:
    return run_in_transaction(db, _assign_task, project_id, task_id, member_id, user_id)


def _record_progress(project: Project, task: Task, user_id: int, progress: TaskProgress) -> None:
    if user_id not in (project.owner_id, task.assigned_to_id):
        raise NotAuthorized("Only the project owner or assigned member can update task progress")
    task.progress = progress
    task.progress_history.append(TaskProgressEntry(progress=progress, updated_by_id=user_id))


def _update_progress(db: Session, project_id: int, task_id: int, user_id: int, progress: TaskProgress) -> Task:
    project = load_project(db, project_id)
    task = _load_task(db, project, task_id)
    _record_progress(project, task, user_id, progress)
    return task


def update_progress(db: Session, project_id: int, task_id: int, user_id: int, progress: TaskProgress) -> Task:
    """Set the task's progress and record the change in its history."""
    return run_in_transaction(db, _update_progress, project_id, task_id, user_id, TaskProgress(progress))


def _delete_task(db: Session, project_id: int, task_id: int, user_id: int) -> None:
    project = load_project(db, project_id)
    task = _load_task(db, project, task_id)
    if user_id not in (project.owner_id, task.created_by_id):
        raise NotAuthorized("You are not authorized to delete this task")
    db.delete(task)
    logger.info("User %s deleted task %s from project %s", user_id, task_id, project_id)


def delete_task(db: Session, project_id: int, task_id: int, user_id: int) -> None:
    run_in_transaction(db, _delete_task, project_id, task_id, user_id)
