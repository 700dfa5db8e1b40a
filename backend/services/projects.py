"""Project lifecycle: creation, details, settings and cascading deletion."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.models import Project, ProjectMember, RoleName
from backend.services import guards, invites, roles
from backend.services.store import load_project, run_in_transaction

logger = logging.getLogger(__name__)


def _create_project(db: Session, owner_id: int, name: str, description: Optional[str]) -> Project:
    administrator = roles.lookup(db, RoleName.ADMINISTRATOR)
    project = Project(name=name, description=description, owner_id=owner_id)
    project.members.append(ProjectMember(user_id=owner_id, role=administrator))
    db.add(project)
    db.flush()
    logger.info("User %s created project %s", owner_id, project.id)
    return project


def create_project(db: Session, owner_id: int, name: str, description: Optional[str] = None) -> Project:
    """Create a project owned by ``owner_id``, who becomes its only administrator."""
    return run_in_transaction(db, _create_project, owner_id, name, description)


def get_project(db: Session, project_id: int, user_id: int) -> Project:
    project = load_project(db, project_id)
    guards.require_member(project, user_id)
    return project


def list_user_projects(db: Session, user_id: int) -> List[Project]:
    return (
        db.query(Project)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .filter(ProjectMember.user_id == user_id)
        .order_by(Project.created_at.desc(), Project.id.desc())
        .all()
    )


def _update_details(db: Session, project_id: int, user_id: int, name: Optional[str], description: Optional[str]) -> Project:
    project = load_project(db, project_id)
    guards.require_administrator(project, user_id)
    if name is not None:
        project.name = name
    if description is not None:
        project.description = description
    return project


def update_project_details(
    db: Session,
    project_id: int,
    user_id: int,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Project:
    return run_in_transaction(db, _update_details, project_id, user_id, name, description)


def _update_settings(
    db: Session,
    project_id: int,
    user_id: int,
    join_by_link_enabled: Optional[bool],
    pdf_generation_enabled: Optional[bool],
) -> Project:
    project = load_project(db, project_id)
    guards.require_administrator(project, user_id)

    if join_by_link_enabled is not None:
        project.join_by_link_enabled = join_by_link_enabled
        if not join_by_link_enabled:
            invites.revoke_all(db, project_id)
    if pdf_generation_enabled is not None:
        project.pdf_generation_enabled = pdf_generation_enabled
    return project


def update_project_settings(
    db: Session,
    project_id: int,
    user_id: int,
    join_by_link_enabled: Optional[bool] = None,
    pdf_generation_enabled: Optional[bool] = None,
) -> Project:
    return run_in_transaction(
        db, _update_settings, project_id, user_id, join_by_link_enabled, pdf_generation_enabled
    )


def _delete_project(db: Session, project_id: int, user_id: int) -> None:
    project = load_project(db, project_id)
    guards.require_administrator(project, user_id)

    task_count = len(project.tasks)
    member_count = len(project.members)
    # Tasks, invite links and memberships go with the project through ORM cascades
    db.delete(project)
    db.flush()
    logger.info(
        "User %s deleted project %s (%d tasks, %d members)",
        user_id,
        project_id,
        task_count,
        member_count,
    )


def delete_project(db: Session, project_id: int, user_id: int) -> None:
    """Delete the project with its tasks, invite links and memberships in one transaction."""
    run_in_transaction(db, _delete_project, project_id, user_id)
