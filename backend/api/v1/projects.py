"""Project endpoints"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.dependencies import get_current_user
from backend.models import Project, ProjectMember, User
from backend.schemas import (
    ProjectCreate,
    ProjectMemberResponse,
    ProjectResponse,
    ProjectSettings,
    ProjectSettingsUpdate,
    ProjectSummary,
    ProjectUpdate,
    TaskResponse,
    UserSummary,
)
from backend.services import projects as project_service

router = APIRouter()


def serialize_member(member: ProjectMember) -> ProjectMemberResponse:
    return ProjectMemberResponse(
        user=UserSummary.model_validate(member.user),
        role=member.role.name,
        joined_at=member.joined_at,
    )


def serialize_project(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        owner_id=project.owner_id,
        created_at=project.created_at,
        updated_at=project.updated_at,
        settings=ProjectSettings.model_validate(project),
        members=[serialize_member(member) for member in project.members],
        tasks=[TaskResponse.model_validate(task) for task in project.tasks],
    )


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_in: ProjectCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a project; the creator becomes its owner and administrator."""
    project = project_service.create_project(db, current_user.id, project_in.name, project_in.description)
    return serialize_project(project)


@router.get("", response_model=List[ProjectSummary])
async def list_projects(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return project_service.list_user_projects(db, current_user.id)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = project_service.get_project(db, project_id, current_user.id)
    return serialize_project(project)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = project_service.update_project_details(
        db, project_id, current_user.id, project_update.name, project_update.description
    )
    return serialize_project(project)


@router.put("/{project_id}/settings", response_model=ProjectResponse)
async def update_settings(
    project_id: int,
    settings_update: ProjectSettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change project feature flags. Turning off join-by-link revokes existing invite links."""
    project = project_service.update_project_settings(
        db,
        project_id,
        current_user.id,
        join_by_link_enabled=settings_update.join_by_link_enabled,
        pdf_generation_enabled=settings_update.pdf_generation_enabled,
    )
    return serialize_project(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project_service.delete_project(db, project_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
