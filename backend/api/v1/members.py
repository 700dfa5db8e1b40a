"""Membership endpoints: roles, removal, leaving and invite links"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from backend.api.v1.projects import serialize_member, serialize_project
from backend.database import get_db
from backend.dependencies import get_current_user
from backend.models import User
from backend.schemas import InviteTokenResponse, LeaveResponse, ProjectResponse, RoleAssign
from backend.services import invites as invite_service
from backend.services import membership as membership_service

router = APIRouter()


@router.put("/{project_id}/members/{user_id}/role", response_model=ProjectResponse)
async def assign_role(
    project_id: int,
    user_id: int,
    role_in: RoleAssign,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = membership_service.assign_role(db, project_id, user_id, current_user.id, role_in.role)
    return serialize_project(project)


@router.delete("/{project_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    project_id: int,
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    membership_service.remove_member(db, project_id, current_user.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/leave", response_model=LeaveResponse)
async def leave_project(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Leave a project.

    The last administrator is not removed; the response lists the members
    that could be promoted instead, and the caller may also delete the project.
    """
    result = membership_service.leave_project(db, project_id, current_user.id)
    if result.last_admin_choice:
        return LeaveResponse(
            left=False,
            last_admin_choice=True,
            message="You are the last administrator. Assign another administrator or delete the project.",
            candidates=[serialize_member(member) for member in result.candidates],
        )
    return LeaveResponse(left=True, message="You have left the project")


@router.post("/{project_id}/invite", response_model=InviteTokenResponse)
async def issue_invite(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    link = invite_service.issue(db, project_id, current_user.id)
    return InviteTokenResponse.model_validate(link)


@router.post("/{project_id}/invite/disable", status_code=status.HTTP_204_NO_CONTENT)
async def disable_invites(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    invite_service.disable_invites(db, project_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
