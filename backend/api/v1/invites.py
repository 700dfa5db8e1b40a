"""Invite link redemption endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.dependencies import get_current_user
from backend.models import User
from backend.schemas import InviteDetailsResponse, JoinRequest, JoinResponse
from backend.services import invites as invite_service
from backend.services import membership as membership_service

router = APIRouter()


@router.get("/invites/{token}", response_model=InviteDetailsResponse)
async def invite_details(token: str, db: Session = Depends(get_db)):
    """Public preview of the project an invite link leads to."""
    details = invite_service.invite_details(db, token)
    return InviteDetailsResponse(
        project_id=details.project_id,
        project_name=details.project_name,
        project_description=details.project_description,
        invited_by=details.invited_by,
    )


@router.post("/invites/join", response_model=JoinResponse)
async def join_project(
    join_in: JoinRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project_id = membership_service.join_via_invite(db, join_in.token, current_user.id)
    return JoinResponse(project_id=project_id)
