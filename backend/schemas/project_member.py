"""Schemas for project members"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from backend.models import RoleName
from backend.schemas.user import UserSummary


class ProjectMemberResponse(BaseModel):
    user: UserSummary
    role: RoleName
    joined_at: datetime


class RoleAssign(BaseModel):
    role: str = Field(..., min_length=1, description="administrator, developer or viewer")


class LeaveResponse(BaseModel):
    left: bool
    last_admin_choice: bool = False
    message: str
    candidates: List[ProjectMemberResponse] = []
