"""
Pydantic schemas for request/response validation
"""
from backend.schemas.user import UserCreate, UserLogin, UserUpdate, UserResponse, UserSummary, UserProjectSummary, Token
from backend.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskProgressUpdate,
    TaskProgressEntryResponse,
    TaskResponse,
)
from backend.schemas.project_member import ProjectMemberResponse, RoleAssign, LeaveResponse
from backend.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectSettings,
    ProjectSettingsUpdate,
    ProjectSummary,
    ProjectResponse,
)
from backend.schemas.invite import InviteTokenResponse, InviteDetailsResponse, JoinRequest, JoinResponse

__all__ = [
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "UserSummary",
    "UserProjectSummary",
    "Token",
    "TaskCreate",
    "TaskUpdate",
    "TaskProgressUpdate",
    "TaskProgressEntryResponse",
    "TaskResponse",
    "ProjectMemberResponse",
    "RoleAssign",
    "LeaveResponse",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectSettings",
    "ProjectSettingsUpdate",
    "ProjectSummary",
    "ProjectResponse",
    "InviteTokenResponse",
    "InviteDetailsResponse",
    "JoinRequest",
    "JoinResponse",
]
