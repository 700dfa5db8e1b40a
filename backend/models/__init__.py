"""Teamspace Database Models"""
from backend.models.role import Role, RoleName
from backend.models.user import User
from backend.models.project import Project
from backend.models.project_member import ProjectMember
from backend.models.invite_link import InviteLink
from backend.models.task import Task, TaskProgress, TaskProgressEntry

__all__ = [
    "Role",
    "RoleName",
    "User",
    "Project",
    "ProjectMember",
    "InviteLink",
    "Task",
    "TaskProgress",
    "TaskProgressEntry",
]
