"""Membership invariant checks.

Every function here works on a project that is already loaded with its
members and their roles, and either returns or raises one of the errors in
``backend.exceptions``. Mutating operations compose them in the order
existence -> authorization -> invariant preservation before writing.

The administrator count is always computed on the state *after* the proposed
change, never before it.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from backend.exceptions import (
    AlreadyMember,
    IsOwner,
    LastAdministrator,
    MemberNotFound,
    NotAdministrator,
    NotAMember,
)
from backend.models import Project, ProjectMember, RoleName


@dataclass(frozen=True)
class RoleChange:
    user_id: int
    role_name: str


@dataclass(frozen=True)
class Removal:
    user_id: int


MembershipChange = Union[RoleChange, Removal]


def find_member(project: Project, user_id: int) -> Optional[ProjectMember]:
    for member in project.members:
        if member.user_id == user_id:
            return member
    return None


def _is_admin_role(role_name: Optional[str]) -> bool:
    return role_name == RoleName.ADMINISTRATOR.value


def is_administrator(member: ProjectMember) -> bool:
    return _is_admin_role(member.role.name)


def count_administrators(role_names: Iterable[Optional[str]]) -> int:
    """Number of administrators among ``role_names``; ``None`` marks a removed member."""
    return sum(1 for role_name in role_names if _is_admin_role(role_name))


def require_member(project: Project, user_id: int) -> ProjectMember:
    member = find_member(project, user_id)
    if member is None:
        raise NotAMember()
    return member


def require_administrator(project: Project, user_id: int) -> ProjectMember:
    member = require_member(project, user_id)
    if not is_administrator(member):
        raise NotAdministrator()
    return member


def require_target_member(project: Project, user_id: int) -> ProjectMember:
    member = find_member(project, user_id)
    if member is None:
        raise MemberNotFound("User is not a member of this project")
    return member


def require_not_owner(project: Project, user_id: int) -> None:
    if project.owner_id == user_id:
        raise IsOwner()


def require_unique_membership(project: Project, user_id: int) -> None:
    if find_member(project, user_id) is not None:
        raise AlreadyMember()


def _role_after_change(member: ProjectMember, change: MembershipChange) -> Optional[str]:
    if member.user_id != change.user_id:
        return member.role.name
    if isinstance(change, Removal):
        return None
    return change.role_name


def administrators_after_change(project: Project, change: MembershipChange) -> int:
    return count_administrators(_role_after_change(member, change) for member in project.members)


def require_admin_count_after_change(project: Project, change: MembershipChange) -> None:
    remaining = [member for member in project.members if not (isinstance(change, Removal) and member.user_id == change.user_id)]
    if remaining and administrators_after_change(project, change) < 1:
        raise LastAdministrator()
