"""Membership operations: assign role, remove member, leave, join via invite."""
import logging
from dataclasses import dataclass, field
from typing import List

from sqlalchemy.orm import Session

from backend.models import Project, ProjectMember, RoleName
from backend.services import guards, invites, roles
from backend.services.store import load_project, run_in_transaction, touch

logger = logging.getLogger(__name__)


@dataclass
class LeaveResult:
    left: bool
    last_admin_choice: bool = False
    candidates: List[ProjectMember] = field(default_factory=list)


def _assign_role(db: Session, project_id: int, target_user_id: int, acting_user_id: int, role_name: str) -> Project:
    project = load_project(db, project_id)
    guards.require_administrator(project, acting_user_id)
    role = roles.lookup(db, role_name)
    target = guards.require_target_member(project, target_user_id)
    guards.require_admin_count_after_change(project, guards.RoleChange(target_user_id, role.name))

    if target.role_id != role.id:
        target.role = role
        touch(project)
        logger.info(
            "User %s set role of user %s in project %s to %s",
            acting_user_id,
            target_user_id,
            project_id,
            role.name,
        )
    return project


def assign_role(db: Session, project_id: int, target_user_id: int, acting_user_id: int, role_name: str) -> Project:
    return run_in_transaction(db, _assign_role, project_id, target_user_id, acting_user_id, role_name)


def _remove_member(db: Session, project_id: int, acting_user_id: int, target_user_id: int) -> None:
    project = load_project(db, project_id)
    guards.require_administrator(project, acting_user_id)
    target = guards.require_target_member(project, target_user_id)
    guards.require_not_owner(project, target_user_id)
    guards.require_admin_count_after_change(project, guards.Removal(target_user_id))

    project.members.remove(target)
    touch(project)
    logger.info("User %s removed user %s from project %s", acting_user_id, target_user_id, project_id)


def remove_member(db: Session, project_id: int, acting_user_id: int, target_user_id: int) -> None:
    run_in_transaction(db, _remove_member, project_id, acting_user_id, target_user_id)


def _leave_project(db: Session, project_id: int, acting_user_id: int) -> LeaveResult:
    project = load_project(db, project_id)
    member = guards.require_member(project, acting_user_id)
    guards.require_not_owner(project, acting_user_id)

    if guards.administrators_after_change(project, guards.Removal(acting_user_id)) < 1:
        # The caller must first promote someone else or delete the project
        candidates = [other for other in project.members if other.user_id != acting_user_id]
        logger.info("User %s is the last administrator of project %s; leave needs a choice", acting_user_id, project_id)
        return LeaveResult(left=False, last_admin_choice=True, candidates=candidates)

    project.members.remove(member)
    touch(project)
    logger.info("User %s left project %s", acting_user_id, project_id)
    return LeaveResult(left=True)


def leave_project(db: Session, project_id: int, acting_user_id: int) -> LeaveResult:
    return run_in_transaction(db, _leave_project, project_id, acting_user_id)


def _join_via_invite(db: Session, token: str, user_id: int) -> int:
    link = invites.redeem(db, token)
    project = load_project(db, link.project_id)
    guards.require_unique_membership(project, user_id)

    viewer = roles.lookup(db, RoleName.VIEWER)
    project.members.append(ProjectMember(user_id=user_id, role=viewer))
    touch(project)
    logger.info("User %s joined project %s through an invite link", user_id, project.id)
    return project.id


def join_via_invite(db: Session, token: str, user_id: int) -> int:
    """Add ``user_id`` to the token's project as a viewer and return the project id."""
    return run_in_transaction(db, _join_via_invite, token, user_id)
