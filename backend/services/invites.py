"""Invite links: reusable bearer tokens that let a user join a project as a viewer."""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from backend.config import settings
from backend.exceptions import InvalidOrExpiredInvite, InviteLinksDisabled, ProjectNotFound
from backend.models import InviteLink
from backend.services import guards
from backend.services.store import load_project, run_in_transaction, touch, utcnow

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


@dataclass
class InviteDetails:
    project_id: int
    project_name: str
    project_description: Optional[str]
    invited_by: str


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def is_expired(link: InviteLink, now: Optional[datetime] = None) -> bool:
    if link.expires_at is None:
        return False
    return _as_aware(link.expires_at) <= (now or utcnow())


def _new_expiry() -> Optional[datetime]:
    if settings.INVITE_TOKEN_TTL_HOURS is None:
        return None
    return utcnow() + timedelta(hours=settings.INVITE_TOKEN_TTL_HOURS)


def _issue(db: Session, project_id: int, acting_user_id: int) -> InviteLink:
    project = load_project(db, project_id)
    guards.require_administrator(project, acting_user_id)
    if not project.join_by_link_enabled:
        raise InviteLinksDisabled()

    existing = db.query(InviteLink).filter(InviteLink.project_id == project_id).first()
    if existing is not None:
        if not is_expired(existing):
            return existing
        db.delete(existing)
        db.flush()

    link = InviteLink(
        project_id=project_id,
        token=secrets.token_hex(TOKEN_BYTES),
        created_by_id=acting_user_id,
        expires_at=_new_expiry(),
    )
    db.add(link)
    # A concurrent issuer holding the same snapshot now conflicts and re-reads
    touch(project)
    db.flush()
    logger.info("User %s issued an invite link for project %s", acting_user_id, project_id)
    return link


def issue(db: Session, project_id: int, acting_user_id: int) -> InviteLink:
    """Return the project's live invite link, creating one if needed."""
    return run_in_transaction(db, _issue, project_id, acting_user_id)


def redeem(db: Session, token: str) -> InviteLink:
    """Resolve ``token`` to its invite link. Does not change any state."""
    link = None
    if token:
        link = db.query(InviteLink).filter(InviteLink.token == token).first()
    if link is None or is_expired(link):
        raise InvalidOrExpiredInvite()
    return link


def revoke_all(db: Session, project_id: int) -> int:
    """Delete every invite link of the project; the caller commits."""
    deleted = db.query(InviteLink).filter(InviteLink.project_id == project_id).delete(synchronize_session=False)
    if deleted:
        logger.info("Revoked %d invite link(s) for project %s", deleted, project_id)
    return deleted


def _disable_invites(db: Session, project_id: int, acting_user_id: int) -> None:
    project = load_project(db, project_id)
    guards.require_administrator(project, acting_user_id)
    revoke_all(db, project_id)
    project.join_by_link_enabled = False


def disable_invites(db: Session, project_id: int, acting_user_id: int) -> None:
    run_in_transaction(db, _disable_invites, project_id, acting_user_id)


def invite_details(db: Session, token: str) -> InviteDetails:
    """Describe the project behind ``token`` for the join page."""
    link = None
    if token:
        link = (
            db.query(InviteLink)
            .options(selectinload(InviteLink.project), selectinload(InviteLink.creator))
            .filter(InviteLink.token == token)
            .first()
        )
    if link is None or is_expired(link):
        raise InvalidOrExpiredInvite()
    if link.project is None:
        raise ProjectNotFound()

    return InviteDetails(
        project_id=link.project.id,
        project_name=link.project.name,
        project_description=link.project.description,
        invited_by=link.creator.name,
    )
