"""Role registry: the closed catalog of project roles."""
import logging
from typing import Dict

from sqlalchemy.orm import Session

from backend.exceptions import RoleNotFound
from backend.models import Role, RoleName

logger = logging.getLogger(__name__)

CANONICAL_ROLES = tuple(role.value for role in RoleName)

# role name -> primary key, filled by ensure_seeded and lookups
_role_ids: Dict[str, int] = {}


def ensure_seeded(db: Session) -> None:
    """Create any missing canonical role. Safe to call repeatedly."""
    existing = {role.name: role for role in db.query(Role).filter(Role.name.in_(CANONICAL_ROLES)).all()}
    created = []
    for name in CANONICAL_ROLES:
        if name not in existing:
            existing[name] = Role(name=name)
            db.add(existing[name])
            created.append(name)
    if created:
        db.commit()
        logger.info("Seeded roles: %s", ", ".join(created))

    _role_ids.clear()
    _role_ids.update({name: role.id for name, role in existing.items()})


def lookup(db: Session, name) -> Role:
    """Return the role called ``name`` or raise ``RoleNotFound``."""
    name = name.value if isinstance(name, RoleName) else str(name).strip().lower()
    if name not in CANONICAL_ROLES:
        raise RoleNotFound(f"Role '{name}' does not exist")

    role_id = _role_ids.get(name)
    role = db.get(Role, role_id) if role_id is not None else None
    if role is None or role.name != name:
        role = db.query(Role).filter(Role.name == name).first()
        if role is None:
            raise RoleNotFound(f"Role '{name}' does not exist")
        _role_ids[name] = role.id
    return role
