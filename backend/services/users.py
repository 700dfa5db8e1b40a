"""User registration, authentication and profile updates."""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.exceptions import EmailAlreadyRegistered, InvalidCredentials, UserNotFound
from backend.models import User
from backend.security import hash_password, verify_password
from backend.services.store import run_in_transaction

logger = logging.getLogger(__name__)


def find_by_email(db: Session, email: str):
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return user


def _register_user(db: Session, name: str, email: str, password: str) -> User:
    if find_by_email(db, email) is not None:
        raise EmailAlreadyRegistered()
    user = User(name=name.strip(), email=email.strip().lower(), password_hash=hash_password(password))
    db.add(user)
    db.flush()
    logger.info("Registered user %s", user.id)
    return user


def register_user(db: Session, name: str, email: str, password: str) -> User:
    return run_in_transaction(db, _register_user, name, email, password)


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials; the error does not reveal which part was wrong."""
    user = find_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


def _update_profile(db: Session, user_id: int, name: Optional[str], email: Optional[str]) -> User:
    user = get_user(db, user_id)
    if email is not None:
        existing = find_by_email(db, email)
        if existing is not None and existing.id != user.id:
            raise EmailAlreadyRegistered()
        user.email = email.strip().lower()
    if name is not None:
        user.name = name.strip()
    logger.info("User %s updated their profile", user_id)
    return user


def update_profile(db: Session, user_id: int, name: Optional[str] = None, email: Optional[str] = None) -> User:
    """Change the user's name and/or email; emails stay unique regardless of case."""
    return run_in_transaction(db, _update_profile, user_id, name, email)
