"""Project record access shared by the mutating services.

A project is always read together with its members and their roles, which is
the snapshot the guards in ``backend.services.guards`` evaluate. Writes that
change membership must call :func:`touch` so the project's version column is
bumped; a concurrent writer holding an older snapshot then fails with
``StaleDataError`` and :func:`run_in_transaction` re-runs its operation once
against fresh data.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Callable, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.orm.exc import StaleDataError

from backend.exceptions import AppError, ConcurrentModification, ProjectNotFound, StorageFailure
from backend.models import Project, ProjectMember

logger = logging.getLogger(__name__)

T = TypeVar("T")

WRITE_ATTEMPTS = 2
READ_RETRY_BACKOFF_SECONDS = 0.2


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _project_query(db: Session):
    return db.query(Project).options(
        selectinload(Project.members).joinedload(ProjectMember.role),
        selectinload(Project.members).joinedload(ProjectMember.user),
    )


def load_project(db: Session, project_id: int) -> Project:
    """Fetch the project snapshot or raise ``ProjectNotFound``.

    Connection errors are retried once after a short pause; reads are safe to
    repeat.
    """
    try:
        project = _project_query(db).filter(Project.id == project_id).first()
    except OperationalError:
        logger.warning("Reading project %s failed, retrying once", project_id)
        db.rollback()
        time.sleep(READ_RETRY_BACKOFF_SECONDS)
        try:
            project = _project_query(db).filter(Project.id == project_id).first()
        except OperationalError as exc:
            db.rollback()
            raise StorageFailure() from exc

    if project is None:
        raise ProjectNotFound()
    return project


def touch(project: Project) -> None:
    """Mark the project row as changed so its version is incremented on flush."""
    project.updated_at = utcnow()


def run_in_transaction(db: Session, operation: Callable[..., T], *args, **kwargs) -> T:
    """Run ``operation(db, *args, **kwargs)`` and commit.

    The operation must read everything it validates through ``db``. A version
    conflict rolls back and runs the operation again on fresh data, so guards
    are evaluated against the state that will actually be written. Business
    errors are never retried.
    """
    for attempt in range(1, WRITE_ATTEMPTS + 1):
        try:
            result = operation(db, *args, **kwargs)
            db.commit()
            return result
        except StaleDataError:
            db.rollback()
            logger.warning(
                "Concurrent modification in %s (attempt %d of %d)",
                operation.__name__,
                attempt,
                WRITE_ATTEMPTS,
            )
        except AppError:
            db.rollback()
            raise
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Database error in %s", operation.__name__)
            raise StorageFailure() from exc

    raise ConcurrentModification()
