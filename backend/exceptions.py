"""Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; ``backend.main`` renders them
the same way FastAPI renders ``HTTPException`` (``{"detail": ...}``).
"""
from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Request could not be processed"

    def __init__(self, detail: str = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


# 404
class ProjectNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Project not found"


class TaskNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Task not found"


class MemberNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Member not found"


class UserNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "User not found"


class RoleNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Role not found"


class InvalidOrExpiredInvite(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Invalid or expired invite link"


# 403
class NotAMember(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "You are not a member of this project"


class NotAdministrator(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Only project administrators can perform this action"


class IsOwner(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "The project owner cannot be removed or leave the project"


class NotAuthorized(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "You are not authorized to perform this action"


class InviteLinksDisabled(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Joining by link is disabled for this project"


# 409
class AlreadyMember(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "You are already a member of this project"


class LastAdministrator(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "A project must keep at least one administrator"


class ConcurrentModification(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "The project was modified concurrently, please retry"


class EmailAlreadyRegistered(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Email already registered"


# Others
class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid email or password"


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class StorageFailure(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "The database is unavailable, please try again later"
