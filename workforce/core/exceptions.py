# workforce/core/exceptions.py
from fastapi import status


class TrackerError(Exception):
    """Base class for declined operations. Carries the HTTP status and a stable code."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "TrackerError"
    message = "Operation declined"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ConflictError(TrackerError):
    """The user's current state does not allow the operation."""


class AlreadyCheckedIn(ConflictError):
    code = "AlreadyCheckedIn"
    message = "Already checked in"


class NotCheckedIn(ConflictError):
    code = "NotCheckedIn"
    message = "Not checked in today"


class AlreadyCheckedOut(ConflictError):
    code = "AlreadyCheckedOut"
    message = "Already checked out"


class SessionAlreadyActive(ConflictError):
    code = "SessionAlreadyActive"
    message = "Session already active"


class NoActiveSession(ConflictError):
    code = "NoActiveSession"
    message = "No active session"


class NotFoundError(TrackerError):
    status_code = status.HTTP_404_NOT_FOUND


class SessionNotFound(NotFoundError):
    code = "SessionNotFound"
    message = "Session not found"


class EmployeeNotFound(NotFoundError):
    code = "EmployeeNotFound"
    message = "Employee not found"


class Forbidden(TrackerError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "Forbidden"
    message = "Forbidden"


class StorageFailure(TrackerError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "StorageFailure"
    message = "Storage failure"
