"""Domain errors raised by services and dependencies.

Each one is an ``HTTPException`` with a fixed status code, so FastAPI renders
it as ``{"detail": ...}`` wherever it is raised.
"""

from fastapi import HTTPException


class ClubPortalError(HTTPException):
    status_code = 400

    def __init__(self, detail: str, headers: dict[str, str] | None = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class ValidationError(ClubPortalError):
    status_code = 400


class DuplicateError(ClubPortalError):
    status_code = 400


class NotConfiguredError(ClubPortalError):
    status_code = 400


class AlreadyAssignedError(ClubPortalError):
    status_code = 400


class InvalidCredentials(ClubPortalError):
    status_code = 401

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(detail)


class Unauthorized(ClubPortalError):
    status_code = 401

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ClubPortalError):
    status_code = 403

    def __init__(self, detail: str = "Access denied for this role"):
        super().__init__(detail)


class NotFound(ClubPortalError):
    status_code = 404
