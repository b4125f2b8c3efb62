"""
Application error taxonomy.

Every failure the service reports to a client is an AppError carrying:
- kind: one of ErrorKind (which fixes the HTTP status)
- message: human readable text sent back in the envelope
The Flask error handlers in api.errors turn these into responses.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    # (label, http status); labels keep members with equal statuses distinct
    NOT_FOUND = ("not_found", 404)
    VALIDATION = ("validation", 405)
    CONFLICT = ("conflict", 409)
    INVALID_CREDENTIALS = ("invalid_credentials", 403)
    INVALID_TOKEN = ("invalid_token", 403)
    INTERNAL = ("internal", 500)

    def __init__(self, label: str, http_status: int):
        self.label = label
        self.http_status = http_status


def status_for(code: int) -> str:
    """'fail' for client caused errors (4xx), 'error' for everything else."""
    return "fail" if str(code).startswith("4") else "error"


class AppError(Exception):
    kind = ErrorKind.INTERNAL
    default_message = "something bad happened"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.http_status

    @property
    def status(self) -> str:
        return status_for(self.status_code)

    def to_dict(self) -> dict:
        return {"status": self.status, "message": self.message}


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "not found"


class ValidationFailed(AppError):
    kind = ErrorKind.VALIDATION
    default_message = "invalid input"


class Conflict(AppError):
    kind = ErrorKind.CONFLICT
    default_message = "already exists"


class InvalidCredentials(AppError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "incorrect id or password"


class InvalidToken(AppError):
    kind = ErrorKind.INVALID_TOKEN
    default_message = "token incorrect"


class InternalError(AppError):
    kind = ErrorKind.INTERNAL
