"""Error hierarchy — every failure a request can end in.

Each error knows its HTTP status and the per-field messages it reports;
``to_envelope()`` renders it through the envelope builder so the global
handler never has to special-case a subclass.
"""

from fastapi import status

from userapi.core.responses import (
    INVALID,
    NOT_FOUND,
    SAVE_FAILED,
    UNAUTHORIZE,
    build_error,
)
from userapi.schemas.common import Envelope, ErrorSet


class ApiError(Exception):
    """Base exception for all request-terminating failures."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, errors: ErrorSet, message: str | None = None):
        self.errors = errors
        super().__init__(message or self.__class__.__name__)

    def to_envelope(self) -> Envelope:
        return build_error(self.errors)


class ValidationFailed(ApiError):
    """One or more fields broke their rules."""

    http_status = 422

    def __init__(self, errors: ErrorSet):
        super().__init__(errors, f"Validation failed for: {', '.join(errors)}")


class EmailAlreadyTaken(ValidationFailed):
    """The unique constraint on ``users.email`` rejected a write."""

    def __init__(self):
        super().__init__({"email": ["The email has already been taken."]})


class AuthorizationError(ApiError):
    http_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorize"):
        super().__init__({"user": [UNAUTHORIZE]}, message)


class NotFoundError(ApiError):
    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, field: str = "data"):
        self.field = field
        super().__init__({field: [NOT_FOUND]}, f"{field} not found")


class CredentialMismatch(ApiError):
    http_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__({"password": [INVALID]}, "Password does not match")


class PersistenceError(ApiError):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Save failed"):
        super().__init__({"user": [SAVE_FAILED]}, message)
