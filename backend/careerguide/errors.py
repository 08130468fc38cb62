"""Domain error taxonomy shared by services and HTTP handlers.

Services raise these exceptions with a human readable message; the
application-level exception handlers in `careerguide.main` turn them
into the failure envelope `{"success": false, "message": ...}`.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that carry an HTTP status and a message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    """A requested or referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Uniqueness violation, or a delete blocked by a live reference."""

    status_code = status.HTTP_409_CONFLICT


class InternalError(AppError):
    """Unexpected store failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class RequestError(ValidationError):
    """Malformed path or query input rejected by a controller.

    Always answered with 400, also when service errors are collapsed to
    500 by the legacy status mapping.
    """
