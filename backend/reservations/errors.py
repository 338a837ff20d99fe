"""Error taxonomy shared by services and routers.

Every error is an ``HTTPException`` so services can raise it directly and the
handlers in ``main`` render it as ``{"error": message}``.
"""
from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(
            status_code=status_code or self.status_code,
            detail=message or self.default_message,
        )

    @property
    def message(self) -> str:
        return self.detail


class InvalidInputError(AppError):
    """Missing or malformed fields, bad dates, end <= start."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class InvalidStatusError(InvalidInputError):
    default_message = "Invalid status"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: str | None = None):
        super().__init__(message)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access only"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class VenueConflictError(ConflictError):
    default_message = (
        "This venue is already booked for the selected date and time. "
        "Please choose a different schedule or venue."
    )


class UpstreamError(AppError):
    """Record store or identity provider failure.

    Raised with ``status_code=400`` when the caller can correct the request
    (duplicate email, rejected credentials format), 500 otherwise.
    """

    default_message = "Upstream service failure"
