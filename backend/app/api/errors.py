"""
Domain error -> HTTP status translation for routes.
"""

from fastapi import HTTPException

from app.features.strava.exceptions import (
    EnvelopeFormatError,
    StravaAPIError,
    StravaError,
    StravaNotConfiguredError,
    StravaNotConnectedError,
    UpstreamAuthError,
    UpstreamTransientError,
)
from app.shared.errors import (
    ActivityValidationError,
    AppError,
    ConflictError,
    NotFoundError,
)

_STATUS_BY_ERROR: list[tuple[type[Exception], int]] = [
    (NotFoundError, 404),
    (ConflictError, 409),
    (ActivityValidationError, 400),
    (StravaNotConnectedError, 400),
    (EnvelopeFormatError, 400),
    (StravaNotConfiguredError, 503),
    (UpstreamAuthError, 401),
    (UpstreamTransientError, 502),
    (StravaAPIError, 502),
]


def http_error(error: AppError | StravaError) -> HTTPException:
    """HTTPException carrying the error message."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
