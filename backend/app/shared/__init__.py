"""
Shared utilities (NOT business logic).

Usage:
    from app.shared import BaseRepository, normalize_activity_type
    from app.shared.errors import NotFoundError
"""
from .constants import (
    ActivityType,
    StravaActivityType,
    STRAVA_TO_ACTIVITY_TYPE,
    FILTER_ALL,
    EXTERNAL_SOURCE_STRAVA,
    normalize_activity_type,
    strava_type_to_activity_type,
)
from .errors import (
    AppError,
    NotFoundError,
    ConflictError,
    ActivityValidationError,
)
from .repository import BaseRepository
from .security import generate_temporary_password, hash_password, verify_password
from .validators import normalize_email

__all__ = [
    # constants
    "ActivityType",
    "StravaActivityType",
    "STRAVA_TO_ACTIVITY_TYPE",
    "FILTER_ALL",
    "EXTERNAL_SOURCE_STRAVA",
    "normalize_activity_type",
    "strava_type_to_activity_type",
    # errors
    "AppError",
    "NotFoundError",
    "ConflictError",
    "ActivityValidationError",
    # repository
    "BaseRepository",
    # security
    "generate_temporary_password",
    "hash_password",
    "verify_password",
    # validators
    "normalize_email",
]
