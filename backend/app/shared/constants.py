"""
Unified constants for activity types and leaderboard filters.

This module provides a single source of truth for activity type naming
across the entire application. Every ingestion path (manual entry,
CSV, Strava sync, Strava webhook) normalizes through
normalize_activity_type().
"""

from enum import Enum
from typing import Optional


class ActivityType(str, Enum):
    """
    Our canonical activity types.

    Used in:
    - Activity.type column
    - Leaderboard type filter
    """
    RUNNING = "running"
    CYCLING = "cycling"
    WALKING = "walking"


class StravaActivityType(str, Enum):
    """
    Activity types from Strava API.

    These are Strava's naming conventions, not ours.
    Use STRAVA_TO_ACTIVITY_TYPE to map to our types.
    """
    RUN = "Run"
    RIDE = "Ride"
    WALK = "Walk"


# Mapping: Strava type -> our ActivityType
STRAVA_TO_ACTIVITY_TYPE: dict[StravaActivityType, ActivityType] = {
    StravaActivityType.RUN: ActivityType.RUNNING,
    StravaActivityType.RIDE: ActivityType.CYCLING,
    StravaActivityType.WALK: ActivityType.WALKING,
}


# Spellings seen in older data and clients: "Running", "run", "Ride", ...
_ACTIVITY_TYPE_ALIASES: dict[str, ActivityType] = {
    "running": ActivityType.RUNNING,
    "run": ActivityType.RUNNING,
    "cycling": ActivityType.CYCLING,
    "ride": ActivityType.CYCLING,
    "walking": ActivityType.WALKING,
    "walk": ActivityType.WALKING,
}


# Wildcard value for leaderboard filters
FILTER_ALL = "all"

# Value for Activity.external_source on Strava imports
EXTERNAL_SOURCE_STRAVA = "strava"


def normalize_activity_type(value: Optional[str]) -> Optional[ActivityType]:
    """
    Map any known spelling to the canonical ActivityType.

    Returns None for unsupported types (e.g. "Swim", "Hike").
    """
    if value is None:
        return None
    if isinstance(value, ActivityType):
        return value
    return _ACTIVITY_TYPE_ALIASES.get(str(value).strip().lower())


def strava_type_to_activity_type(strava_type: Optional[str]) -> Optional[ActivityType]:
    """Map a Strava activity type ("Run", "Ride", "Walk") to ours."""
    try:
        return STRAVA_TO_ACTIVITY_TYPE[StravaActivityType(strava_type)]
    except ValueError:
        return None
