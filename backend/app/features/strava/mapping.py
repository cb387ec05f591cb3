"""
Remote activity -> ActivityCreate.

Strava reports distance in meters and time in seconds; we store km
(2 decimals) and the moving time. The Strava activity page serves as
proof for long activities.
"""

from datetime import datetime
from typing import Any, Optional

from app.features.activities.schemas import ActivityCreate
from app.shared.constants import EXTERNAL_SOURCE_STRAVA, strava_type_to_activity_type

STRAVA_ACTIVITY_URL = "https://www.strava.com/activities/{id}"


def _parse_start_date(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def map_strava_activity(remote: dict[str, Any]) -> Optional[ActivityCreate]:
    """
    Convert a Strava activity to an ingestion candidate.

    Returns:
        ActivityCreate, or None for unsupported activity types
    """
    activity_type = strava_type_to_activity_type(remote.get("type"))
    if activity_type is None:
        return None

    remote_id = remote.get("id")
    distance_m = remote.get("distance")
    moving_time = remote.get("moving_time")
    elevation = remote.get("total_elevation_gain")

    return ActivityCreate(
        type=activity_type.value,
        date=_parse_start_date(remote.get("start_date")),
        distance=round(distance_m / 1000, 2) if distance_m is not None else None,
        duration=int(round(moving_time)) if moving_time is not None else None,
        title=remote.get("name"),
        description=remote.get("description"),
        proof_link=STRAVA_ACTIVITY_URL.format(id=remote_id) if remote_id is not None else None,
        external_id=str(remote_id) if remote_id is not None else None,
        external_source=EXTERNAL_SOURCE_STRAVA,
        elevation_gain=round(elevation) if elevation is not None else None,
        avg_heart_rate=remote.get("average_heartrate"),
    )
