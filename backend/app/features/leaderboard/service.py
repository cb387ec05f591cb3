"""
Leaderboard aggregation.

Ranks athletes by total distance over their activities:
- filter users by gender and tenant, activities by type
- sum distance and duration per user, count activities
- drop users with no matching activity
- sort by total distance (desc), user id (asc) on ties
- apply offset and limit

Recomputed from stored activities on every call.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.features.activities.models import Activity
from app.features.activities.repository import ActivityRepository
from app.features.users.models import User
from app.features.users.repository import UserRepository
from app.shared.constants import FILTER_ALL, ActivityType, normalize_activity_type
from app.shared.errors import ActivityValidationError
from .schemas import LeaderboardEntry

logger = logging.getLogger(__name__)


@dataclass
class _Totals:
    distance: float = 0.0
    duration: int = 0
    count: int = 0


def build_leaderboard(
    users: Iterable[User],
    activities: Iterable[Activity],
    limit: int = 100,
    offset: int = 0,
) -> list[LeaderboardEntry]:
    """
    Aggregate activities per user and rank the result.

    Activities of users not in `users` are ignored, so callers filter
    users and activities independently.

    Args:
        users: Candidate users (already filtered)
        activities: Candidate activities (already filtered)
        limit: Maximum number of entries
        offset: Number of top entries to skip

    Returns:
        Entries with 1-based rank relative to the full ranking
    """
    users_by_id = {user.id: user for user in users}
    totals: dict[int, _Totals] = {}

    for activity in activities:
        if activity.user_id not in users_by_id:
            continue
        bucket = totals.setdefault(activity.user_id, _Totals())
        bucket.distance += activity.distance or 0.0
        bucket.duration += activity.duration or 0
        bucket.count += 1

    ranked = sorted(
        (user_id for user_id, bucket in totals.items() if bucket.count > 0),
        key=lambda user_id: (-totals[user_id].distance, user_id),
    )

    entries = []
    for position, user_id in enumerate(ranked[offset:offset + limit], start=offset + 1):
        user = users_by_id[user_id]
        bucket = totals[user_id]
        entries.append(LeaderboardEntry(
            rank=position,
            user_id=user_id,
            athlete_id=user.athlete_id,
            name=user.name,
            total_distance=round(bucket.distance, 2),
            total_duration=bucket.duration,
            activity_count=bucket.count,
        ))
    return entries


def _parse_type_filter(activity_type: Optional[str]) -> Optional[ActivityType]:
    if activity_type is None or activity_type.strip().lower() == FILTER_ALL:
        return None
    normalized = normalize_activity_type(activity_type)
    if normalized is None:
        raise ActivityValidationError(
            f"Unsupported activity type: {activity_type}", field="type"
        )
    return normalized


def _parse_gender_filter(gender: Optional[str]) -> Optional[str]:
    if gender is None:
        return None
    gender = gender.strip().lower()
    if not gender or gender == FILTER_ALL:
        return None
    return gender


class LeaderboardService:
    """
    Leaderboard queries.

    Usage:
        service = LeaderboardService(db)
        entries = await service.rank(activity_type="running", gender="female")
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.activities = ActivityRepository(db)

    async def rank(
        self,
        activity_type: Optional[str] = FILTER_ALL,
        gender: Optional[str] = FILTER_ALL,
        limit: Optional[int] = None,
        offset: int = 0,
        client_id: Optional[int] = None,
    ) -> list[LeaderboardEntry]:
        """
        Ranked leaderboard.

        Raises:
            ActivityValidationError: If the type filter is not a known type
        """
        type_filter = _parse_type_filter(activity_type)
        gender_filter = _parse_gender_filter(gender)
        if limit is None:
            limit = settings.leaderboard_default_limit

        users = await self.users.list_for_leaderboard(
            gender=gender_filter, client_id=client_id
        )
        activities = await self.activities.list_for_leaderboard(
            (user.id for user in users),
            activity_type=type_filter.value if type_filter else None,
        )

        entries = build_leaderboard(users, activities, limit=limit, offset=offset)
        logger.debug(
            f"Leaderboard type={type_filter.value if type_filter else FILTER_ALL} "
            f"gender={gender_filter or FILTER_ALL} client={client_id}: "
            f"{len(entries)} entries from {len(activities)} activities"
        )
        return entries
