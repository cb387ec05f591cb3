"""
Activity repository.

Data access layer for activities.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy import select, desc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import Activity

logger = logging.getLogger(__name__)


class ActivityRepository(BaseRepository[Activity]):
    """Repository for activities."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Activity)

    async def list_for_user(self, user_id: int) -> list[Activity]:
        """
        Get user activities.

        Args:
            user_id: Owner's ID

        Returns:
            Activities ordered by date (newest first)
        """
        result = await self.db.execute(
            select(Activity)
            .where(Activity.user_id == user_id)
            .order_by(desc(Activity.date), desc(Activity.id))
        )
        return list(result.scalars().all())

    async def get_by_external_id(self, user_id: int, external_id: str) -> Activity | None:
        """Imported activity for (user, remote id), if any."""
        return await self.get_by(user_id=user_id, external_id=external_id)

    async def insert_if_absent(self, **fields) -> tuple[Activity, bool]:
        """
        Insert an imported activity unless (user_id, external_id) exists.

        The lookup is only a fast path; the unique constraint decides
        when two imports race. The insert runs in a SAVEPOINT so losing
        the race does not poison the surrounding transaction.

        Returns:
            (activity, inserted) where activity is the stored row
        """
        user_id = fields["user_id"]
        external_id = fields["external_id"]

        existing = await self.get_by_external_id(user_id, external_id)
        if existing:
            return existing, False

        activity = Activity(**fields)
        try:
            async with self.db.begin_nested():
                self.db.add(activity)
                await self.db.flush()
        except IntegrityError:
            existing = await self.get_by_external_id(user_id, external_id)
            if existing is None:
                raise
            logger.debug(
                f"Concurrent import of {external_id} for user {user_id} lost the race"
            )
            return existing, False

        await self.db.refresh(activity)
        return activity, True

    async def list_for_leaderboard(
        self,
        user_ids: Iterable[int],
        activity_type: Optional[str] = None
    ) -> list[Activity]:
        """
        Activities of the given users, optionally of one type.

        Ordered by id so aggregation sees them in insertion order.
        """
        user_ids = list(user_ids)
        if not user_ids:
            return []

        query = (
            select(Activity)
            .where(Activity.user_id.in_(user_ids))
            .order_by(Activity.id)
        )
        if activity_type:
            query = query.where(Activity.type == activity_type)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_for_users(self, user_ids: Iterable[int]) -> int:
        """Number of activities owned by any of the given users."""
        user_ids = list(user_ids)
        if not user_ids:
            return 0
        result = await self.db.execute(
            select(func.count())
            .select_from(Activity)
            .where(Activity.user_id.in_(user_ids))
        )
        return result.scalar() or 0
