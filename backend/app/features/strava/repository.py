"""
Strava repositories.

Data access layer for Strava-related models.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import StravaWebhookSubscription


class WebhookSubscriptionRepository(BaseRepository[StravaWebhookSubscription]):
    """Repository for the (single) push subscription."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, StravaWebhookSubscription)

    async def get_current(self) -> StravaWebhookSubscription | None:
        """The stored subscription, if any."""
        result = await self.db.execute(
            select(StravaWebhookSubscription)
            .order_by(StravaWebhookSubscription.id)
            .limit(1)
        )
        return result.scalars().first()
