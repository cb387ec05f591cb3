"""
Webhook subscription registry.

Strava allows a single push subscription per application. We keep its
id in storage so any process can inspect or delete it.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.shared.errors import ConflictError, NotFoundError
from .client import StravaClient
from .exceptions import StravaAPIError, StravaNotConfiguredError
from .models import StravaWebhookSubscription
from .repository import WebhookSubscriptionRepository

logger = logging.getLogger(__name__)


class StravaSubscriptionService:
    """
    Create, inspect and delete the push subscription.

    Usage:
        service = StravaSubscriptionService(db)
        subscription = await service.create("https://api.example.com/api/v1/strava/webhook")
    """

    def __init__(self, db: AsyncSession, client: Optional[StravaClient] = None):
        self.db = db
        self.client = client or StravaClient()
        self.subscriptions = WebhookSubscriptionRepository(db)

    async def get(self) -> Optional[StravaWebhookSubscription]:
        return await self.subscriptions.get_current()

    async def create(self, callback_url: str) -> StravaWebhookSubscription:
        """
        Register callback_url with Strava and store the subscription.

        Raises:
            ConflictError: If a subscription is already stored or Strava
                has one for another callback URL
            StravaNotConfiguredError: If credentials or verify token are missing
        """
        if await self.subscriptions.get_current():
            raise ConflictError("A Strava webhook subscription already exists")
        if not settings.strava_webhook_verify_token:
            raise StravaNotConfiguredError("Strava webhook verify token is not configured")

        registered = await self.client.list_push_subscriptions()
        if registered:
            remote = registered[0]
            if remote.get("callback_url") != callback_url:
                raise ConflictError(
                    f"Strava already has a subscription for {remote.get('callback_url')}"
                )
            # Registered earlier but never stored here
            subscription = await self.subscriptions.create(
                subscription_id=str(remote["id"]),
                callback_url=callback_url,
            )
            await self.db.commit()
            logger.info(f"Adopted existing Strava subscription {subscription.subscription_id}")
            return subscription

        response = await self.client.create_push_subscription(
            callback_url, settings.strava_webhook_verify_token
        )
        if not response or "id" not in response:
            raise StravaAPIError("Strava did not return a subscription id")

        subscription = await self.subscriptions.create(
            subscription_id=str(response["id"]),
            callback_url=callback_url,
        )
        await self.db.commit()
        logger.info(f"Created Strava subscription {subscription.subscription_id} -> {callback_url}")
        return subscription

    async def delete(self) -> None:
        """
        Delete the subscription at Strava and forget it.

        Raises:
            NotFoundError: If no subscription is stored
        """
        subscription = await self.subscriptions.get_current()
        if subscription is None:
            raise NotFoundError("Webhook subscription", "current")

        await self.client.delete_push_subscription(subscription.subscription_id)
        await self.subscriptions.delete(subscription)
        await self.db.commit()
        logger.info(f"Deleted Strava subscription {subscription.subscription_id}")
