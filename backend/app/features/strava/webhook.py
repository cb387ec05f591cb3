"""
Strava webhook processing.

Strava pushes {object_type, object_id, aspect_type, owner_id, ...} for
every activity or athlete change. The HTTP layer acknowledges at once
and schedules process_webhook_event(); this module decides what the
event means for us:

    object_type == "activity"  else ignored_object_type
    aspect_type == "create"    else ignored_aspect_type
    owner_id -> local user     else ignored_unknown_athlete
    fresh token, GET /activities/{id}
    Run / Ride / Walk          else ignored_activity_type
    ingestion                  -> imported / skipped_duplicate / rejected

Strava does not wait for processing, so nothing is retried here.
"""

import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.features.activities.schemas import AdmissionOutcome
from app.features.activities.service import ActivityIngestionService
from .client import StravaClient
from .exceptions import StravaError
from .identity import resolve_by_provider_athlete_id
from .mapping import map_strava_activity
from .oauth import StravaOAuth
from .tokens import StravaTokenService

logger = logging.getLogger(__name__)


class WebhookEvent(BaseModel):
    """Push event body."""

    model_config = ConfigDict(extra="ignore")

    object_type: Optional[str] = None
    object_id: Optional[Union[int, str]] = None
    aspect_type: Optional[str] = None
    owner_id: Optional[Union[int, str]] = None
    subscription_id: Optional[Union[int, str]] = None
    event_time: Optional[int] = None
    updates: dict[str, Any] = {}


class WebhookOutcome(str, Enum):
    IGNORED_OBJECT_TYPE = "ignored_object_type"
    IGNORED_ASPECT_TYPE = "ignored_aspect_type"
    IGNORED_UNKNOWN_ATHLETE = "ignored_unknown_athlete"
    IGNORED_ACTIVITY_TYPE = "ignored_activity_type"
    IMPORTED = "imported"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class WebhookResult:
    outcome: WebhookOutcome
    user_id: Optional[int] = None
    activity_id: Optional[int] = None
    detail: Optional[str] = None


_ADMISSION_TO_OUTCOME = {
    AdmissionOutcome.INSERTED: WebhookOutcome.IMPORTED,
    AdmissionOutcome.SKIPPED_DUPLICATE: WebhookOutcome.SKIPPED_DUPLICATE,
    AdmissionOutcome.REJECTED: WebhookOutcome.REJECTED,
}


def verify_subscription(
    mode: Optional[str],
    verify_token: Optional[str],
    expected_token: Optional[str] = None,
) -> bool:
    """
    Subscription handshake check.

    True iff mode is "subscribe" and the token equals the configured
    secret. Without a configured secret every handshake fails.
    """
    expected = expected_token if expected_token is not None else settings.strava_webhook_verify_token
    if mode != "subscribe" or not expected or verify_token is None:
        return False
    return hmac.compare_digest(verify_token.encode(), expected.encode())


class WebhookProcessor:
    """
    Turns one push event into at most one stored activity.

    Usage:
        processor = WebhookProcessor(db)
        result = await processor.handle(event)
    """

    def __init__(
        self,
        db: AsyncSession,
        oauth: Optional[StravaOAuth] = None,
        client: Optional[StravaClient] = None,
    ):
        self.db = db
        self.tokens = StravaTokenService(db, oauth)
        self.client = client or StravaClient()
        self.ingestion = ActivityIngestionService(db)

    async def handle(self, event: WebhookEvent) -> WebhookResult:
        if event.object_type != "activity":
            logger.info(f"Ignoring non-activity event: {event.object_type}")
            return WebhookResult(WebhookOutcome.IGNORED_OBJECT_TYPE)

        if event.aspect_type != "create":
            logger.info(f"Ignoring {event.aspect_type} event for activity {event.object_id}")
            return WebhookResult(WebhookOutcome.IGNORED_ASPECT_TYPE)

        if event.owner_id is None or event.object_id is None:
            logger.info("Ignoring activity event without owner or object id")
            return WebhookResult(WebhookOutcome.IGNORED_UNKNOWN_ATHLETE)

        user = await resolve_by_provider_athlete_id(self.db, event.owner_id)
        if user is None:
            logger.info(f"No user found for Strava athlete {event.owner_id}")
            return WebhookResult(WebhookOutcome.IGNORED_UNKNOWN_ATHLETE)

        try:
            envelope = await self.tokens.get_fresh_envelope(user)
            remote = await self.client.get_activity(envelope.access_token, event.object_id)
        except StravaError as e:
            logger.error(
                f"Could not fetch Strava activity {event.object_id} for user {user.id}: {e}"
            )
            return WebhookResult(WebhookOutcome.FAILED, user_id=user.id, detail=str(e))

        candidate = map_strava_activity(remote or {})
        if candidate is None:
            logger.info(
                f"Ignoring Strava activity {event.object_id} of type {(remote or {}).get('type')}"
            )
            return WebhookResult(WebhookOutcome.IGNORED_ACTIVITY_TYPE, user_id=user.id)

        admission = await self.ingestion.admit(candidate, user.id)
        outcome = _ADMISSION_TO_OUTCOME[admission.outcome]
        logger.info(
            f"Strava activity {event.object_id} for user {user.id}: {outcome.value}"
        )
        return WebhookResult(
            outcome,
            user_id=user.id,
            activity_id=admission.activity.id if admission.activity else None,
            detail=admission.reason,
        )


async def process_webhook_event(
    payload: Any,
    session_factory: async_sessionmaker,
    oauth: Optional[StravaOAuth] = None,
    client: Optional[StravaClient] = None,
) -> Optional[WebhookResult]:
    """
    Background entry point: own session, never raises.

    Returns:
        WebhookResult, or None if the payload is not an event
    """
    try:
        event = WebhookEvent.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Discarding malformed Strava webhook payload: {e.error_count()} errors")
        return None

    async with session_factory() as db:
        try:
            return await WebhookProcessor(db, oauth=oauth, client=client).handle(event)
        except Exception:
            logger.exception(f"Error processing Strava webhook event for {event.object_id}")
            await db.rollback()
            return WebhookResult(WebhookOutcome.FAILED)
