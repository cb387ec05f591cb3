"""
Strava integration module.

Usage:
    from app.features.strava import StravaOAuth, StravaTokenService
    from app.features.strava.sync import StravaSyncService

Components:
- CredentialEnvelope: Token JSON stored in User.strava_token
- StravaOAuth: OAuth flow (auth URL, token exchange, refresh)
- StravaTokenService: Envelope persistence with race-safe refresh
- StravaClient: API client (activities, push subscriptions)
- resolve_by_provider_athlete_id: Webhook owner -> local user
- WebhookProcessor: Push event handling
- StravaSubscriptionService: Push subscription registry

Models:
- StravaWebhookSubscription: Stored push subscription
"""

from .models import StravaWebhookSubscription
from .exceptions import (
    StravaError,
    StravaAPIError,
    StravaNotConfiguredError,
    StravaNotConnectedError,
    StravaRateLimitError,
    UpstreamAuthError,
    UpstreamTransientError,
    EnvelopeFormatError,
)
from .envelope import CredentialEnvelope
from .oauth import StravaOAuth
from .client import StravaClient
from .mapping import map_strava_activity
from .identity import resolve_by_provider_athlete_id
from .tokens import StravaTokenService
from .webhook import (
    WebhookEvent,
    WebhookOutcome,
    WebhookProcessor,
    WebhookResult,
    process_webhook_event,
    verify_subscription,
)
from .subscription import StravaSubscriptionService

__all__ = [
    # Models
    "StravaWebhookSubscription",
    # Errors
    "StravaError",
    "StravaAPIError",
    "StravaNotConfiguredError",
    "StravaNotConnectedError",
    "StravaRateLimitError",
    "UpstreamAuthError",
    "UpstreamTransientError",
    "EnvelopeFormatError",
    # OAuth and tokens
    "CredentialEnvelope",
    "StravaOAuth",
    "StravaTokenService",
    # API
    "StravaClient",
    "map_strava_activity",
    "resolve_by_provider_athlete_id",
    # Webhooks
    "WebhookEvent",
    "WebhookOutcome",
    "WebhookProcessor",
    "WebhookResult",
    "process_webhook_event",
    "verify_subscription",
    "StravaSubscriptionService",
]
