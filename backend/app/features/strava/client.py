"""
Strava API client.

Provides methods for interacting with Strava API v3:
- athlete activity listing and single activity fetch
- push subscription management (webhooks)

Strava API Limits:
- 200 requests per 15 minutes
- 2,000 requests per day
A 429 is surfaced as StravaRateLimitError; nothing is retried here.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from app.config import settings
from .exceptions import (
    StravaAPIError,
    StravaNotConfiguredError,
    StravaRateLimitError,
    UpstreamAuthError,
    UpstreamTransientError,
)

logger = logging.getLogger(__name__)


class StravaClient:
    """
    Async client for Strava API.

    Usage:
        client = StravaClient()
        activities = await client.get_activities(access_token, per_page=50)
        activity = await client.get_activity(access_token, 123456)
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
    ):
        self._transport = transport
        self.client_id = client_id if client_id is not None else settings.strava_client_id
        self.client_secret = (
            client_secret if client_secret is not None else settings.strava_client_secret
        )

    async def _request(
        self,
        method: str,
        endpoint: str,
        access_token: Optional[str] = None,
        params: Optional[dict] = None,
        data: Optional[dict] = None,
    ) -> Any:
        """
        Make an API request.

        Raises:
            UpstreamAuthError: 401/403
            StravaRateLimitError: 429
            UpstreamTransientError: Network failure or 5xx
            StravaAPIError: Any other non-success status
        """
        headers = {}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=settings.strava_http_timeout
            ) as client:
                response = await client.request(
                    method=method,
                    url=f"{self.API_URL}{endpoint}",
                    headers=headers,
                    params=params,
                    data=data,
                )
        except httpx.HTTPError as e:
            logger.error(f"Strava {method} {endpoint} failed: {e}")
            raise UpstreamTransientError(f"Strava request failed: {e}") from e

        # Log rate limit headers from Strava
        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if response.status_code in (401, 403):
            raise UpstreamAuthError(f"Strava rejected credentials: {response.status_code}")
        elif response.status_code == 429:
            logger.error(f"Strava rate limit exceeded on {endpoint}")
            raise StravaRateLimitError("Strava rate limit exceeded")
        elif response.status_code >= 500:
            logger.error(f"Strava {method} {endpoint} returned {response.status_code}")
            raise UpstreamTransientError(f"Strava error: {response.status_code}")
        elif response.status_code >= 300:
            raise StravaAPIError(
                f"API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamTransientError(f"Strava returned invalid JSON for {endpoint}") from e

    # -------------------------------------------------------------------------
    # Activities
    # -------------------------------------------------------------------------

    async def get_activities(
        self,
        access_token: str,
        after: Optional[datetime] = None,
        page: int = 1,
        per_page: int = 30
    ) -> list[dict]:
        """
        Get athlete activities (summary representation).

        Args:
            access_token: Valid access token
            after: Only activities after this time
            page: Page number (default 1)
            per_page: Results per page (max 200)
        """
        params = {"page": page, "per_page": min(per_page, 200)}
        if after:
            params["after"] = int(after.timestamp())

        return await self._request("GET", "/athlete/activities", access_token, params) or []

    async def get_activity(self, access_token: str, activity_id: int | str) -> dict:
        """Get one activity (detailed representation)."""
        return await self._request(
            "GET",
            f"/activities/{activity_id}",
            access_token,
            params={"include_all_efforts": "false"}
        )

    # -------------------------------------------------------------------------
    # Push subscriptions (app credentials, no athlete token)
    # -------------------------------------------------------------------------

    def _app_credentials(self) -> dict:
        if not (self.client_id and self.client_secret):
            raise StravaNotConfiguredError()
        return {"client_id": self.client_id, "client_secret": self.client_secret}

    async def create_push_subscription(self, callback_url: str, verify_token: str) -> dict:
        """
        Register the webhook callback. Strava calls it back with a GET
        verification request before answering.

        Returns:
            {"id": <subscription id>}
        """
        return await self._request(
            "POST",
            "/push_subscriptions",
            data={
                **self._app_credentials(),
                "callback_url": callback_url,
                "verify_token": verify_token,
            },
        )

    async def list_push_subscriptions(self) -> list[dict]:
        """Subscriptions registered for this application (at most one)."""
        return await self._request(
            "GET", "/push_subscriptions", params=self._app_credentials()
        ) or []

    async def delete_push_subscription(self, subscription_id: int | str) -> None:
        await self._request(
            "DELETE",
            f"/push_subscriptions/{subscription_id}",
            params=self._app_credentials(),
        )
