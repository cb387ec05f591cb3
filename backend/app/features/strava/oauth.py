"""
Strava OAuth flow.

Handles:
- Authorization URL generation
- Code exchange for tokens
- Token refresh (ensure_fresh)
- Token revocation (deauthorization)

No persistence here; StravaTokenService stores the envelopes.
"""

import logging
import time
from typing import Any, Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from app.config import settings
from .envelope import CredentialEnvelope
from .exceptions import StravaNotConfiguredError, UpstreamAuthError, UpstreamTransientError

logger = logging.getLogger(__name__)

# Read private activities too; the leaderboard counts every workout
DEFAULT_SCOPE = "read,activity:read_all"


class StravaOAuth:
    """
    Strava OAuth handler.

    Usage:
        oauth = StravaOAuth()
        auth_url = oauth.get_authorization_url(
            redirect_uri="https://example.com/strava/callback",
            state="42"
        )
        envelope = await oauth.exchange_code(code)
        envelope, refreshed = await oauth.ensure_fresh(envelope)
    """

    AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
    TOKEN_URL = "https://www.strava.com/oauth/token"
    DEAUTHORIZE_URL = "https://www.strava.com/oauth/deauthorize"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        refresh_margin_seconds: Optional[int] = None,
    ):
        self.client_id = client_id if client_id is not None else settings.strava_client_id
        self.client_secret = (
            client_secret if client_secret is not None else settings.strava_client_secret
        )
        self.refresh_margin_seconds = (
            refresh_margin_seconds
            if refresh_margin_seconds is not None
            else settings.strava_token_refresh_margin_seconds
        )
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _require_configured(self) -> None:
        if not self.configured:
            raise StravaNotConfiguredError()

    def get_authorization_url(
        self,
        redirect_uri: Optional[str] = None,
        state: Optional[str] = None,
        scope: str = DEFAULT_SCOPE
    ) -> str:
        """
        Generate Strava OAuth authorization URL.

        Args:
            redirect_uri: URL to redirect after authorization
                (default: settings.strava_redirect_uri)
            state: Optional state parameter (we pass the user id)
            scope: OAuth scope

        Returns:
            Authorization URL string
        """
        self._require_configured()
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri or settings.strava_redirect_uri,
            "response_type": "code",
            "scope": scope,
            "approval_prompt": "auto"  # "force" to always show consent
        }
        if state:
            params["state"] = state

        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def _token_request(self, data: dict[str, Any], action: str) -> dict:
        self._require_configured()
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            **data,
        }
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=settings.strava_http_timeout
            ) as client:
                response = await client.post(self.TOKEN_URL, data=payload)
        except httpx.HTTPError as e:
            logger.error(f"Strava token {action} failed: {e}")
            raise UpstreamTransientError(f"Token {action} failed: {e}") from e

        if response.status_code >= 500:
            logger.error(f"Strava token {action} failed: {response.status_code}")
            raise UpstreamTransientError(f"Token {action} failed: {response.status_code}")
        if response.status_code != 200:
            logger.error(f"Strava token {action} rejected: {response.text}")
            raise UpstreamAuthError(f"Token {action} rejected: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamTransientError(f"Token {action} returned invalid JSON") from e

    async def exchange_code(self, code: str) -> CredentialEnvelope:
        """
        Exchange authorization code for tokens.

        Raises:
            UpstreamAuthError: If Strava rejects the code (4xx)
            UpstreamTransientError: On network failure or 5xx
        """
        data = await self._token_request(
            {"code": code, "grant_type": "authorization_code"}, "exchange"
        )
        try:
            envelope = CredentialEnvelope.from_token_response(data)
        except ValidationError as e:
            raise UpstreamTransientError("Token exchange returned an incomplete response") from e

        logger.info(f"Exchanged Strava code for athlete {envelope.athlete_id}")
        return envelope

    async def refresh(self, envelope: CredentialEnvelope) -> CredentialEnvelope:
        """
        Refresh an access token, keeping the athlete.

        Raises:
            UpstreamAuthError: If the refresh token is rejected
            UpstreamTransientError: On network failure or 5xx
        """
        data = await self._token_request(
            {"refresh_token": envelope.refresh_token, "grant_type": "refresh_token"},
            "refresh"
        )
        try:
            return CredentialEnvelope.from_token_response(data, previous=envelope)
        except ValidationError as e:
            raise UpstreamTransientError("Token refresh returned an incomplete response") from e

    async def ensure_fresh(
        self,
        envelope: CredentialEnvelope,
        now: Optional[float] = None
    ) -> tuple[CredentialEnvelope, bool]:
        """
        Refresh the envelope iff expires_at <= now + margin.

        Returns:
            (envelope, refreshed)
        """
        now = time.time() if now is None else now
        if not envelope.is_expired(now, self.refresh_margin_seconds):
            return envelope, False

        logger.info(f"Refreshing Strava token for athlete {envelope.athlete_id}")
        return await self.refresh(envelope), True

    async def deauthorize(self, access_token: str) -> bool:
        """
        Revoke Strava access (user disconnect). Best effort.

        Returns:
            True if deauthorization was successful
        """
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=settings.strava_http_timeout
            ) as client:
                response = await client.post(
                    self.DEAUTHORIZE_URL,
                    headers={"Authorization": f"Bearer {access_token}"}
                )
        except httpx.HTTPError as e:
            logger.warning(f"Strava deauthorization failed: {e}")
            return False

        if response.status_code != 200:
            logger.warning(f"Strava deauthorization returned {response.status_code}")
        return response.status_code == 200
