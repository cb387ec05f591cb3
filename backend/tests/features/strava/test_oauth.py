"""
Tests for StravaOAuth against a mocked token endpoint.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.features.strava import StravaOAuth
from app.features.strava.envelope import CredentialEnvelope
from app.features.strava.exceptions import (
    StravaNotConfiguredError,
    UpstreamAuthError,
    UpstreamTransientError,
)


def _form(request: httpx.Request) -> dict:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


TOKEN_RESPONSE = {
    "token_type": "Bearer",
    "access_token": "access-new",
    "refresh_token": "refresh-new",
    "expires_at": 1900000000,
    "expires_in": 21600,
    "athlete": {"id": 4242, "firstname": "Ana"},
}


# =============================================================================
# Authorization URL
# =============================================================================

class TestAuthorizationUrl:
    """Tests for get_authorization_url."""

    def test_contains_client_scope_and_state(self):
        oauth = StravaOAuth(client_id="123", client_secret="s")

        url = oauth.get_authorization_url(redirect_uri="https://app/cb", state="7")

        parsed = urlparse(url)
        params = {k: v[0] for k, v in parse_qs(parsed.query).items()}
        assert url.startswith("https://www.strava.com/oauth/authorize?")
        assert params["client_id"] == "123"
        assert params["redirect_uri"] == "https://app/cb"
        assert params["response_type"] == "code"
        assert params["scope"] == "read,activity:read_all"
        assert params["state"] == "7"

    def test_not_configured(self):
        oauth = StravaOAuth(client_id="", client_secret="")

        assert not oauth.configured
        with pytest.raises(StravaNotConfiguredError):
            oauth.get_authorization_url()


# =============================================================================
# Token endpoint
# =============================================================================

class TestTokenEndpoint:
    """Tests for exchange_code and refresh."""

    async def test_exchange_code(self, strava):
        strava.on("POST", "/oauth/token", json_body=TOKEN_RESPONSE)

        envelope = await strava.oauth().exchange_code("the-code")

        assert envelope.access_token == "access-new"
        assert envelope.athlete_id == "4242"
        form = _form(strava.calls("POST", "/oauth/token")[0])
        assert form["code"] == "the-code"
        assert form["grant_type"] == "authorization_code"
        assert form["client_id"] == "client-id"
        assert form["client_secret"] == "client-secret"

    async def test_exchange_rejected(self, strava):
        strava.on("POST", "/oauth/token", status_code=400, json_body={"message": "Bad Request"})

        with pytest.raises(UpstreamAuthError):
            await strava.oauth().exchange_code("bad")

    async def test_exchange_server_error(self, strava):
        strava.on("POST", "/oauth/token", status_code=503, json_body={})

        with pytest.raises(UpstreamTransientError):
            await strava.oauth().exchange_code("code")

    async def test_network_error_is_transient(self):
        def broken(request):
            raise httpx.ConnectError("connection refused", request=request)

        oauth = StravaOAuth(
            client_id="c", client_secret="s", transport=httpx.MockTransport(broken)
        )

        with pytest.raises(UpstreamTransientError):
            await oauth.exchange_code("code")

    async def test_refresh_keeps_athlete(self, strava):
        body = {k: v for k, v in TOKEN_RESPONSE.items() if k != "athlete"}
        strava.on("POST", "/oauth/token", json_body=body)
        old = CredentialEnvelope(
            access_token="a", refresh_token="refresh-old", expires_at=1, athlete={"id": 77}
        )

        new = await strava.oauth().refresh(old)

        assert new.refresh_token == "refresh-new"
        assert new.athlete_id == "77"
        form = _form(strava.calls("POST", "/oauth/token")[0])
        assert form["grant_type"] == "refresh_token"
        assert form["refresh_token"] == "refresh-old"

    async def test_refresh_rejected(self, strava):
        strava.on("POST", "/oauth/token", status_code=401, json_body={})
        old = CredentialEnvelope(access_token="a", refresh_token="r", expires_at=1)

        with pytest.raises(UpstreamAuthError):
            await strava.oauth().refresh(old)


# =============================================================================
# ensure_fresh
# =============================================================================

class TestEnsureFresh:
    """Refresh happens iff expires_at <= now + margin."""

    async def test_valid_token_is_returned_unchanged(self, strava):
        envelope = CredentialEnvelope(access_token="a", refresh_token="r", expires_at=2000)

        result, refreshed = await strava.oauth().ensure_fresh(envelope, now=1000)

        assert not refreshed
        assert result is envelope
        assert strava.requests == []

    async def test_expired_token_is_refreshed(self, strava):
        strava.on("POST", "/oauth/token", json_body=TOKEN_RESPONSE)
        envelope = CredentialEnvelope(access_token="a", refresh_token="r", expires_at=1000)

        result, refreshed = await strava.oauth().ensure_fresh(envelope, now=1000)

        assert refreshed
        assert result.access_token == "access-new"

    async def test_margin_triggers_early_refresh(self, strava):
        strava.on("POST", "/oauth/token", json_body=TOKEN_RESPONSE)
        envelope = CredentialEnvelope(access_token="a", refresh_token="r", expires_at=1100)

        _, refreshed = await strava.oauth(refresh_margin_seconds=300).ensure_fresh(
            envelope, now=1000
        )

        assert refreshed


# =============================================================================
# Deauthorization
# =============================================================================

class TestDeauthorize:
    """deauthorize is best effort."""

    async def test_success(self, strava):
        strava.on("POST", "/oauth/deauthorize", json_body={"access_token": "a"})

        assert await strava.oauth().deauthorize("a") is True
        request = strava.calls("POST", "/oauth/deauthorize")[0]
        assert request.headers["Authorization"] == "Bearer a"

    async def test_failure_returns_false(self, strava):
        strava.on("POST", "/oauth/deauthorize", status_code=401, json_body={})

        assert await strava.oauth().deauthorize("a") is False
