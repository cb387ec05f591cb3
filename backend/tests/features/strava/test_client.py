"""
Tests for StravaClient status handling.
"""

import pytest

from app.features.strava import (
    StravaAPIError,
    StravaClient,
    StravaNotConfiguredError,
    StravaRateLimitError,
    UpstreamAuthError,
    UpstreamTransientError,
)


class TestStravaClient:
    """Response status -> error mapping."""

    async def test_get_activity(self, strava):
        strava.on("GET", "/api/v3/activities/5", json_body={"id": 5, "type": "Run"})

        activity = await strava.client().get_activity("tok", 5)

        assert activity["id"] == 5
        request = strava.calls("GET", "/api/v3/activities/5")[0]
        assert request.headers["Authorization"] == "Bearer tok"

    @pytest.mark.parametrize("status_code,error", [
        (401, UpstreamAuthError),
        (403, UpstreamAuthError),
        (429, StravaRateLimitError),
        (500, UpstreamTransientError),
        (503, UpstreamTransientError),
        (404, StravaAPIError),
    ])
    async def test_error_statuses(self, strava, status_code, error):
        strava.on("GET", "/api/v3/activities/5", status_code=status_code, json_body={})

        with pytest.raises(error):
            await strava.client().get_activity("tok", 5)

    async def test_rate_limit_is_transient(self, strava):
        strava.on("GET", "/api/v3/athlete/activities", status_code=429, json_body={})

        with pytest.raises(UpstreamTransientError):
            await strava.client().get_activities("tok")

    async def test_not_found_keeps_status(self, strava):
        with pytest.raises(StravaAPIError) as exc:
            await strava.client().get_activity("tok", 404)

        assert exc.value.status_code == 404

    async def test_page_size_is_capped(self, strava):
        strava.on("GET", "/api/v3/athlete/activities", json_body=[])

        assert await strava.client().get_activities("tok", per_page=500) == []
        request = strava.calls("GET", "/api/v3/athlete/activities")[0]
        assert request.url.params["per_page"] == "200"

    async def test_subscriptions_need_app_credentials(self):
        client = StravaClient(client_id="", client_secret="")

        with pytest.raises(StravaNotConfiguredError):
            await client.list_push_subscriptions()
