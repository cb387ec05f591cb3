"""
Shared route dependencies.

Strava collaborators are dependencies so tests can swap in clients
backed by httpx.MockTransport.
"""

from app.features.strava.client import StravaClient
from app.features.strava.oauth import StravaOAuth


def get_strava_oauth() -> StravaOAuth:
    return StravaOAuth()


def get_strava_client() -> StravaClient:
    return StravaClient()
