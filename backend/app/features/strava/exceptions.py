"""
Strava integration errors.

Routes map these to HTTP status codes; the webhook processor turns
them into a `failed` outcome.
"""


class StravaError(Exception):
    """Base Strava error."""
    pass


class StravaNotConfiguredError(StravaError):
    """Client id or secret missing from settings."""

    def __init__(self, message: str = "Strava integration is not configured"):
        super().__init__(message)


class StravaNotConnectedError(StravaError):
    """Athlete has no stored credential envelope."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User {user_id} is not connected to Strava")


class UpstreamAuthError(StravaError):
    """Strava rejected the code, the refresh token or the access token."""
    pass


class UpstreamTransientError(StravaError):
    """Network failure or 5xx from Strava."""
    pass


class StravaRateLimitError(UpstreamTransientError):
    """Strava answered 429."""
    pass


class EnvelopeFormatError(StravaError):
    """Stored credential envelope cannot be parsed."""
    pass


class StravaAPIError(StravaError):
    """Unexpected non-success response (e.g. 404 for a deleted activity)."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
