"""
Strava schemas.

Pydantic models for the Strava routes and service results.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.features.activities.schemas import BatchFailure


class AuthUrlResponse(BaseModel):
    url: str


class ExchangeTokenRequest(BaseModel):
    """OAuth callback payload forwarded by the frontend."""

    user_id: int
    code: str = Field(min_length=1)


class StravaStatus(BaseModel):
    """Connection state of one athlete."""

    connected: bool
    athlete_id: Optional[str] = None
    expires_at: Optional[int] = None  # unix timestamp


class SyncReport(BaseModel):
    """Outcome of a manual sync."""

    fetched: int = 0
    imported: int = 0
    skipped: int = 0
    ignored: int = 0  # unsupported activity types
    failures: list[BatchFailure] = Field(default_factory=list)


class SubscriptionCreate(BaseModel):
    callback_url: str = Field(min_length=1)


class SubscriptionResponse(BaseModel):
    subscription_id: str
    callback_url: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
