"""
Strava connection endpoints.

Endpoints:
- GET  /strava/auth-url                - Authorization URL for an athlete
- POST /strava/exchange-token          - OAuth callback: store tokens
- GET  /strava/status/{user_id}        - Connection status
- POST /strava/sync/{user_id}          - Import recent activities now
- POST /strava/disconnect/{user_id}    - Revoke and forget tokens
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_strava_client, get_strava_oauth
from app.api.errors import http_error
from app.db.session import get_async_db
from app.features.strava.client import StravaClient
from app.features.strava.exceptions import StravaError
from app.features.strava.oauth import StravaOAuth
from app.features.strava.schemas import (
    AuthUrlResponse,
    ExchangeTokenRequest,
    StravaStatus,
    SyncReport,
)
from app.features.strava.sync import StravaSyncService
from app.features.strava.tokens import StravaTokenService
from app.shared.errors import AppError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/strava", tags=["Strava"])


@router.get("/auth-url", response_model=AuthUrlResponse)
async def get_auth_url(
    user_id: int = Query(..., description="Athlete to connect"),
    redirect_uri: Optional[str] = Query(default=None),
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    """Strava consent page URL; the user id travels in `state`."""
    try:
        url = oauth.get_authorization_url(redirect_uri=redirect_uri, state=str(user_id))
    except StravaError as e:
        raise http_error(e) from e
    return AuthUrlResponse(url=url)


@router.post("/exchange-token", response_model=StravaStatus)
async def exchange_token(
    data: ExchangeTokenRequest,
    db: AsyncSession = Depends(get_async_db),
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    """Exchange the authorization code and connect the athlete."""
    try:
        envelope = await StravaTokenService(db, oauth).connect(data.user_id, data.code)
    except (AppError, StravaError) as e:
        raise http_error(e) from e
    return StravaStatus(
        connected=True,
        athlete_id=envelope.athlete_id,
        expires_at=envelope.expires_at,
    )


@router.get("/status/{user_id}", response_model=StravaStatus)
async def get_status(
    user_id: int,
    db: AsyncSession = Depends(get_async_db),
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    try:
        return await StravaTokenService(db, oauth).status(user_id)
    except AppError as e:
        raise http_error(e) from e


@router.post("/sync/{user_id}", response_model=SyncReport)
async def sync_user(
    user_id: int,
    after: Optional[datetime] = Query(default=None, description="Only activities after"),
    per_page: int = Query(default=30, ge=1, le=200),
    db: AsyncSession = Depends(get_async_db),
    oauth: StravaOAuth = Depends(get_strava_oauth),
    client: StravaClient = Depends(get_strava_client)
):
    """Import the athlete's recent Strava activities."""
    try:
        return await StravaSyncService(db, oauth=oauth, client=client).sync_user(
            user_id, after=after, per_page=per_page
        )
    except (AppError, StravaError) as e:
        raise http_error(e) from e


@router.post("/disconnect/{user_id}", response_model=StravaStatus)
async def disconnect(
    user_id: int,
    db: AsyncSession = Depends(get_async_db),
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    try:
        await StravaTokenService(db, oauth).disconnect(user_id)
    except AppError as e:
        raise http_error(e) from e
    return StravaStatus(connected=False)
