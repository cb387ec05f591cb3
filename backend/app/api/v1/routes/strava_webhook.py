"""
Strava webhook endpoints.

Endpoints:
- GET    /strava/webhook               - Subscription handshake
- POST   /strava/webhook               - Push events (always 200)
- GET    /strava/webhook/subscription  - Stored subscription
- POST   /strava/webhook/subscription  - Register subscription
- DELETE /strava/webhook/subscription  - Remove subscription
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.deps import get_strava_client, get_strava_oauth
from app.api.errors import http_error
from app.db.session import get_async_db, get_session_factory
from app.features.strava.client import StravaClient
from app.features.strava.exceptions import StravaError
from app.features.strava.oauth import StravaOAuth
from app.features.strava.schemas import SubscriptionCreate, SubscriptionResponse
from app.features.strava.subscription import StravaSubscriptionService
from app.features.strava.webhook import process_webhook_event, verify_subscription
from app.shared.errors import AppError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/strava/webhook", tags=["Strava Webhook"])

EVENT_RECEIVED = "EVENT_RECEIVED"


@router.get("")
async def verify_webhook(
    hub_mode: Optional[str] = Query(default=None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(default=None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(default=None, alias="hub.challenge"),
):
    """Echo the challenge when Strava proves it knows our verify token."""
    if not verify_subscription(hub_mode, hub_verify_token):
        logger.warning("Strava webhook verification failed")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Verification failed")

    logger.info("Strava webhook verified successfully")
    return {"hub.challenge": hub_challenge}


@router.post("", response_class=PlainTextResponse)
async def receive_event(
    request: Request,
    background_tasks: BackgroundTasks,
    session_factory: async_sessionmaker = Depends(get_session_factory),
    oauth: StravaOAuth = Depends(get_strava_oauth),
    client: StravaClient = Depends(get_strava_client)
):
    """
    Acknowledge immediately; processing runs after the response.

    Strava retries unacknowledged events, so this never fails.
    """
    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("Ignoring Strava webhook with malformed body")
        return EVENT_RECEIVED

    background_tasks.add_task(
        process_webhook_event, payload, session_factory, oauth=oauth, client=client
    )
    return EVENT_RECEIVED


@router.get("/subscription", response_model=Optional[SubscriptionResponse])
async def get_subscription(db: AsyncSession = Depends(get_async_db)):
    """Stored subscription, or null."""
    return await StravaSubscriptionService(db).get()


@router.post(
    "/subscription",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_subscription(
    data: SubscriptionCreate,
    db: AsyncSession = Depends(get_async_db),
    client: StravaClient = Depends(get_strava_client)
):
    try:
        return await StravaSubscriptionService(db, client).create(data.callback_url)
    except (AppError, StravaError) as e:
        raise http_error(e) from e


@router.delete("/subscription", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    db: AsyncSession = Depends(get_async_db),
    client: StravaClient = Depends(get_strava_client)
):
    try:
        await StravaSubscriptionService(db, client).delete()
    except (AppError, StravaError) as e:
        raise http_error(e) from e
