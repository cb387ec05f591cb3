"""
Credential envelope persistence.

Wraps StravaOAuth with storage: connecting an athlete, handing out a
fresh access token, disconnecting.

Refreshes are serialized per user inside this process with an
asyncio.Lock. Across processes the write is a compare-and-swap on the
stored envelope: the loser discards its own refresh and uses the
envelope that won.
"""

import asyncio
import logging
import weakref
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.features.users.models import User
from app.features.users.repository import UserRepository
from app.shared.errors import NotFoundError
from .envelope import CredentialEnvelope
from .exceptions import EnvelopeFormatError, StravaNotConnectedError
from .oauth import StravaOAuth
from .schemas import StravaStatus

logger = logging.getLogger(__name__)

# Entries disappear once no coroutine holds or waits on the lock
_refresh_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()


def _refresh_lock(user_id: int) -> asyncio.Lock:
    lock = _refresh_locks.get(user_id)
    if lock is None:
        lock = asyncio.Lock()
        _refresh_locks[user_id] = lock
    return lock


class StravaTokenService:
    """
    Token lifecycle with persistence.

    Usage:
        tokens = StravaTokenService(db)
        await tokens.connect(user_id, code)
        envelope = await tokens.get_fresh_envelope(user)
        await client.get_activities(envelope.access_token)
    """

    def __init__(self, db: AsyncSession, oauth: Optional[StravaOAuth] = None):
        self.db = db
        self.oauth = oauth or StravaOAuth()
        self.users = UserRepository(db)

    async def _get_user(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def connect(self, user_id: int, code: str) -> CredentialEnvelope:
        """
        Exchange an authorization code and store the envelope.

        Raises:
            NotFoundError: If the user does not exist
            UpstreamAuthError: If Strava rejects the code
            UpstreamTransientError: On network failure or 5xx
        """
        user = await self._get_user(user_id)
        envelope = await self.oauth.exchange_code(code)

        raw = envelope.dump()
        await self.users.set_strava_token(user_id, raw)
        await self.db.commit()
        set_committed_value(user, "strava_token", raw)

        logger.info(f"User {user_id} connected Strava athlete {envelope.athlete_id}")
        return envelope

    async def get_fresh_envelope(self, user: User) -> CredentialEnvelope:
        """
        Envelope whose access token is valid now.

        A refreshed envelope is committed before it is returned.

        Raises:
            StravaNotConnectedError: If the user has no envelope
            EnvelopeFormatError: If the stored envelope is unreadable
            UpstreamAuthError: If the refresh token is rejected
            UpstreamTransientError: On network failure or 5xx
        """
        async with _refresh_lock(user.id):
            raw = await self.users.read_strava_token(user.id)
            if not raw:
                raise StravaNotConnectedError(user.id)

            envelope = CredentialEnvelope.parse(raw)
            fresh, refreshed = await self.oauth.ensure_fresh(envelope)
            if not refreshed:
                return envelope

            new_raw = fresh.dump()
            if await self.users.swap_strava_token(user.id, raw, new_raw):
                await self.db.commit()
                set_committed_value(user, "strava_token", new_raw)
                logger.info(f"Stored refreshed Strava token for user {user.id}")
                return fresh

            # Another writer replaced the envelope first
            winner_raw = await self.users.read_strava_token(user.id)
            if not winner_raw:
                raise StravaNotConnectedError(user.id)
            winner = CredentialEnvelope.parse(winner_raw)
            set_committed_value(user, "strava_token", winner_raw)
            logger.info(f"Refresh for user {user.id} lost the swap; using stored token")
            return winner

    async def disconnect(self, user_id: int) -> bool:
        """
        Revoke (best effort) and forget the envelope.

        Returns:
            True if the user was connected
        """
        user = await self._get_user(user_id)
        raw = await self.users.read_strava_token(user_id)
        if not raw:
            return False

        try:
            envelope = CredentialEnvelope.parse(raw)
        except EnvelopeFormatError:
            logger.warning(f"Discarding unreadable Strava envelope of user {user_id}")
        else:
            await self.oauth.deauthorize(envelope.access_token)

        await self.users.set_strava_token(user_id, None)
        await self.db.commit()
        set_committed_value(user, "strava_token", None)
        logger.info(f"User {user_id} disconnected from Strava")
        return True

    async def status(self, user_id: int) -> StravaStatus:
        await self._get_user(user_id)
        raw = await self.users.read_strava_token(user_id)
        if not raw:
            return StravaStatus(connected=False)
        try:
            envelope = CredentialEnvelope.parse(raw)
        except EnvelopeFormatError:
            return StravaStatus(connected=True)
        return StravaStatus(
            connected=True,
            athlete_id=envelope.athlete_id,
            expires_at=envelope.expires_at,
        )
