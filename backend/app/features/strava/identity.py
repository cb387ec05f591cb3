"""
Provider athlete id -> local user.

Webhook events identify the athlete only by Strava's id, which lives
inside each user's credential envelope.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.users.models import User
from app.features.users.repository import UserRepository
from .envelope import CredentialEnvelope
from .exceptions import EnvelopeFormatError

logger = logging.getLogger(__name__)


async def resolve_by_provider_athlete_id(
    db: AsyncSession,
    provider_athlete_id: int | str
) -> Optional[User]:
    """
    Find the user whose envelope belongs to a Strava athlete.

    Users with unparseable envelopes are skipped. When several users
    hold the same athlete, the lowest user id wins.
    """
    wanted = str(provider_athlete_id)
    matches: list[User] = []

    for user in await UserRepository(db).list_with_strava_token():
        try:
            envelope = CredentialEnvelope.parse(user.strava_token)
        except EnvelopeFormatError:
            logger.debug(f"Skipping user {user.id}: unparseable Strava envelope")
            continue
        if envelope.athlete_id == wanted:
            matches.append(user)

    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            f"Strava athlete {wanted} is linked to users "
            f"{[u.id for u in matches]}; using {matches[0].id}"
        )
    return matches[0]
