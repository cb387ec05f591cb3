"""
User repository.

Data access layer for athletes.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import User


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email.

        Args:
            email: Email address (compared lowercase)

        Returns:
            User if found, None otherwise
        """
        return await self.get_by(email=email.strip().lower())

    async def get_by_athlete_id(self, athlete_id: str) -> User | None:
        """Get user by public athlete id."""
        return await self.get_by(athlete_id=athlete_id)

    async def list_by_client(self, client_id: Optional[int] = None) -> list[User]:
        """All users, or the users of one client, ordered by id."""
        if client_id is None:
            return await self.get_all()
        return await self.get_all(client_id=client_id)

    async def list_for_leaderboard(
        self,
        gender: Optional[str] = None,
        client_id: Optional[int] = None
    ) -> list[User]:
        """Users matching the leaderboard partition."""
        query = select(User).order_by(User.id)
        if gender:
            query = query.where(User.gender == gender)
        if client_id is not None:
            query = query.where(User.client_id == client_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_with_strava_token(self) -> list[User]:
        """Users holding a credential envelope, lowest id first."""
        result = await self.db.execute(
            select(User)
            .where(User.strava_token.is_not(None))
            .order_by(User.id)
        )
        return list(result.scalars().all())

    async def swap_strava_token(
        self,
        user_id: int,
        expected: Optional[str],
        new: Optional[str]
    ) -> bool:
        """
        Compare-and-swap the serialized envelope.

        Writes `new` only if the stored value still equals `expected`.

        Returns:
            True if this call won the swap
        """
        condition = (
            User.strava_token.is_(None) if expected is None
            else User.strava_token == expected
        )
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id, condition)
            .values(strava_token=new)
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return result.rowcount == 1

    async def set_strava_token(self, user_id: int, token: Optional[str]) -> None:
        """Unconditionally store (or clear) the serialized envelope."""
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(strava_token=token)
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()

    async def read_strava_token(self, user_id: int) -> Optional[str]:
        """Current stored envelope, bypassing the identity map."""
        result = await self.db.execute(
            select(User.strava_token).where(User.id == user_id)
        )
        return result.scalar_one_or_none()
