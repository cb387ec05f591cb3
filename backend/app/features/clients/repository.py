"""
Client repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import Client


class ClientRepository(BaseRepository[Client]):
    """Repository for tenants."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Client)

    async def get_by_base_path(self, base_path: str) -> Client | None:
        """Get client by its branded login path."""
        return await self.get_by(base_path=base_path.strip().lower())
