"""
Certificate repository.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import Certificate


class CertificateRepository(BaseRepository[Certificate]):
    """Repository for certificates."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Certificate)

    async def list_for_user(self, user_id: int) -> list[Certificate]:
        """Certificates of one athlete, oldest first."""
        result = await self.db.execute(
            select(Certificate)
            .where(Certificate.user_id == user_id)
            .order_by(Certificate.issued_at, Certificate.id)
        )
        return list(result.scalars().all())
