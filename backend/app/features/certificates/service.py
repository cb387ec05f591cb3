"""
Certificate issuing.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.users.models import User
from app.shared.errors import NotFoundError
from .models import Certificate
from .repository import CertificateRepository
from .schemas import CertificateCreate

logger = logging.getLogger(__name__)


class CertificateService:
    """Issues and lists athlete certificates."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.certificates = CertificateRepository(db)

    async def issue(self, user_id: int, data: CertificateCreate) -> Certificate:
        if await self.db.get(User, user_id) is None:
            raise NotFoundError("User", user_id)

        certificate = await self.certificates.create(user_id=user_id, **data.model_dump())
        await self.db.commit()
        logger.info(f"Issued {data.type} certificate {data.name!r} to user {user_id}")
        return certificate

    async def list_for_user(self, user_id: int) -> list[Certificate]:
        if await self.db.get(User, user_id) is None:
            raise NotFoundError("User", user_id)
        return await self.certificates.list_for_user(user_id)
