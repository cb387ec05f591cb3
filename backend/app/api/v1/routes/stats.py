"""
Platform statistics.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.clients.schemas import OverallStats
from app.features.clients.service import ClientService

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("", response_model=OverallStats)
async def get_overall_stats(db: AsyncSession = Depends(get_async_db)):
    """Counts of users, activities, clients and certificates."""
    return await ClientService(db).overall_stats()
