"""
Leaderboard endpoint.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.errors import http_error
from app.db.session import get_async_db
from app.features.leaderboard.schemas import LeaderboardEntry
from app.features.leaderboard.service import LeaderboardService
from app.shared.constants import FILTER_ALL
from app.shared.errors import AppError

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    type: str = Query(default=FILTER_ALL, description="running, cycling, walking or all"),
    gender: str = Query(default=FILTER_ALL, description="Gender or all"),
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    client_id: Optional[int] = Query(default=None),
    db: AsyncSession = Depends(get_async_db)
):
    """Athletes ranked by total distance."""
    try:
        return await LeaderboardService(db).rank(
            activity_type=type,
            gender=gender,
            limit=limit,
            offset=offset,
            client_id=client_id,
        )
    except AppError as e:
        raise http_error(e) from e
