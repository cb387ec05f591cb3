"""
Leaderboard schemas.
"""

from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    """One ranked athlete. Derived on every request, never stored."""

    rank: int
    user_id: int
    athlete_id: str
    name: str
    total_distance: float  # km
    total_duration: int  # seconds
    activity_count: int
