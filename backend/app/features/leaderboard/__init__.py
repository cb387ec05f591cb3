"""
Leaderboard module.

Usage:
    from app.features.leaderboard import LeaderboardService, build_leaderboard
"""

from .schemas import LeaderboardEntry
from .service import LeaderboardService, build_leaderboard

__all__ = [
    "LeaderboardEntry",
    "LeaderboardService",
    "build_leaderboard",
]
