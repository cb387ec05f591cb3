"""
Strava sync services.

Provides:
- StravaSyncService: On-demand import of recent activities
"""

from .service import StravaSyncService

__all__ = [
    "StravaSyncService",
]
