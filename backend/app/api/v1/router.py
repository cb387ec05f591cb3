"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from app.api.v1.routes import (
    activities,
    certificates,
    clients,
    leaderboard,
    stats,
    strava,
    strava_webhook,
    users,
)

api_router = APIRouter()

api_router.include_router(clients.router)
api_router.include_router(users.router)
api_router.include_router(activities.router)
api_router.include_router(certificates.router)
api_router.include_router(leaderboard.router)
api_router.include_router(stats.router)
api_router.include_router(strava.router)
api_router.include_router(strava_webhook.router)
