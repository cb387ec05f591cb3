"""
Activity endpoints.

Endpoints:
- GET    /users/{user_id}/activities         - List athlete activities
- POST   /users/{user_id}/activities         - Submit one activity
- POST   /users/{user_id}/activities/import  - Batch import (per-item report)
- PATCH  /activities/{activity_id}           - Admin correction
- DELETE /activities/{activity_id}           - Delete activity
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.errors import http_error
from app.db.session import get_async_db
from app.features.activities.schemas import (
    ActivityCreate,
    ActivityResponse,
    ActivityUpdate,
    BatchReport,
)
from app.features.activities.service import ActivityIngestionService
from app.shared.errors import AppError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Activities"])


@router.get("/users/{user_id}/activities", response_model=list[ActivityResponse])
async def list_activities(user_id: int, db: AsyncSession = Depends(get_async_db)):
    """Activities of one athlete, newest first."""
    try:
        return await ActivityIngestionService(db).list_for_user(user_id)
    except AppError as e:
        raise http_error(e) from e


@router.post(
    "/users/{user_id}/activities",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_activity(
    user_id: int,
    data: ActivityCreate,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Submit a workout.

    Rejected with 400 if it breaks the duration rules or lacks proof.
    """
    try:
        return await ActivityIngestionService(db).submit(data, user_id)
    except AppError as e:
        raise http_error(e) from e


@router.post("/users/{user_id}/activities/import", response_model=BatchReport)
async def import_activities(
    user_id: int,
    candidates: list[dict],
    db: AsyncSession = Depends(get_async_db)
):
    """Admit each candidate independently; failures are reported per item."""
    if not candidates:
        raise HTTPException(status_code=400, detail="No activities to import")
    try:
        return await ActivityIngestionService(db).admit_batch(candidates, user_id)
    except AppError as e:
        raise http_error(e) from e


@router.patch("/activities/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: int,
    data: ActivityUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    try:
        return await ActivityIngestionService(db).update_activity(activity_id, data)
    except AppError as e:
        raise http_error(e) from e


@router.delete("/activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(activity_id: int, db: AsyncSession = Depends(get_async_db)):
    try:
        await ActivityIngestionService(db).delete_activity(activity_id)
    except AppError as e:
        raise http_error(e) from e
