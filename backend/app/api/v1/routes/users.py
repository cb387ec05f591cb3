"""
Athlete endpoints.

Endpoints:
- GET    /users                          - List athletes (optionally by client)
- POST   /users                          - Create athlete (returns temp password)
- POST   /users/import                   - CSV rows import
- GET    /users/{user_id}                - Get athlete
- PATCH  /users/{user_id}                - Update profile
- DELETE /users/{user_id}                - Delete athlete without activities
- POST   /users/{user_id}/toggle-status  - Activate / deactivate
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.errors import http_error
from app.db.session import get_async_db
from app.features.users.schemas import (
    ImportReport,
    ImportRequest,
    UserCreate,
    UserCreatedResponse,
    UserResponse,
    UserUpdate,
)
from app.features.users.service import UserService
from app.shared.errors import AppError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    client_id: Optional[int] = Query(default=None),
    db: AsyncSession = Depends(get_async_db)
):
    return await UserService(db).list_users(client_id)


@router.post("", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_async_db)):
    """
    Create an athlete.

    The temporary password is only returned here.
    """
    try:
        user, password = await UserService(db).create(data)
    except AppError as e:
        raise http_error(e) from e
    return UserCreatedResponse(
        user=UserResponse.model_validate(user),
        temporary_password=password,
    )


@router.post("/import", response_model=ImportReport)
async def import_users(data: ImportRequest, db: AsyncSession = Depends(get_async_db)):
    """Create athletes from parsed CSV rows; bad rows are reported, not fatal."""
    try:
        return await UserService(db).import_rows(data.client_id, data.rows)
    except AppError as e:
        raise http_error(e) from e


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    try:
        return await UserService(db).get(user_id)
    except AppError as e:
        raise http_error(e) from e


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    try:
        return await UserService(db).update(user_id, data)
    except AppError as e:
        raise http_error(e) from e


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    try:
        await UserService(db).delete(user_id)
    except AppError as e:
        raise http_error(e) from e


@router.post("/{user_id}/toggle-status", response_model=UserResponse)
async def toggle_user_status(user_id: int, db: AsyncSession = Depends(get_async_db)):
    try:
        return await UserService(db).toggle_status(user_id)
    except AppError as e:
        raise http_error(e) from e
