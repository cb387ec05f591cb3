"""
Client (tenant) endpoints.

Endpoints:
- GET    /clients                      - List clients
- POST   /clients                      - Create client
- GET    /clients/by-path/{base_path}  - Public branding lookup
- GET    /clients/{client_id}          - Get client
- PATCH  /clients/{client_id}          - Update client
- DELETE /clients/{client_id}          - Delete client without users
- GET    /clients/{client_id}/stats    - Users and activities count
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.errors import http_error
from app.db.session import get_async_db
from app.features.clients.schemas import (
    ClientCreate,
    ClientPublicResponse,
    ClientResponse,
    ClientStats,
    ClientUpdate,
)
from app.features.clients.service import ClientService
from app.shared.errors import AppError

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("", response_model=list[ClientResponse])
async def list_clients(db: AsyncSession = Depends(get_async_db)):
    return await ClientService(db).list_clients()


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(data: ClientCreate, db: AsyncSession = Depends(get_async_db)):
    try:
        return await ClientService(db).create(data)
    except AppError as e:
        raise http_error(e) from e


@router.get("/by-path/{base_path}", response_model=ClientPublicResponse)
async def get_client_by_path(base_path: str, db: AsyncSession = Depends(get_async_db)):
    """Name and logo for the branded login page."""
    try:
        return await ClientService(db).get_public(base_path)
    except AppError as e:
        raise http_error(e) from e


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client_id: int, db: AsyncSession = Depends(get_async_db)):
    try:
        return await ClientService(db).get(client_id)
    except AppError as e:
        raise http_error(e) from e


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    try:
        return await ClientService(db).update(client_id, data)
    except AppError as e:
        raise http_error(e) from e


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: int, db: AsyncSession = Depends(get_async_db)):
    try:
        await ClientService(db).delete(client_id)
    except AppError as e:
        raise http_error(e) from e


@router.get("/{client_id}/stats", response_model=ClientStats)
async def get_client_stats(client_id: int, db: AsyncSession = Depends(get_async_db)):
    try:
        return await ClientService(db).stats(client_id)
    except AppError as e:
        raise http_error(e) from e
