"""
Certificate endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.errors import http_error
from app.db.session import get_async_db
from app.features.certificates.schemas import CertificateCreate, CertificateResponse
from app.features.certificates.service import CertificateService
from app.shared.errors import AppError

router = APIRouter(tags=["Certificates"])


@router.get("/users/{user_id}/certificates", response_model=list[CertificateResponse])
async def list_certificates(user_id: int, db: AsyncSession = Depends(get_async_db)):
    try:
        return await CertificateService(db).list_for_user(user_id)
    except AppError as e:
        raise http_error(e) from e


@router.post(
    "/users/{user_id}/certificates",
    response_model=CertificateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def issue_certificate(
    user_id: int,
    data: CertificateCreate,
    db: AsyncSession = Depends(get_async_db)
):
    try:
        return await CertificateService(db).issue(user_id, data)
    except AppError as e:
        raise http_error(e) from e
