"""
Certificate schemas.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class CertificateCreate(BaseModel):
    """Issue certificate request."""

    type: Literal["stage", "month"]
    name: str = Field(min_length=1, max_length=100)
    link: str = Field(min_length=1)


class CertificateResponse(BaseModel):
    """Certificate response."""

    id: int
    user_id: int
    type: str
    name: str
    link: str
    issued_at: Optional[datetime]

    class Config:
        from_attributes = True
