"""
Client schemas.

Pydantic models for tenant CRUD and stats.
"""

import re
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.shared.validators import normalize_email

BASE_PATH_PATTERN = re.compile(r"^[a-z0-9-]+$")


def _check_base_path(value: str) -> str:
    value = value.strip().lower()
    if len(value) < 3:
        raise ValueError("Base path must be at least 3 characters")
    if not BASE_PATH_PATTERN.match(value):
        raise ValueError(
            "Base path can only contain lowercase letters, numbers, and hyphens"
        )
    return value


class ClientCreate(BaseModel):
    """Create client request."""

    name: str = Field(min_length=2)
    email: EmailStr
    base_path: str
    logo_url: Optional[str] = None
    status: Literal["active", "inactive"] = "active"

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("base_path")
    @classmethod
    def check_base_path(cls, v: str) -> str:
        return _check_base_path(v)


class ClientUpdate(BaseModel):
    """Partial client update."""

    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[EmailStr] = None
    base_path: Optional[str] = None
    logo_url: Optional[str] = None
    status: Optional[Literal["active", "inactive"]] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v) if v is not None else v

    @field_validator("base_path")
    @classmethod
    def check_base_path(cls, v: Optional[str]) -> Optional[str]:
        return _check_base_path(v) if v is not None else v


class ClientResponse(BaseModel):
    """Client response."""

    id: int
    name: str
    email: str
    base_path: str
    logo_url: Optional[str]
    status: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class ClientPublicResponse(BaseModel):
    """What the branded login page may see."""

    id: int
    name: str
    logo_url: Optional[str]

    class Config:
        from_attributes = True


class ClientStats(BaseModel):
    """Per-client counts."""

    users: int
    activities: int


class OverallStats(BaseModel):
    """Platform-wide counts."""

    users: int
    activities: int
    clients: int
    certificates: int
