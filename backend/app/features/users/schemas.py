"""
User schemas.

Pydantic models for athlete operations and CSV import.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.shared.validators import normalize_email


class UserProfileFields(BaseModel):
    """Optional profile fields shared by create, update and import."""

    group_name: Optional[str] = None
    address: Optional[str] = None
    shoes_brand_model: Optional[str] = None
    gps_watch_model: Optional[str] = None
    hydration_supplement: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_number: Optional[str] = None
    fitness_level: Optional[str] = None
    fitness_goals: Optional[str] = None
    weight: Optional[float] = None
    height: Optional[float] = None


class UserCreate(UserProfileFields):
    """Create athlete request."""

    client_id: int
    email: EmailStr
    name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    date_of_birth: str = Field(min_length=1)
    gender: str = Field(min_length=1)
    country: str = Field(min_length=1)
    state: str = Field(min_length=1)
    city: str = Field(min_length=1)
    zipcode: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("gender")
    @classmethod
    def lowercase_gender(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdate(UserProfileFields):
    """
    Partial athlete update.

    client_id, athlete_id and strava_token are not updatable.
    """

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    zipcode: Optional[str] = None
    account_status: Optional[Literal["active", "inactive"]] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v) if v is not None else v

    @field_validator("gender")
    @classmethod
    def lowercase_gender(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v is not None else v


class UserResponse(BaseModel):
    """Athlete response (never includes password hash or token)."""

    id: int
    athlete_id: str
    client_id: int
    email: str
    name: str
    phone_number: str
    date_of_birth: str
    gender: str
    group_name: Optional[str]
    address: Optional[str]
    country: str
    state: str
    city: str
    zipcode: str
    shoes_brand_model: Optional[str]
    gps_watch_model: Optional[str]
    hydration_supplement: Optional[str]
    emergency_contact_name: Optional[str]
    emergency_contact_number: Optional[str]
    fitness_level: str
    fitness_goals: Optional[str]
    weight: Optional[float]
    height: Optional[float]
    account_status: str
    strava_connected: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class UserCreatedResponse(BaseModel):
    """Returned once on creation; the temporary password is not stored."""

    user: UserResponse
    temporary_password: str


class CsvUserRow(UserProfileFields):
    """
    One parsed CSV row.

    Accepts both snake_case and the camelCase headers of the
    spreadsheet template (phoneNumber, dateOfBirth, ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1)
    email: EmailStr
    phone_number: str = Field(min_length=1)
    date_of_birth: str = Field(min_length=1)
    gender: str = Field(min_length=1)
    country: str = Field(min_length=1)
    state: str = Field(min_length=1)
    city: str = Field(min_length=1)
    zipcode: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("gender")
    @classmethod
    def lowercase_gender(cls, v: str) -> str:
        return v.strip().lower()


class ImportRequest(BaseModel):
    """CSV import body: rows already parsed by the uploader."""

    client_id: int
    rows: list[dict[str, Any]] = Field(min_length=1)


class ImportRowError(BaseModel):
    row: int  # 1-based
    error: str


class ImportReport(BaseModel):
    """Outcome of a CSV import."""

    success: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)
