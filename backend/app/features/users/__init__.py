"""
User management module.

Usage:
    from app.features.users import User, UserRepository, UserService

Models:
- User: Athlete belonging to one client

Repositories:
- UserRepository: Data access for users, including the envelope swap
"""

from .models import User
from .schemas import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserCreatedResponse,
    CsvUserRow,
    ImportRequest,
    ImportReport,
    ImportRowError,
)
from .repository import UserRepository
from .service import UserService, generate_athlete_id

__all__ = [
    # Models
    "User",
    # Schemas
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserCreatedResponse",
    "CsvUserRow",
    "ImportRequest",
    "ImportReport",
    "ImportRowError",
    # Services
    "UserRepository",
    "UserService",
    "generate_athlete_id",
]
