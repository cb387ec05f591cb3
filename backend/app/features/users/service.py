"""
Athlete management.

Creation assigns a unique athlete id (prefix + random uppercase
alphanumerics) and a temporary password that is returned exactly once.
CSV import applies the same rules row by row without aborting on a bad
row.
"""

import logging
import secrets
import string
from typing import Any, Iterable, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.features.activities.repository import ActivityRepository
from app.features.clients.models import Client
from app.shared.errors import ConflictError, NotFoundError
from app.shared.security import generate_temporary_password, hash_password
from .models import User
from .repository import UserRepository
from .schemas import (
    CsvUserRow,
    ImportReport,
    ImportRowError,
    UserCreate,
    UserUpdate,
)

logger = logging.getLogger(__name__)

ATHLETE_ID_ALPHABET = string.ascii_uppercase + string.digits
ATHLETE_ID_RANDOM_LENGTH = 6
MAX_ATHLETE_ID_ATTEMPTS = 10


def generate_athlete_id(prefix: Optional[str] = None) -> str:
    """e.g. "CYA7Q2K9M"."""
    prefix = prefix if prefix is not None else settings.athlete_id_prefix
    suffix = "".join(
        secrets.choice(ATHLETE_ID_ALPHABET) for _ in range(ATHLETE_ID_RANDOM_LENGTH)
    )
    return f"{prefix}{suffix}"


def _describe_row_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(p) for p in item.get("loc", ()))
        if item.get("type") == "missing":
            parts.append(f"{field} is required")
        else:
            parts.append(f"{field}: {item.get('msg')}")
    return "; ".join(parts)


class UserService:
    """
    Athlete CRUD, status and import.

    Usage:
        service = UserService(db)
        user, password = await service.create(data)
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.activities = ActivityRepository(db)

    async def _require_client(self, client_id: int) -> Client:
        client = await self.db.get(Client, client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    async def _unique_athlete_id(self) -> str:
        for _ in range(MAX_ATHLETE_ID_ATTEMPTS):
            athlete_id = generate_athlete_id()
            if await self.users.get_by_athlete_id(athlete_id) is None:
                return athlete_id
        raise ConflictError("Could not generate a unique athlete id")

    async def _insert(self, client_id: int, fields: dict[str, Any]) -> tuple[User, str]:
        password = generate_temporary_password()
        if not fields.get("fitness_level"):
            fields["fitness_level"] = "beginner"

        athlete_id = await self._unique_athlete_id()
        try:
            user = await self.users.create(
                client_id=client_id,
                athlete_id=athlete_id,
                password_hash=hash_password(password),
                account_status="active",
                **fields,
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"User with email {fields['email']} already exists")
        return user, password

    async def create(self, data: UserCreate) -> tuple[User, str]:
        """
        Create an athlete.

        Returns:
            (user, temporary_password)

        Raises:
            NotFoundError: If the client does not exist
            ConflictError: If the email is already registered
        """
        await self._require_client(data.client_id)
        if await self.users.get_by_email(data.email):
            raise ConflictError(f"User with email {data.email} already exists")

        user, password = await self._insert(
            data.client_id, data.model_dump(exclude={"client_id"})
        )
        logger.info(f"Created user {user.id} ({user.athlete_id}) for client {data.client_id}")
        return user, password

    async def get(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def list_users(self, client_id: Optional[int] = None) -> list[User]:
        return await self.users.list_by_client(client_id)

    async def update(self, user_id: int, data: UserUpdate) -> User:
        """
        Partial update of profile fields.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the new email belongs to another user
        """
        user = await self.get(user_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("email") and changes["email"] != user.email:
            other = await self.users.get_by_email(changes["email"])
            if other and other.id != user.id:
                raise ConflictError(f"User with email {changes['email']} already exists")

        user = await self.users.update(user, **changes)
        await self.db.commit()
        logger.info(f"Updated user {user_id}: {sorted(changes)}")
        return user

    async def toggle_status(self, user_id: int) -> User:
        """Flip account_status between active and inactive."""
        user = await self.get(user_id)
        new_status = "inactive" if user.account_status == "active" else "active"
        user = await self.users.update(user, account_status=new_status)
        await self.db.commit()
        logger.info(f"User {user_id} is now {new_status}")
        return user

    async def delete(self, user_id: int) -> None:
        """
        Delete an athlete without activities.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the user still owns activities
        """
        user = await self.get(user_id)
        owned = await self.activities.count(user_id=user_id)
        if owned:
            raise ConflictError(
                f"User {user_id} has {owned} activities and cannot be deleted"
            )
        await self.users.delete(user)
        await self.db.commit()
        logger.info(f"Deleted user {user_id}")

    async def import_rows(
        self,
        client_id: int,
        rows: Iterable[dict[str, Any]]
    ) -> ImportReport:
        """
        Create athletes from parsed CSV rows.

        Each row is validated and inserted on its own; failures are
        reported with 1-based row numbers.

        Raises:
            NotFoundError: If the client does not exist
        """
        await self._require_client(client_id)
        report = ImportReport()

        for row_number, row in enumerate(rows, start=1):
            try:
                parsed = CsvUserRow.model_validate(row)
            except ValidationError as e:
                report.errors.append(
                    ImportRowError(row=row_number, error=_describe_row_error(e))
                )
                continue

            if await self.users.get_by_email(parsed.email):
                report.errors.append(ImportRowError(
                    row=row_number,
                    error=f"User with email {parsed.email} already exists",
                ))
                continue

            try:
                await self._insert(client_id, parsed.model_dump())
            except ConflictError as e:
                report.errors.append(ImportRowError(row=row_number, error=str(e)))
                continue

            report.success += 1

        logger.info(
            f"CSV import for client {client_id}: {report.success} created, "
            f"{len(report.errors)} errors"
        )
        return report
