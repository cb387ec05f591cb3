"""
Tests for athlete management and CSV import.
"""

import pytest
from pydantic import ValidationError

from app.features.users import UserCreate, UserService, UserUpdate
from app.features.users.service import generate_athlete_id
from app.shared.errors import ConflictError, NotFoundError
from app.shared.security import hash_password, verify_password


def new_user(client_id: int, **overrides) -> UserCreate:
    data = {
        "client_id": client_id,
        "email": "Runner@Example.com",
        "name": "Priya",
        "phone_number": "+919800000000",
        "date_of_birth": "1992-04-10",
        "gender": "Female",
        "country": "India",
        "state": "Karnataka",
        "city": "Bengaluru",
        "zipcode": "560001",
    }
    data.update(overrides)
    return UserCreate(**data)


MALFORMED_EMAILS = [
    "a@b..c",
    "a..b@example.com",
    "x@-bad-.com",
    ".a@b.co",
]


def csv_row(**overrides) -> dict:
    row = {
        "name": "Arjun",
        "email": "arjun@example.com",
        "phoneNumber": "+919811111111",
        "dateOfBirth": "1988-11-02",
        "gender": "male",
        "country": "India",
        "state": "Kerala",
        "city": "Kochi",
        "zipcode": "682001",
    }
    row.update(overrides)
    return row


# =============================================================================
# Identifiers and passwords
# =============================================================================

class TestIdentifiers:
    """Tests for generated athlete ids and temporary passwords."""

    def test_athlete_id_format(self):
        athlete_id = generate_athlete_id("CYA")

        assert athlete_id.startswith("CYA")
        assert len(athlete_id) == 9
        assert athlete_id[3:].isalnum()
        assert athlete_id[3:] == athlete_id[3:].upper()

    def test_password_hash_roundtrip(self):
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)
        assert not verify_password("", hashed)

    def test_empty_password_is_refused(self):
        with pytest.raises(ValueError):
            hash_password("")


# =============================================================================
# CRUD
# =============================================================================

class TestUserService:
    """Tests for UserService CRUD."""

    async def test_create(self, db, create_client, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "athlete_id_prefix", "RUN")
        club = await create_client()

        user, password = await UserService(db).create(new_user(club.id))

        assert user.athlete_id.startswith("RUN")
        assert user.email == "runner@example.com"
        assert user.gender == "female"
        assert user.account_status == "active"
        assert user.fitness_level == "beginner"
        assert not user.strava_connected
        assert len(password) == 10
        assert verify_password(password, user.password_hash)

    async def test_invalid_email(self):
        with pytest.raises(ValidationError):
            new_user(1, email="not-an-email")

    @pytest.mark.parametrize("email", MALFORMED_EMAILS)
    def test_malformed_email_is_rejected(self, email):
        with pytest.raises(ValidationError):
            new_user(1, email=email)

    def test_update_rejects_malformed_email(self):
        with pytest.raises(ValidationError):
            UserUpdate(email="a..b@example.com")

    async def test_duplicate_email(self, db, create_client):
        club = await create_client()
        service = UserService(db)
        await service.create(new_user(club.id))

        with pytest.raises(ConflictError):
            await service.create(new_user(club.id, email="RUNNER@example.com"))

    async def test_unknown_client(self, db):
        with pytest.raises(NotFoundError):
            await UserService(db).create(new_user(999))

    async def test_update(self, db, create_user):
        user = await create_user()
        other = await create_user()
        service = UserService(db)

        updated = await service.update(user.id, UserUpdate(city="Mysuru", gender="MALE"))
        assert updated.city == "Mysuru"
        assert updated.gender == "male"

        with pytest.raises(ConflictError):
            await service.update(user.id, UserUpdate(email=other.email))

    async def test_toggle_status(self, db, create_user):
        user = await create_user()
        service = UserService(db)

        assert (await service.toggle_status(user.id)).account_status == "inactive"
        assert (await service.toggle_status(user.id)).account_status == "active"

    async def test_delete_refused_with_activities(self, db, create_user, create_activity):
        user = await create_user()
        await create_activity(user)

        with pytest.raises(ConflictError):
            await UserService(db).delete(user.id)

    async def test_delete(self, db, create_user):
        user = await create_user()
        service = UserService(db)

        await service.delete(user.id)

        with pytest.raises(NotFoundError):
            await service.get(user.id)

    async def test_list_by_client(self, db, create_client, create_user):
        club_a = await create_client()
        club_b = await create_client()
        a1 = await create_user(club_a)
        a2 = await create_user(club_a)
        await create_user(club_b)
        service = UserService(db)

        assert [u.id for u in await service.list_users(club_a.id)] == [a1.id, a2.id]
        assert len(await service.list_users()) == 3


# =============================================================================
# CSV import
# =============================================================================

class TestImportRows:
    """Tests for UserService.import_rows."""

    async def test_imports_camel_case_rows(self, db, create_client):
        club = await create_client()

        report = await UserService(db).import_rows(club.id, [
            csv_row(),
            csv_row(email="meera@example.com", name="Meera", gender="Female"),
        ])

        assert report.success == 2
        assert report.errors == []
        users = await UserService(db).list_users(club.id)
        assert {u.email for u in users} == {"arjun@example.com", "meera@example.com"}
        assert {u.phone_number for u in users} == {"+919811111111"}

    async def test_bad_rows_are_reported_and_skipped(self, db, create_client, create_user):
        club = await create_client()
        existing = await create_user(club)
        rows = [
            csv_row(email="one@example.com"),
            {k: v for k, v in csv_row(email="two@example.com").items() if k != "name"},
            csv_row(email=existing.email),
            csv_row(email="broken"),
            csv_row(email="three@example.com"),
        ]

        report = await UserService(db).import_rows(club.id, rows)

        assert report.success == 2
        assert [e.row for e in report.errors] == [2, 3, 4]
        assert report.errors[0].error == "name is required"
        assert report.errors[1].error == f"User with email {existing.email} already exists"

    async def test_malformed_emails_are_row_errors(self, db, create_client):
        club = await create_client()
        rows = [csv_row(email=email) for email in MALFORMED_EMAILS]

        report = await UserService(db).import_rows(club.id, rows)

        assert report.success == 0
        assert [e.row for e in report.errors] == [1, 2, 3, 4]
        assert all(e.error.startswith("email: ") for e in report.errors)

    async def test_duplicate_within_file(self, db, create_client):
        club = await create_client()

        report = await UserService(db).import_rows(club.id, [csv_row(), csv_row()])

        assert report.success == 1
        assert report.errors[0].row == 2

    async def test_unknown_client(self, db):
        with pytest.raises(NotFoundError):
            await UserService(db).import_rows(999, [csv_row()])
