"""
Tests for tenant management, stats and certificates.
"""

import pytest
from pydantic import ValidationError

from app.features.certificates import CertificateCreate, CertificateService
from app.features.clients import ClientCreate, ClientService, ClientUpdate
from app.shared.errors import ConflictError, NotFoundError


def new_client(**overrides) -> ClientCreate:
    data = {
        "name": "Bengaluru Runners",
        "email": "Admin@BlrRunners.in",
        "base_path": "blr-runners",
    }
    data.update(overrides)
    return ClientCreate(**data)


# =============================================================================
# Validation
# =============================================================================

class TestClientSchemas:
    """Tests for base path and email rules."""

    def test_base_path_is_lowercased(self):
        assert new_client(base_path="BLR-Runners").base_path == "blr-runners"

    @pytest.mark.parametrize("base_path", ["ab", "has space", "under_score", "slash/path"])
    def test_bad_base_path(self, base_path):
        with pytest.raises(ValidationError):
            new_client(base_path=base_path)

    def test_bad_email(self):
        with pytest.raises(ValidationError):
            new_client(email="nobody")
        with pytest.raises(ValidationError):
            new_client(email="admin@-blr-.in")


# =============================================================================
# CRUD
# =============================================================================

class TestClientService:
    """Tests for ClientService."""

    async def test_create(self, db):
        client = await ClientService(db).create(new_client())

        assert client.id is not None
        assert client.email == "admin@blrrunners.in"
        assert client.status == "active"

    async def test_duplicate_base_path(self, db):
        service = ClientService(db)
        await service.create(new_client())

        with pytest.raises(ConflictError):
            await service.create(new_client(name="Other club"))

    async def test_public_lookup_hides_inactive(self, db):
        service = ClientService(db)
        client = await service.create(new_client())

        assert (await service.get_public("blr-runners")).id == client.id

        await service.update(client.id, ClientUpdate(status="inactive"))

        with pytest.raises(NotFoundError):
            await service.get_public("blr-runners")

    async def test_update_to_taken_path(self, db):
        service = ClientService(db)
        await service.create(new_client())
        other = await service.create(new_client(base_path="mysuru-striders"))

        with pytest.raises(ConflictError):
            await service.update(other.id, ClientUpdate(base_path="blr-runners"))

    async def test_delete_refused_with_users(self, db, create_client, create_user):
        client = await create_client()
        await create_user(client)

        with pytest.raises(ConflictError):
            await ClientService(db).delete(client.id)

    async def test_delete(self, db, create_client):
        client = await create_client()
        service = ClientService(db)

        await service.delete(client.id)

        with pytest.raises(NotFoundError):
            await service.get(client.id)


# =============================================================================
# Stats
# =============================================================================

class TestStats:
    """Tests for per-client and overall stats."""

    async def test_client_stats(self, db, create_client, create_user, create_activity):
        club = await create_client()
        other = await create_client()
        a = await create_user(club)
        b = await create_user(club)
        c = await create_user(other)
        await create_activity(a)
        await create_activity(a)
        await create_activity(b)
        await create_activity(c)

        stats = await ClientService(db).stats(club.id)

        assert stats.users == 2
        assert stats.activities == 3

    async def test_empty_client_stats(self, db, create_client):
        club = await create_client()

        stats = await ClientService(db).stats(club.id)

        assert (stats.users, stats.activities) == (0, 0)

    async def test_overall_stats(self, db, create_user, create_activity):
        user = await create_user()
        await create_activity(user)
        await CertificateService(db).issue(
            user.id, CertificateCreate(type="month", name="January", link="https://c/1.pdf")
        )

        stats = await ClientService(db).overall_stats()

        assert stats.users == 1
        assert stats.activities == 1
        assert stats.clients == 1
        assert stats.certificates == 1


# =============================================================================
# Certificates
# =============================================================================

class TestCertificates:
    """Tests for CertificateService."""

    async def test_issue_and_list(self, db, create_user):
        user = await create_user()
        service = CertificateService(db)

        await service.issue(user.id, CertificateCreate(type="stage", name="Stage1", link="https://c/s1"))
        await service.issue(user.id, CertificateCreate(type="month", name="March", link="https://c/m3"))

        names = {c.name for c in await service.list_for_user(user.id)}
        assert names == {"Stage1", "March"}

    async def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            await CertificateService(db).issue(
                404, CertificateCreate(type="stage", name="Stage1", link="https://c/s1")
            )

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            CertificateCreate(type="year", name="2024", link="https://c/y")
