"""
Tenant management and platform statistics.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.activities.repository import ActivityRepository
from app.features.certificates.repository import CertificateRepository
from app.features.users.repository import UserRepository
from app.shared.errors import ConflictError, NotFoundError
from .models import Client
from .repository import ClientRepository
from .schemas import ClientCreate, ClientStats, ClientUpdate, OverallStats

logger = logging.getLogger(__name__)


class ClientService:
    """
    Client CRUD, public lookup and stats.

    Usage:
        service = ClientService(db)
        client = await service.create(ClientCreate(...))
        stats = await service.stats(client.id)
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.clients = ClientRepository(db)
        self.users = UserRepository(db)
        self.activities = ActivityRepository(db)
        self.certificates = CertificateRepository(db)

    async def create(self, data: ClientCreate) -> Client:
        """
        Create a client.

        Raises:
            ConflictError: If the base path is taken
        """
        if await self.clients.get_by_base_path(data.base_path):
            raise ConflictError(f"Base path '{data.base_path}' is already in use")

        client = await self.clients.create(**data.model_dump())
        await self.db.commit()
        logger.info(f"Created client {client.id} at /{client.base_path}")
        return client

    async def get(self, client_id: int) -> Client:
        client = await self.clients.get_by_id(client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    async def list_clients(self) -> list[Client]:
        return await self.clients.get_all()

    async def get_public(self, base_path: str) -> Client:
        """
        Branded login lookup; inactive clients are invisible.

        Raises:
            NotFoundError: If no active client uses the path
        """
        client = await self.clients.get_by_base_path(base_path)
        if client is None or client.status != "active":
            raise NotFoundError("Client", base_path)
        return client

    async def update(self, client_id: int, data: ClientUpdate) -> Client:
        """
        Partial update.

        Raises:
            NotFoundError: If the client does not exist
            ConflictError: If the new base path is taken
        """
        client = await self.get(client_id)
        changes = data.model_dump(exclude_unset=True)

        new_path = changes.get("base_path")
        if new_path and new_path != client.base_path:
            other = await self.clients.get_by_base_path(new_path)
            if other and other.id != client.id:
                raise ConflictError(f"Base path '{new_path}' is already in use")

        client = await self.clients.update(client, **changes)
        await self.db.commit()
        logger.info(f"Updated client {client_id}: {sorted(changes)}")
        return client

    async def delete(self, client_id: int) -> None:
        """
        Delete a client without athletes.

        Raises:
            ConflictError: If the client still has users
        """
        client = await self.get(client_id)
        users = await self.users.count(client_id=client_id)
        if users:
            raise ConflictError(
                f"Client {client_id} has {users} users and cannot be deleted"
            )
        await self.clients.delete(client)
        await self.db.commit()
        logger.info(f"Deleted client {client_id}")

    async def stats(self, client_id: int) -> ClientStats:
        """User and activity counts for one client."""
        await self.get(client_id)
        users = await self.users.list_by_client(client_id)
        activities = await self.activities.count_for_users(user.id for user in users)
        return ClientStats(users=len(users), activities=activities)

    async def overall_stats(self) -> OverallStats:
        """Platform-wide counts."""
        return OverallStats(
            users=await self.users.count(),
            activities=await self.activities.count(),
            clients=await self.clients.count(),
            certificates=await self.certificates.count(),
        )
