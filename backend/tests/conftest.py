"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database (aiosqlite) with all
tables created from the models.
"""

import json
import time
from datetime import datetime
from typing import Callable, Optional

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.session import enable_sqlite_savepoints
from app.features.activities.models import Activity
from app.features.clients.models import Client
from app.features.strava.client import StravaClient
from app.features.strava.oauth import StravaOAuth
from app.features.users.models import User
from app.models import register_models


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    metadata = register_models()
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# =============================================================================
# Factories
# =============================================================================

def make_envelope(
    athlete_id=12345,
    access_token: str = "access-1",
    refresh_token: str = "refresh-1",
    expires_at: Optional[int] = None,
) -> str:
    """Serialized credential envelope as stored in User.strava_token."""
    if expires_at is None:
        expires_at = int(time.time()) + 3600
    return json.dumps({
        "access_token": access_token,
        "refresh_token": refresh_token,
        "expires_at": expires_at,
        "athlete": {"id": athlete_id},
    })


@pytest.fixture
def create_client(db) -> Callable:
    counter = {"n": 0}

    async def _create(**overrides) -> Client:
        counter["n"] += 1
        fields = {
            "name": f"Club {counter['n']}",
            "email": f"club{counter['n']}@example.com",
            "base_path": f"club-{counter['n']}",
            "status": "active",
        }
        fields.update(overrides)
        client = Client(**fields)
        db.add(client)
        await db.commit()
        return client

    return _create


@pytest.fixture
def create_user(db, create_client) -> Callable:
    counter = {"n": 0}

    async def _create(client: Optional[Client] = None, **overrides) -> User:
        counter["n"] += 1
        if client is None and "client_id" not in overrides:
            client = await create_client()
        fields = {
            "athlete_id": f"CYATEST{counter['n']:03d}",
            "client_id": client.id if client else None,
            "email": f"athlete{counter['n']}@example.com",
            "password_hash": "x",
            "name": f"Athlete {counter['n']}",
            "phone_number": "+10000000000",
            "date_of_birth": "1990-01-01",
            "gender": "female",
            "country": "India",
            "state": "Karnataka",
            "city": "Bengaluru",
            "zipcode": "560001",
        }
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        await db.commit()
        return user

    return _create


@pytest.fixture
def create_activity(db) -> Callable:
    async def _create(user: User, **overrides) -> Activity:
        fields = {
            "user_id": user.id,
            "type": "running",
            "date": datetime(2024, 3, 1, 7, 0),
            "distance": 7.0,
            "duration": 2400,
            "title": "Morning run",
        }
        fields.update(overrides)
        activity = Activity(**fields)
        db.add(activity)
        await db.commit()
        return activity

    return _create


# =============================================================================
# Strava fakes
# =============================================================================

class FakeStrava:
    """
    Records requests and answers them from per-route handlers.

    handlers maps (method, path) to a callable(request) -> httpx.Response.
    """

    def __init__(self):
        self.handlers: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, handler=None, *, json_body=None, status_code=200):
        if handler is None:
            def handler(request, _body=json_body, _status=status_code):
                return httpx.Response(_status, json=_body)
        self.handlers[(method, path)] = handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.handlers.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Record Not Found"})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def oauth(self, **kwargs) -> StravaOAuth:
        return StravaOAuth(
            client_id="client-id",
            client_secret="client-secret",
            transport=self.transport,
            **kwargs,
        )

    def client(self) -> StravaClient:
        return StravaClient(
            transport=self.transport,
            client_id="client-id",
            client_secret="client-secret",
        )


@pytest.fixture
def strava() -> FakeStrava:
    return FakeStrava()


@pytest.fixture
def envelope() -> Callable[..., str]:
    return make_envelope
