"""
Clients (tenants) module.

Usage:
    from app.features.clients import ClientService
"""

from .models import Client
from .schemas import (
    ClientCreate,
    ClientUpdate,
    ClientResponse,
    ClientPublicResponse,
    ClientStats,
    OverallStats,
)
from .repository import ClientRepository
from .service import ClientService

__all__ = [
    "Client",
    "ClientCreate",
    "ClientUpdate",
    "ClientResponse",
    "ClientPublicResponse",
    "ClientStats",
    "OverallStats",
    "ClientRepository",
    "ClientService",
]
