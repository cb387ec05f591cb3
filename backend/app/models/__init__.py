"""
Database Models

Feature models live in their feature packages (features/*/models.py).
They are imported lazily to avoid circular imports; call
register_models() before touching Base.metadata or configuring mappers.
"""

from app.models.base import Base


def register_models():
    """Import every model module so Base.metadata knows all tables."""
    from app.features.clients import models as clients  # noqa: F401
    from app.features.users import models as users  # noqa: F401
    from app.features.activities import models as activities  # noqa: F401
    from app.features.certificates import models as certificates  # noqa: F401
    from app.features.strava import models as strava  # noqa: F401

    return Base.metadata


__all__ = [
    "Base",
    "register_models",
]
