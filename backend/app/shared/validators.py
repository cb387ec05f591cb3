"""
Field validators shared by feature schemas.
"""


def normalize_email(value: str) -> str:
    """Lowercase an address already checked by EmailStr."""
    return value.strip().lower()
