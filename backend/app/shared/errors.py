"""
Domain error taxonomy.

Routes translate these into HTTP responses; batch operations record
them per item instead of aborting.
"""


class AppError(Exception):
    """Base application error."""
    pass


class NotFoundError(AppError):
    """Unknown user, client, activity or certificate."""

    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ConflictError(AppError):
    """Operation conflicts with existing state (duplicates, owned rows)."""
    pass


class ActivityValidationError(AppError):
    """Malformed or policy-violating activity."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)
