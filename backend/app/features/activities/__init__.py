"""
Activities module.

Usage:
    from app.features.activities import ActivityIngestionService, validate_duration

Components:
- rules: Distance-duration plausibility table
- ActivityIngestionService: Validation, proof policy and de-duplication
- ActivityRepository: Data access for activities
"""

from .models import Activity
from .rules import DURATION_RULES, DurationRule, ValidationResult, validate_duration
from .schemas import (
    ActivityCreate,
    ActivityUpdate,
    ActivityResponse,
    AdmissionOutcome,
    BatchFailure,
    BatchReport,
)
from .repository import ActivityRepository
from .service import ActivityIngestionService, AdmissionResult, check_activity

__all__ = [
    # Models
    "Activity",
    # Rules
    "DURATION_RULES",
    "DurationRule",
    "ValidationResult",
    "validate_duration",
    # Schemas
    "ActivityCreate",
    "ActivityUpdate",
    "ActivityResponse",
    "AdmissionOutcome",
    "BatchFailure",
    "BatchReport",
    # Services
    "ActivityRepository",
    "ActivityIngestionService",
    "AdmissionResult",
    "check_activity",
]
