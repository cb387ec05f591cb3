"""
Activity schemas.

ActivityCreate is deliberately lenient: structural rules (required
fields, positive numbers) are enforced by ActivityIngestionService so
that batch callers get a per-item reason instead of a request-level
422.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ActivityCreate(BaseModel):
    """Candidate activity from a form, CSV row or Strava import."""

    type: Optional[str] = None
    date: Optional[datetime] = None
    distance: Optional[float] = None  # km
    duration: Optional[int] = None  # seconds
    title: Optional[str] = None
    description: Optional[str] = None
    proof_link: Optional[str] = None
    proof_image: Optional[str] = None

    # Import metadata
    external_id: Optional[str] = None
    external_source: Optional[str] = None

    elevation_gain: Optional[float] = None
    avg_heart_rate: Optional[float] = None


class ActivityUpdate(BaseModel):
    """Admin correction; import metadata is not editable."""

    type: Optional[str] = None
    date: Optional[datetime] = None
    distance: Optional[float] = None
    duration: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    proof_link: Optional[str] = None
    proof_image: Optional[str] = None
    elevation_gain: Optional[float] = None
    avg_heart_rate: Optional[float] = None


class ActivityResponse(BaseModel):
    """Activity response."""

    id: int
    user_id: int
    type: str
    date: datetime
    distance: float
    duration: int
    title: str
    description: Optional[str]
    proof_link: Optional[str]
    proof_image: Optional[str]
    external_id: Optional[str]
    external_source: Optional[str]
    elevation_gain: Optional[float]
    avg_heart_rate: Optional[float]
    pace_min_per_km: Optional[float]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class AdmissionOutcome(str, Enum):
    """What happened to one candidate."""
    INSERTED = "inserted"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    REJECTED = "rejected"


class BatchFailure(BaseModel):
    """One rejected candidate in a batch."""

    index: int  # 0-based position in the submitted batch
    external_id: Optional[str] = None
    error: str


class BatchReport(BaseModel):
    """
    Per-batch outcome counts.

    Duplicates are counted in `skipped`, never in `failed`.
    """

    imported: int = 0
    skipped: int = 0
    failures: list[BatchFailure] = Field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)
