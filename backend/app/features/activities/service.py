"""
Activity ingestion and proof policy.

Every activity, whether typed in by an athlete, corrected by an admin
or imported from Strava, passes through ActivityIngestionService:

1. Structural validation (type, date, distance > 0, duration > 0, title)
2. Duration plausibility (rules.validate_duration), a hard rejection
3. Proof requirement for long activities (link or image)
4. De-duplication of imports on (user_id, external_id), a silent skip
5. Persist

Batch callers get one outcome per candidate; a rejected candidate
never aborts its siblings.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.features.users.models import User
from app.shared.constants import ActivityType, normalize_activity_type
from app.shared.errors import ActivityValidationError, NotFoundError
from .models import Activity
from .repository import ActivityRepository
from .rules import validate_duration
from .schemas import (
    ActivityCreate,
    ActivityUpdate,
    AdmissionOutcome,
    BatchFailure,
    BatchReport,
)

logger = logging.getLogger(__name__)

Candidate = Union[ActivityCreate, dict[str, Any]]


@dataclass
class AdmissionResult:
    """Outcome of admitting one candidate."""

    outcome: AdmissionOutcome
    activity: Optional[Activity] = None
    reason: Optional[str] = None

    @property
    def inserted(self) -> bool:
        return self.outcome == AdmissionOutcome.INSERTED


def check_activity(
    activity_type: Optional[str],
    date: Optional[datetime],
    distance: Optional[float],
    duration: Optional[int],
    title: Optional[str],
    proof_link: Optional[str],
    proof_image: Optional[str],
    proof_threshold_km: float,
) -> Optional[str]:
    """
    Apply structural, plausibility and proof rules.

    Returns:
        Rejection reason, or None if the activity is acceptable
    """
    if normalize_activity_type(activity_type) is None:
        allowed = ", ".join(t.value for t in ActivityType)
        return f"Activity type must be one of: {allowed}"
    if date is None:
        return "Date is required"
    if distance is None or distance <= 0:
        return "Distance must be greater than 0"
    if duration is None or duration <= 0:
        return "Duration must be greater than 0"
    if not title or not title.strip():
        return "Title is required"

    plausibility = validate_duration(distance, duration)
    if not plausibility.valid:
        return plausibility.message

    if distance >= proof_threshold_km and not (proof_link or proof_image):
        return f"Proof is required for activities of {proof_threshold_km:g} KM or more"

    return None


def _naive_utc(value: datetime) -> datetime:
    """Store timestamps as naive UTC like the rest of the schema."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}" if location else item.get("msg", ""))
    return "; ".join(parts)


class ActivityIngestionService:
    """
    Admission of activities into storage.

    Usage:
        service = ActivityIngestionService(db)
        result = await service.admit(candidate, owner_id)
        report = await service.admit_batch(candidates, owner_id)
    """

    def __init__(self, db: AsyncSession, proof_threshold_km: Optional[float] = None):
        self.db = db
        self.activities = ActivityRepository(db)
        self.proof_threshold_km = (
            proof_threshold_km
            if proof_threshold_km is not None
            else settings.proof_required_distance_km
        )

    async def _get_owner(self, owner_id: int) -> User:
        owner = await self.db.get(User, owner_id)
        if owner is None:
            raise NotFoundError("User", owner_id)
        return owner

    async def admit(self, candidate: Candidate, owner_id: int) -> AdmissionResult:
        """
        Validate and persist one candidate.

        Raises:
            NotFoundError: If the owner does not exist

        Returns:
            AdmissionResult (inserted, skipped_duplicate or rejected)
        """
        await self._get_owner(owner_id)
        return await self._admit(candidate, owner_id)

    async def _admit(self, candidate: Candidate, owner_id: int) -> AdmissionResult:
        if not isinstance(candidate, ActivityCreate):
            try:
                candidate = ActivityCreate.model_validate(candidate)
            except ValidationError as e:
                return AdmissionResult(
                    AdmissionOutcome.REJECTED, reason=_describe_validation_error(e)
                )

        reason = check_activity(
            candidate.type,
            candidate.date,
            candidate.distance,
            candidate.duration,
            candidate.title,
            candidate.proof_link,
            candidate.proof_image,
            self.proof_threshold_km,
        )
        if reason:
            logger.info(f"Rejected activity for user {owner_id}: {reason}")
            return AdmissionResult(AdmissionOutcome.REJECTED, reason=reason)

        fields = candidate.model_dump()
        fields["type"] = normalize_activity_type(candidate.type).value
        fields["date"] = _naive_utc(candidate.date)
        fields["title"] = candidate.title.strip()
        fields["user_id"] = owner_id

        if candidate.external_id:
            activity, inserted = await self.activities.insert_if_absent(**fields)
            if not inserted:
                logger.info(
                    f"Skipping duplicate import {candidate.external_id} for user {owner_id}"
                )
                return AdmissionResult(AdmissionOutcome.SKIPPED_DUPLICATE, activity=activity)
        else:
            activity = await self.activities.create(**fields)

        await self.db.commit()
        logger.info(
            f"Stored activity {activity.id} for user {owner_id}: "
            f"{activity.type} {activity.distance}km"
        )
        return AdmissionResult(AdmissionOutcome.INSERTED, activity=activity)

    async def admit_batch(
        self,
        candidates: Iterable[Candidate],
        owner_id: int
    ) -> BatchReport:
        """
        Admit candidates independently.

        Raises:
            NotFoundError: If the owner does not exist

        Returns:
            BatchReport with imported/skipped counts and per-item failures
        """
        await self._get_owner(owner_id)

        report = BatchReport()
        for index, candidate in enumerate(candidates):
            external_id = (
                candidate.external_id if isinstance(candidate, ActivityCreate)
                else candidate.get("external_id") if isinstance(candidate, dict)
                else None
            )
            result = await self._admit(candidate, owner_id)

            if result.outcome == AdmissionOutcome.INSERTED:
                report.imported += 1
            elif result.outcome == AdmissionOutcome.SKIPPED_DUPLICATE:
                report.skipped += 1
            else:
                report.failures.append(
                    BatchFailure(index=index, external_id=external_id, error=result.reason)
                )

        logger.info(
            f"Batch for user {owner_id}: {report.imported} imported, "
            f"{report.skipped} skipped, {report.failed} failed"
        )
        return report

    async def submit(self, candidate: Candidate, owner_id: int) -> Activity:
        """
        Single-item submission (athlete workout form).

        Raises:
            NotFoundError: If the owner does not exist
            ActivityValidationError: If the activity is rejected
        """
        result = await self.admit(candidate, owner_id)
        if result.outcome == AdmissionOutcome.REJECTED:
            raise ActivityValidationError(result.reason)
        return result.activity

    # -------------------------------------------------------------------------
    # Reads and admin corrections
    # -------------------------------------------------------------------------

    async def list_for_user(self, user_id: int) -> list[Activity]:
        await self._get_owner(user_id)
        return await self.activities.list_for_user(user_id)

    async def get(self, activity_id: int) -> Activity:
        activity = await self.activities.get_by_id(activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        return activity

    async def update_activity(self, activity_id: int, changes: ActivityUpdate) -> Activity:
        """
        Apply an admin correction, re-checking the merged activity.

        Raises:
            NotFoundError: If the activity does not exist
            ActivityValidationError: If the corrected activity breaks a rule
        """
        activity = await self.get(activity_id)
        patch = changes.model_dump(exclude_unset=True)

        merged = {
            column: patch.get(column, getattr(activity, column))
            for column in (
                "type", "date", "distance", "duration", "title",
                "proof_link", "proof_image",
            )
        }
        reason = check_activity(
            merged["type"],
            merged["date"],
            merged["distance"],
            merged["duration"],
            merged["title"],
            merged["proof_link"],
            merged["proof_image"],
            self.proof_threshold_km,
        )
        if reason:
            raise ActivityValidationError(reason)

        if "type" in patch:
            patch["type"] = normalize_activity_type(patch["type"]).value
        if patch.get("date") is not None:
            patch["date"] = _naive_utc(patch["date"])

        activity = await self.activities.update(activity, **patch)
        await self.db.commit()
        logger.info(f"Corrected activity {activity_id}: {sorted(patch)}")
        return activity

    async def delete_activity(self, activity_id: int) -> None:
        activity = await self.get(activity_id)
        await self.activities.delete(activity)
        await self.db.commit()
        logger.info(f"Deleted activity {activity_id}")
