"""
Tests for ActivityIngestionService.

Covers the admission pipeline: structural checks, duration rules,
proof policy and de-duplication of imports.
"""

from datetime import datetime

import pytest

from app.features.activities import (
    ActivityCreate,
    ActivityIngestionService,
    ActivityRepository,
    ActivityUpdate,
    AdmissionOutcome,
)
from app.shared.errors import ActivityValidationError, NotFoundError


def candidate(**overrides) -> dict:
    data = {
        "type": "running",
        "date": "2024-03-01T07:00:00",
        "distance": 5.0,
        "duration": 1800,
        "title": "Parkrun",
    }
    data.update(overrides)
    return data


# =============================================================================
# Single admission
# =============================================================================

class TestAdmit:
    """Tests for admit()."""

    async def test_plausible_activity_is_inserted(self, db, create_user):
        user = await create_user()

        result = await ActivityIngestionService(db).admit(candidate(), user.id)

        assert result.outcome == AdmissionOutcome.INSERTED
        assert result.activity.id is not None
        assert result.activity.type == "running"
        assert result.activity.user_id == user.id

    async def test_implausible_duration_is_rejected(self, db, create_user):
        user = await create_user()

        result = await ActivityIngestionService(db).admit(
            candidate(distance=10, duration=1200, proof_link="https://x"), user.id
        )

        assert result.outcome == AdmissionOutcome.REJECTED
        assert result.reason == (
            "Invalid duration for 10KM. Duration must be between 35-120 minutes."
        )
        assert await ActivityRepository(db).count() == 0

    async def test_long_activity_requires_proof(self, db, create_user):
        user = await create_user()
        service = ActivityIngestionService(db)

        rejected = await service.admit(candidate(distance=10, duration=3000), user.id)
        assert rejected.outcome == AdmissionOutcome.REJECTED
        assert "Proof is required" in rejected.reason

        accepted = await service.admit(
            candidate(distance=10, duration=3000, proof_image="https://img/1.png"), user.id
        )
        assert accepted.outcome == AdmissionOutcome.INSERTED

    async def test_proof_threshold_is_configurable(self, db, create_user):
        user = await create_user()
        service = ActivityIngestionService(db, proof_threshold_km=5)

        result = await service.admit(candidate(distance=5, duration=1800), user.id)

        assert result.outcome == AdmissionOutcome.REJECTED

    async def test_just_below_threshold_needs_no_proof(self, db, create_user):
        user = await create_user()

        result = await ActivityIngestionService(db).admit(
            candidate(distance=9.99, duration=3000), user.id
        )

        assert result.outcome == AdmissionOutcome.INSERTED

    @pytest.mark.parametrize("spelling,expected", [
        ("Run", "running"),
        ("Ride", "cycling"),
        ("walk", "walking"),
        ("Running", "running"),
    ])
    async def test_type_is_normalized(self, db, create_user, spelling, expected):
        user = await create_user()

        result = await ActivityIngestionService(db).admit(
            candidate(type=spelling, distance=7), user.id
        )

        assert result.activity.type == expected

    @pytest.mark.parametrize("overrides,reason", [
        ({"type": "swimming"}, "Activity type must be one of"),
        ({"date": None}, "Date is required"),
        ({"distance": 0}, "Distance must be greater than 0"),
        ({"duration": -5}, "Duration must be greater than 0"),
        ({"title": "   "}, "Title is required"),
    ])
    async def test_structural_rejections(self, db, create_user, overrides, reason):
        user = await create_user()

        result = await ActivityIngestionService(db).admit(candidate(**overrides), user.id)

        assert result.outcome == AdmissionOutcome.REJECTED
        assert reason in result.reason

    async def test_timezone_aware_date_is_stored_as_utc(self, db, create_user):
        user = await create_user()

        result = await ActivityIngestionService(db).admit(
            candidate(date="2024-03-01T12:30:00+05:30"), user.id
        )

        assert result.activity.date == datetime(2024, 3, 1, 7, 0)

    async def test_unknown_owner(self, db):
        with pytest.raises(NotFoundError):
            await ActivityIngestionService(db).admit(candidate(), 999)

    async def test_malformed_candidate_is_rejected(self, db, create_user):
        user = await create_user()

        result = await ActivityIngestionService(db).admit(
            candidate(distance="far"), user.id
        )

        assert result.outcome == AdmissionOutcome.REJECTED
        assert "distance" in result.reason


# =============================================================================
# De-duplication
# =============================================================================

class TestDuplicates:
    """Imports with the same external id are stored once."""

    async def test_second_import_is_skipped(self, db, create_user):
        user = await create_user()
        service = ActivityIngestionService(db)
        data = candidate(external_id="9001", external_source="strava")

        first = await service.admit(data, user.id)
        second = await service.admit(data, user.id)

        assert first.outcome == AdmissionOutcome.INSERTED
        assert second.outcome == AdmissionOutcome.SKIPPED_DUPLICATE
        assert second.activity.id == first.activity.id
        assert await ActivityRepository(db).count() == 1

    async def test_same_external_id_for_other_user_is_kept(self, db, create_user):
        alice = await create_user()
        bob = await create_user()
        service = ActivityIngestionService(db)
        data = candidate(external_id="9001")

        await service.admit(data, alice.id)
        result = await service.admit(data, bob.id)

        assert result.outcome == AdmissionOutcome.INSERTED

    async def test_constraint_decides_when_lookup_misses(self, db, create_user, monkeypatch):
        """A concurrent insert between lookup and insert still yields one row."""
        user = await create_user()
        service = ActivityIngestionService(db)
        data = candidate(external_id="42")
        first = await service.admit(data, user.id)

        repo = service.activities
        real_lookup = repo.get_by_external_id
        calls = {"n": 0}

        async def stale_lookup(user_id, external_id):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return await real_lookup(user_id, external_id)

        monkeypatch.setattr(repo, "get_by_external_id", stale_lookup)

        result = await service.admit(data, user.id)

        assert result.outcome == AdmissionOutcome.SKIPPED_DUPLICATE
        assert result.activity.id == first.activity.id
        assert await ActivityRepository(db).count() == 1


# =============================================================================
# Batches
# =============================================================================

class TestAdmitBatch:
    """Tests for admit_batch()."""

    async def test_mixed_batch(self, db, create_user):
        user = await create_user()
        service = ActivityIngestionService(db)
        await service.admit(candidate(external_id="1"), user.id)

        report = await service.admit_batch([
            candidate(external_id="1"),                      # duplicate
            candidate(external_id="2"),                      # ok
            candidate(external_id="3", distance=10, duration=600, proof_link="p"),  # implausible
            ActivityCreate(**candidate(external_id="4", title="Evening")),  # ok
        ], user.id)

        assert report.imported == 2
        assert report.skipped == 1
        assert report.failed == 1
        assert report.failures[0].index == 2
        assert report.failures[0].external_id == "3"
        assert "Invalid duration for 10KM" in report.failures[0].error

    async def test_empty_batch(self, db, create_user):
        user = await create_user()

        report = await ActivityIngestionService(db).admit_batch([], user.id)

        assert (report.imported, report.skipped, report.failed) == (0, 0, 0)


# =============================================================================
# Submission and corrections
# =============================================================================

class TestSubmitAndCorrect:
    """Tests for submit(), update_activity() and delete_activity()."""

    async def test_submit_raises_on_rejection(self, db, create_user):
        user = await create_user()

        with pytest.raises(ActivityValidationError) as exc:
            await ActivityIngestionService(db).submit(
                candidate(distance=5, duration=60), user.id
            )

        assert "Invalid duration for 5KM" in str(exc.value)

    async def test_update_rechecks_merged_values(self, db, create_user, create_activity):
        user = await create_user()
        activity = await create_activity(user, distance=7.0, duration=2400)
        service = ActivityIngestionService(db)

        with pytest.raises(ActivityValidationError):
            await service.update_activity(activity.id, ActivityUpdate(distance=5.0, duration=300))

        updated = await service.update_activity(activity.id, ActivityUpdate(title="Tempo"))
        assert updated.title == "Tempo"
        assert updated.distance == 7.0

    async def test_update_normalizes_type(self, db, create_user, create_activity):
        user = await create_user()
        activity = await create_activity(user)

        updated = await ActivityIngestionService(db).update_activity(
            activity.id, ActivityUpdate(type="Ride")
        )

        assert updated.type == "cycling"

    async def test_delete(self, db, create_user, create_activity):
        user = await create_user()
        activity = await create_activity(user)
        service = ActivityIngestionService(db)

        await service.delete_activity(activity.id)

        assert await service.list_for_user(user.id) == []
        with pytest.raises(NotFoundError):
            await service.delete_activity(activity.id)

    async def test_list_newest_first(self, db, create_user, create_activity):
        user = await create_user()
        older = await create_activity(user, date=datetime(2024, 1, 1))
        newer = await create_activity(user, date=datetime(2024, 2, 1))

        activities = await ActivityIngestionService(db).list_for_user(user.id)

        assert [a.id for a in activities] == [newer.id, older.id]
