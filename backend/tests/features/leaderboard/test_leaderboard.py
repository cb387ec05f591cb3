"""
Tests for leaderboard aggregation.
"""

from types import SimpleNamespace

import pytest

from app.features.leaderboard import LeaderboardService, build_leaderboard
from app.shared.errors import ActivityValidationError


def _user(user_id, name=None):
    return SimpleNamespace(id=user_id, athlete_id=f"CYA{user_id}", name=name or f"U{user_id}")


def _activity(user_id, distance, duration=1000):
    return SimpleNamespace(user_id=user_id, distance=distance, duration=duration)


# =============================================================================
# Pure aggregation
# =============================================================================

class TestBuildLeaderboard:
    """Tests for build_leaderboard."""

    def test_sums_and_ranks_by_distance(self):
        users = [_user(1), _user(2)]
        activities = [
            _activity(1, 5.0, 1500),
            _activity(2, 12.5, 4000),
            _activity(1, 3.2, 900),
        ]

        entries = build_leaderboard(users, activities)

        assert [e.user_id for e in entries] == [2, 1]
        assert entries[0].rank == 1
        assert entries[1].total_distance == 8.2
        assert entries[1].total_duration == 2400
        assert entries[1].activity_count == 2

    def test_users_without_activities_are_dropped(self):
        entries = build_leaderboard([_user(1), _user(2)], [_activity(2, 1.0)])

        assert [e.user_id for e in entries] == [2]

    def test_activities_of_unlisted_users_are_ignored(self):
        entries = build_leaderboard([_user(1)], [_activity(1, 1.0), _activity(9, 50.0)])

        assert [e.user_id for e in entries] == [1]

    def test_ties_break_on_user_id(self):
        users = [_user(3), _user(1), _user(2)]
        activities = [_activity(3, 5.0), _activity(1, 5.0), _activity(2, 5.0)]

        entries = build_leaderboard(users, activities)

        assert [e.user_id for e in entries] == [1, 2, 3]

    def test_limit_and_offset_keep_absolute_rank(self):
        users = [_user(i) for i in range(1, 6)]
        activities = [_activity(i, float(10 - i)) for i in range(1, 6)]

        entries = build_leaderboard(users, activities, limit=2, offset=1)

        assert [e.user_id for e in entries] == [2, 3]
        assert [e.rank for e in entries] == [2, 3]

    def test_empty(self):
        assert build_leaderboard([], []) == []

    def test_distance_is_rounded(self):
        entries = build_leaderboard([_user(1)], [_activity(1, 0.1), _activity(1, 0.2)])

        assert entries[0].total_distance == 0.3


# =============================================================================
# Service with storage
# =============================================================================

class TestLeaderboardService:
    """Tests for LeaderboardService.rank."""

    async def test_filters_by_gender_and_type(self, db, create_user, create_activity):
        alice = await create_user(gender="female")
        bob = await create_user(gender="male")
        await create_activity(alice, type="running", distance=5.0)
        await create_activity(alice, type="cycling", distance=30.0)
        await create_activity(bob, type="running", distance=8.0)

        service = LeaderboardService(db)

        everyone = await service.rank()
        assert [e.user_id for e in everyone] == [alice.id, bob.id]
        assert everyone[0].total_distance == 35.0

        runners = await service.rank(activity_type="running")
        assert [e.user_id for e in runners] == [bob.id, alice.id]

        women_runners = await service.rank(activity_type="Run", gender="Female")
        assert [e.user_id for e in women_runners] == [alice.id]
        assert women_runners[0].total_distance == 5.0

    async def test_filters_by_client(self, db, create_client, create_user, create_activity):
        club_a = await create_client()
        club_b = await create_client()
        a = await create_user(club_a)
        b = await create_user(club_b)
        await create_activity(a, distance=3.0)
        await create_activity(b, distance=4.0)

        entries = await LeaderboardService(db).rank(client_id=club_a.id)

        assert [e.user_id for e in entries] == [a.id]

    async def test_unknown_type_filter(self, db):
        with pytest.raises(ActivityValidationError):
            await LeaderboardService(db).rank(activity_type="swimming")

    async def test_default_limit(self, db, create_user, create_activity, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "leaderboard_default_limit", 1)
        for distance in (1.0, 2.0):
            user = await create_user()
            await create_activity(user, distance=distance)

        entries = await LeaderboardService(db).rank()

        assert len(entries) == 1
        assert entries[0].total_distance == 2.0
