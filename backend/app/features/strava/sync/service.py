"""
Manual Strava sync.

Pulls recent activities of one athlete and feeds them through the same
ingestion path as every other source:

1. Fresh envelope (refresh + persist if stale)
2. GET /athlete/activities
3. Map each activity; unsupported types are counted as ignored
4. ActivityIngestionService.admit_batch (dedup on external_id)
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.activities.service import ActivityIngestionService
from app.features.users.repository import UserRepository
from app.shared.errors import NotFoundError
from ..client import StravaClient
from ..mapping import map_strava_activity
from ..oauth import StravaOAuth
from ..schemas import SyncReport
from ..tokens import StravaTokenService

logger = logging.getLogger(__name__)


class StravaSyncService:
    """
    On-demand sync orchestrator.

    Usage:
        service = StravaSyncService(db)
        report = await service.sync_user(user_id)
    """

    def __init__(
        self,
        db: AsyncSession,
        oauth: Optional[StravaOAuth] = None,
        client: Optional[StravaClient] = None,
    ):
        self.db = db
        self.users = UserRepository(db)
        self.tokens = StravaTokenService(db, oauth)
        self.client = client or StravaClient()
        self.ingestion = ActivityIngestionService(db)

    async def sync_user(
        self,
        user_id: int,
        after: Optional[datetime] = None,
        per_page: int = 30
    ) -> SyncReport:
        """
        Import recent Strava activities for one athlete.

        Raises:
            NotFoundError: If the user does not exist
            StravaNotConnectedError: If the user has no envelope
            UpstreamAuthError / UpstreamTransientError: Strava failures
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        envelope = await self.tokens.get_fresh_envelope(user)
        remote_activities = await self.client.get_activities(
            envelope.access_token, after=after, per_page=per_page
        )

        report = SyncReport(fetched=len(remote_activities))
        candidates = []
        for remote in remote_activities:
            candidate = map_strava_activity(remote)
            if candidate is None:
                logger.debug(
                    f"Ignoring Strava activity {remote.get('id')} of type {remote.get('type')}"
                )
                report.ignored += 1
                continue
            candidates.append(candidate)

        batch = await self.ingestion.admit_batch(candidates, user_id)
        report.imported = batch.imported
        report.skipped = batch.skipped
        report.failures = batch.failures

        logger.info(
            f"Strava sync for user {user_id}: fetched {report.fetched}, "
            f"imported {report.imported}, skipped {report.skipped}, "
            f"ignored {report.ignored}, failed {len(report.failures)}"
        )
        return report
