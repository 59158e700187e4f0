# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle analytics service.

Read-only projections over StruggleSignal and StruggleProfile for the
admin and tutor surfaces. Nothing here is part of the scoring algorithm
and nothing here writes.

Usage:
    from src.domains.analytics import StruggleAnalyticsService

    service = StruggleAnalyticsService(db=db_session)

    # Admin overview of the last week
    overview = await service.get_admin_overview(days=7)

    # High-support reasons in one cohort
    heatmap = await service.get_cohort_heatmap("cohort-2025")

    # Students a tutor has helped who need support now
    queue = await service.get_tutor_queue(tutor_id)
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.struggle.types import SupportLevel, Trend
from src.domains.analytics.schemas import (
    AdminOverview,
    CohortHeatmap,
    HeatmapCell,
    TopicStruggle,
    TutorQueueEntry,
)
from src.infrastructure.database.models import (
    CareNetworkTutor,
    StruggleProfile,
    StruggleSignal,
    TutorCareNetwork,
    User,
)
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

TREND_ARROWS = {
    Trend.RISING: "↑",
    Trend.FALLING: "↓",
    Trend.STABLE: "→",
}


class StruggleAnalyticsService:
    """Service for struggle read projections."""

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the analytics service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def _count_profiles(self, *conditions) -> int:
        result = await self._db.execute(
            select(func.count()).select_from(StruggleProfile).where(*conditions)
        )
        return int(result.scalar_one())

    async def get_admin_overview(
        self,
        days: int = 7,
        topic_limit: int = 10,
        now: datetime | None = None,
    ) -> AdminOverview:
        """Build the platform-wide struggle overview.

        Args:
            days: Trailing window for the topic ranking.
            topic_limit: Maximum topics to return.
            now: Reference time. Defaults to the current UTC time.

        Returns:
            Profile counts per support level, rising profiles and the
            most frequently signalled topics.
        """
        since = (now or utc_now()) - timedelta(days=days)

        level_rows = await self._db.execute(
            select(StruggleProfile.support_level, func.count()).group_by(
                StruggleProfile.support_level
            )
        )
        by_level = {level: count for level, count in level_rows.all()}

        topic_rows = await self._db.execute(
            select(
                StruggleSignal.topic,
                func.count().label("signal_count"),
                func.avg(StruggleSignal.value).label("average_value"),
            )
            .where(StruggleSignal.created_at >= since)
            .group_by(StruggleSignal.topic)
            .order_by(func.count().desc(), StruggleSignal.topic)
            .limit(topic_limit)
        )

        return AdminOverview(
            total_profiles=sum(by_level.values()),
            high_support=by_level.get(SupportLevel.HIGH.value, 0),
            medium_support=by_level.get(SupportLevel.MEDIUM.value, 0),
            low_support=by_level.get(SupportLevel.LOW.value, 0),
            trending_up=await self._count_profiles(StruggleProfile.trend == Trend.RISING.value),
            top_topics=[
                TopicStruggle(
                    topic=topic,
                    signal_count=count,
                    average_value=round(float(average or 0.0), 3),
                )
                for topic, count, average in topic_rows.all()
            ],
            window_days=days,
        )

    async def get_cohort_heatmap(self, cohort_id: str) -> CohortHeatmap:
        """Group a cohort's high-support profiles by reason summary.

        Args:
            cohort_id: Cohort identifier.

        Returns:
            One cell per reason, most common first.
        """
        rows = await self._db.execute(
            select(
                StruggleProfile.last_reason_summary,
                func.count().label("profile_count"),
                func.avg(StruggleProfile.struggle_score).label("average_score"),
            )
            .where(
                StruggleProfile.cohort_id == cohort_id,
                StruggleProfile.support_level == SupportLevel.HIGH.value,
            )
            .group_by(StruggleProfile.last_reason_summary)
            .order_by(func.count().desc(), StruggleProfile.last_reason_summary)
        )

        return CohortHeatmap(
            cohort_id=cohort_id,
            cells=[
                HeatmapCell(
                    reason=reason,
                    count=count,
                    average_score=round(float(average or 0.0), 1),
                )
                for reason, count, average in rows.all()
            ],
        )

    async def get_tutor_queue(self, tutor_id: str, limit: int = 20) -> list[TutorQueueEntry]:
        """Students in the tutor's care network who currently need support.

        Args:
            tutor_id: Tutor identifier.
            limit: Maximum entries.

        Returns:
            Medium and high support students, highest score first.
        """
        student_ids = (
            select(TutorCareNetwork.student_id)
            .join(CareNetworkTutor, CareNetworkTutor.network_id == TutorCareNetwork.id)
            .where(CareNetworkTutor.tutor_id == tutor_id)
        )
        rows = await self._db.execute(
            select(StruggleProfile, User)
            .outerjoin(User, User.id == StruggleProfile.user_id)
            .where(
                StruggleProfile.user_id.in_(student_ids),
                StruggleProfile.support_level.in_(
                    [SupportLevel.MEDIUM.value, SupportLevel.HIGH.value]
                ),
            )
            .order_by(StruggleProfile.struggle_score.desc())
            .limit(limit)
        )

        queue = []
        for profile, student in rows.all():
            trend = Trend(profile.trend)
            queue.append(
                TutorQueueEntry(
                    student_id=profile.user_id,
                    student_name=student.full_name if student is not None else "A learner",
                    topic=profile.last_reason_summary or "General support",
                    trend=trend,
                    trend_arrow=TREND_ARROWS[trend],
                    support_level=SupportLevel(profile.support_level),
                    updated_at=ensure_utc(profile.last_evaluated_at),
                )
            )
        return queue
