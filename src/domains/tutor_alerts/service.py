# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor alert service.

Creates cooldown-gated alerts for the tutors in a struggling student's
care network, and serves the tutor-facing alert inbox.

Alert gate:
    (support level HIGH and trend RISING) or score >= critical score

Cooldown:
    At most one alert per (tutor, student) pair per cooldown window.
    Enforced twice: a lookup of recent alerts for the pair, then a
    conditional upsert on tutor_alert_cooldowns that only succeeds when
    the previous alert is older than the window. The upsert is what keeps
    concurrent dispatchers from both alerting one pair.

Usage:
    service = TutorAlertService(db=session, config=config)
    alerts = await service.create_alerts_if_needed(student_id)
"""

import logging
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.struggle.config import StruggleConfig, get_struggle_config
from src.core.struggle.types import AlertUrgency, SupportLevel, Trend
from src.domains.tutor_alerts.schemas import TutorAlertRecord, TutorAlertView, TutorStats
from src.infrastructure.database.models import (
    CareNetworkTutor,
    StruggleProfile,
    TutorAlert,
    TutorAlertCooldown,
    TutorCareNetwork,
    User,
    new_uuid,
)
from src.infrastructure.database.upsert import dialect_insert
from src.utils.datetime import hours_before, utc_now

logger = logging.getLogger(__name__)


class TutorAlertServiceError(Exception):
    """Exception raised for tutor alert operations."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class TutorAlertService:
    """Service for creating and reading tutor alerts."""

    def __init__(
        self,
        db: AsyncSession,
        config: StruggleConfig | None = None,
    ) -> None:
        """Initialize the tutor alert service.

        Args:
            db: Async database session.
            config: Struggle tuning tables. Defaults to the process config.
        """
        self._db = db
        self._config = config or get_struggle_config()

    def should_alert(self, profile: StruggleProfile) -> bool:
        """Apply the alert gate to a stored profile."""
        if profile.struggle_score >= self._config.alerts.critical_score:
            return True
        return (
            profile.support_level == SupportLevel.HIGH.value
            and profile.trend == Trend.RISING.value
        )

    async def _has_recent_alert(self, tutor_id: str, student_id: str, since: datetime) -> bool:
        result = await self._db.execute(
            select(TutorAlert.id)
            .where(
                TutorAlert.tutor_id == tutor_id,
                TutorAlert.student_id == student_id,
                TutorAlert.created_at >= since,
            )
            .limit(1)
        )
        return result.first() is not None

    async def _claim_cooldown(
        self,
        tutor_id: str,
        student_id: str,
        now: datetime,
        since: datetime,
    ) -> bool:
        """Take the (tutor, student) cooldown lease.

        Returns:
            True if no alert was sent to the pair since ``since``.
        """
        stmt = (
            dialect_insert(self._db, TutorAlertCooldown)
            .values(tutor_id=tutor_id, student_id=student_id, last_alert_at=now)
            .on_conflict_do_update(
                index_elements=["tutor_id", "student_id"],
                set_={"last_alert_at": now},
                where=TutorAlertCooldown.last_alert_at < since,
            )
            .returning(TutorAlertCooldown.tutor_id)
        )
        return (await self._db.execute(stmt)).scalar_one_or_none() is not None

    async def create_alerts_if_needed(
        self,
        student_id: str,
        now: datetime | None = None,
    ) -> list[TutorAlertRecord]:
        """Create alerts for the student's care network if the profile warrants it.

        Args:
            student_id: Student identifier.
            now: Evaluation time. Defaults to the current UTC time.

        Returns:
            Newly created alerts. Tutors still in cooldown are left out.

        Raises:
            TutorAlertServiceError: If alerts cannot be persisted.
        """
        now = now or utc_now()
        alerts_config = self._config.alerts

        try:
            profile = (
                await self._db.execute(
                    select(StruggleProfile)
                    .where(StruggleProfile.user_id == student_id)
                    .execution_options(populate_existing=True)
                )
            ).scalar_one_or_none()
            if profile is None or not self.should_alert(profile):
                return []

            network = (
                await self._db.execute(
                    select(TutorCareNetwork)
                    .where(TutorCareNetwork.student_id == student_id)
                    .execution_options(populate_existing=True)
                )
            ).scalar_one_or_none()
            if network is None or not network.tutor_ids:
                return []

            since = hours_before(now, alerts_config.cooldown_hours)
            urgency = (
                AlertUrgency.URGENT
                if profile.struggle_score >= alerts_config.critical_score
                else AlertUrgency.SOFT
            )
            topic = profile.last_reason_summary or alerts_config.fallback_topic

            created: list[TutorAlert] = []
            for tutor_id in network.tutor_ids:
                if await self._has_recent_alert(tutor_id, student_id, since):
                    continue
                if not await self._claim_cooldown(tutor_id, student_id, now, since):
                    continue

                alert = TutorAlert(
                    id=new_uuid(),
                    tutor_id=tutor_id,
                    student_id=student_id,
                    urgency=urgency.value,
                    topic=topic,
                    struggle_score=profile.struggle_score,
                    reason_summary=alerts_config.reason_template,
                    is_read=False,
                    created_at=now,
                )
                self._db.add(alert)
                created.append(alert)

            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise TutorAlertServiceError("Failed to create tutor alerts", e) from e

        if created:
            logger.info(
                "Created %d tutor alert(s) for student %s (urgency=%s)",
                len(created),
                student_id,
                urgency.value,
            )
        return [TutorAlertRecord.model_validate(alert) for alert in created]

    async def get_alerts_for_tutor(
        self,
        tutor_id: str,
        limit: int | None = None,
    ) -> list[TutorAlertView]:
        """Get a tutor's unread alerts, newest first.

        Args:
            tutor_id: Tutor identifier.
            limit: Maximum alerts to return. Defaults to the configured limit.

        Returns:
            Unread alerts with the student's display name.
        """
        result = await self._db.execute(
            select(TutorAlert, User)
            .outerjoin(User, User.id == TutorAlert.student_id)
            .where(TutorAlert.tutor_id == tutor_id, TutorAlert.is_read.is_(False))
            .order_by(TutorAlert.created_at.desc())
            .limit(limit if limit is not None else self._config.alerts.unread_limit)
        )

        return [
            TutorAlertView(
                id=alert.id,
                student_id=alert.student_id,
                student_name=student.full_name if student is not None else "A learner",
                topic=alert.topic,
                urgency=AlertUrgency(alert.urgency),
                message=alert.reason_summary,
                created_at=alert.created_at,
                is_read=alert.is_read,
            )
            for alert, student in result.all()
        ]

    async def get_unread_count(self, tutor_id: str) -> int:
        """Count a tutor's unread alerts."""
        result = await self._db.execute(
            select(func.count())
            .select_from(TutorAlert)
            .where(TutorAlert.tutor_id == tutor_id, TutorAlert.is_read.is_(False))
        )
        return int(result.scalar_one())

    async def mark_as_read(self, alert_id: str, tutor_id: str) -> TutorAlertRecord | None:
        """Mark an alert as read if it belongs to the tutor.

        Args:
            alert_id: Alert identifier.
            tutor_id: Tutor identifier. Must own the alert.

        Returns:
            The updated alert, or None if no such alert belongs to the tutor.

        Raises:
            TutorAlertServiceError: If the update fails.
        """
        try:
            result = await self._db.execute(
                update(TutorAlert)
                .where(TutorAlert.id == alert_id, TutorAlert.tutor_id == tutor_id)
                .values(is_read=True)
                .execution_options(synchronize_session="fetch")
            )
            if result.rowcount == 0:
                return None
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise TutorAlertServiceError("Failed to mark alert as read", e) from e

        alert = await self._db.get(TutorAlert, alert_id, populate_existing=True)
        return TutorAlertRecord.model_validate(alert) if alert is not None else None

    async def get_tutor_stats(self, tutor_id: str) -> TutorStats:
        """Compute a tutor's impact statistics.

        impact = students helped * 10 + alerts responded to * 5
        """
        students = (
            await self._db.execute(
                select(func.count())
                .select_from(CareNetworkTutor)
                .where(CareNetworkTutor.tutor_id == tutor_id)
            )
        ).scalar_one()
        responded = (
            await self._db.execute(
                select(func.count())
                .select_from(TutorAlert)
                .where(TutorAlert.tutor_id == tutor_id, TutorAlert.is_read.is_(True))
            )
        ).scalar_one()

        return TutorStats(
            students_helped=students,
            alerts_responded=responded,
            impact_score=students * 10 + responded * 5,
        )
