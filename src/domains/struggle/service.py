# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle signal and scoring services.

StruggleSignalService persists the signals the extractor fires for one
interaction. StruggleScoringService turns a user's recent signals into
their current StruggleProfile.

Both services are idempotent against their own storage keys:
- signals: unique (interaction_id, signal_type), duplicates are skipped
- profiles: unique user_id, re-evaluation overwrites

Usage:
    from src.domains.struggle import StruggleScoringService, StruggleSignalService

    signals = StruggleSignalService(db=session, config=config)
    result = await signals.extract_signals(interaction)

    scoring = StruggleScoringService(db=session, config=config)
    profile = await scoring.recompute_for_user(interaction.user_id)
"""

import logging
from datetime import datetime

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.struggle.config import StruggleConfig, get_struggle_config
from src.core.struggle.extractor import SignalExtractor
from src.core.struggle.scoring import StruggleScorer
from src.core.struggle.types import InteractionRecord, SignalType
from src.domains.struggle.schemas import (
    BreakthroughStatus,
    ExtractionResult,
    ProfileSnapshot,
    SignalRecord,
)
from src.infrastructure.database.models import (
    AIInteraction,
    StruggleProfile,
    StruggleSignal,
    User,
    new_uuid,
)
from src.infrastructure.database.upsert import dialect_insert
from src.utils.datetime import hours_before, utc_now

logger = logging.getLogger(__name__)


class StruggleServiceError(Exception):
    """Exception raised for struggle service operations."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class StruggleSignalService:
    """Extracts and persists struggle signals for interactions."""

    def __init__(
        self,
        db: AsyncSession,
        config: StruggleConfig | None = None,
        extractor: SignalExtractor | None = None,
    ) -> None:
        """Initialize the signal service.

        Args:
            db: Async database session.
            config: Struggle tuning tables. Defaults to the process config.
            extractor: Optional pre-built extractor.
        """
        self._db = db
        self._config = config or get_struggle_config()
        self._extractor = extractor or SignalExtractor(self._config)

    async def load_interaction(self, interaction_id: str) -> InteractionRecord | None:
        """Load one interaction as a validated record.

        Args:
            interaction_id: Interaction identifier.

        Returns:
            The record, or None if no such interaction exists.

        Raises:
            ValidationError: If the stored row carries an unknown role or status.
        """
        row = await self._db.get(AIInteraction, interaction_id)
        if row is None:
            return None
        return InteractionRecord.model_validate(row)

    async def load_window(
        self,
        interaction: InteractionRecord,
        now: datetime,
    ) -> list[InteractionRecord]:
        """Load the user's recent interactions, newest first.

        Rows that fail validation are left out of the window.

        Args:
            interaction: The interaction being evaluated.
            now: Evaluation time.

        Returns:
            Up to ``window_limit`` records created within the lookback window.
        """
        detection = self._config.detection
        since = hours_before(now, detection.window_hours)

        result = await self._db.execute(
            select(AIInteraction)
            .where(
                AIInteraction.user_id == interaction.user_id,
                AIInteraction.created_at >= since,
            )
            .order_by(AIInteraction.created_at.desc())
            .limit(detection.window_limit)
        )

        window: list[InteractionRecord] = []
        for row in result.scalars():
            try:
                window.append(InteractionRecord.model_validate(row))
            except ValidationError:
                logger.debug("Skipping malformed interaction %s in window", row.id)
        return window

    async def extract_signals(
        self,
        interaction: InteractionRecord,
        now: datetime | None = None,
    ) -> ExtractionResult:
        """Extract and persist struggle signals for one interaction.

        Duplicate (interaction, kind) pairs are counted as skipped, never
        raised.

        Args:
            interaction: The completed interaction.
            now: Evaluation time. Defaults to the current UTC time.

        Returns:
            Created/skipped counts and the created signals.

        Raises:
            StruggleServiceError: If signals cannot be persisted.
        """
        if not interaction.is_learner:
            return ExtractionResult()

        now = now or utc_now()
        window_hours = self._config.detection.window_hours

        try:
            window = await self.load_window(interaction, now)
            drafts = self._extractor.extract(interaction, window, now=now)

            created: list[SignalRecord] = []
            skipped = 0
            for draft in drafts:
                values = {
                    "id": new_uuid(),
                    "user_id": interaction.user_id,
                    "interaction_id": interaction.id,
                    "track": interaction.track,
                    "topic": interaction.topic,
                    "signal_type": draft.signal_type.value,
                    "value": draft.value,
                    "meta": {"window_hours": window_hours, "raw": dict(draft.raw)},
                    "created_at": now,
                }
                stmt = (
                    dialect_insert(self._db, StruggleSignal)
                    .values(**values)
                    .on_conflict_do_nothing(index_elements=["interaction_id", "signal_type"])
                    .returning(StruggleSignal.id)
                )
                inserted_id = (await self._db.execute(stmt)).scalar_one_or_none()

                if inserted_id is None:
                    skipped += 1
                    continue
                created.append(SignalRecord(**values))

            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise StruggleServiceError("Failed to persist struggle signals", e) from e

        logger.info(
            "Struggle signals for interaction %s: created=%d skipped=%d",
            interaction.id,
            len(created),
            skipped,
        )
        return ExtractionResult(created=len(created), skipped=skipped, signals=created)


class StruggleScoringService:
    """Aggregates signals into each user's StruggleProfile."""

    def __init__(
        self,
        db: AsyncSession,
        config: StruggleConfig | None = None,
        scorer: StruggleScorer | None = None,
    ) -> None:
        """Initialize the scoring service.

        Args:
            db: Async database session.
            config: Struggle tuning tables. Defaults to the process config.
            scorer: Optional pre-built scorer.
        """
        self._db = db
        self._config = config or get_struggle_config()
        self._scorer = scorer or StruggleScorer(self._config)

    async def _get_profile_row(self, user_id: str) -> StruggleProfile | None:
        result = await self._db.execute(
            select(StruggleProfile)
            .where(StruggleProfile.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def recompute_for_user(
        self,
        user_id: str,
        now: datetime | None = None,
    ) -> ProfileSnapshot:
        """Recompute and persist a user's struggle profile.

        Args:
            user_id: Learner identifier.
            now: Evaluation time. Defaults to the current UTC time.

        Returns:
            The stored profile snapshot.

        Raises:
            StruggleServiceError: If the profile cannot be persisted.
        """
        now = now or utc_now()
        since = hours_before(now, self._config.scoring.window_hours)

        try:
            result = await self._db.execute(
                select(StruggleSignal)
                .where(
                    StruggleSignal.user_id == user_id,
                    StruggleSignal.created_at >= since,
                )
                .order_by(StruggleSignal.created_at.desc())
            )
            signals = list(result.scalars())

            previous = await self._get_profile_row(user_id)
            user = await self._db.get(User, user_id)

            score = self._scorer.score(
                [(SignalType(s.signal_type), s.value) for s in signals],
                previous_score=previous.struggle_score if previous else None,
            )

            if signals:
                track = signals[0].track
            elif previous is not None:
                track = previous.track
            else:
                track = "general"
            cohort_id = user.cohort_id if user is not None and user.cohort_id else "default"

            values = {
                "track": track,
                "cohort_id": cohort_id,
                "struggle_score": score.score,
                "trend": score.trend.value,
                "support_level": score.support_level.value,
                "contributing_signals": [c.to_dict() for c in score.contributing],
                "last_reason_summary": score.reason_summary,
                "last_evaluated_at": now,
                "updated_at": now,
            }
            stmt = (
                dialect_insert(self._db, StruggleProfile)
                .values(id=new_uuid(), user_id=user_id, created_at=now, **values)
                .on_conflict_do_update(index_elements=["user_id"], set_=values)
            )
            await self._db.execute(stmt)
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise StruggleServiceError("Failed to update struggle profile", e) from e

        logger.info(
            "Struggle profile updated for user %s: score=%.1f level=%s trend=%s",
            user_id,
            score.score,
            score.support_level.value,
            score.trend.value,
        )
        return ProfileSnapshot(user_id=user_id, **values)

    async def get_profile(self, user_id: str) -> ProfileSnapshot | None:
        """Get a user's current profile.

        Args:
            user_id: Learner identifier.

        Returns:
            The profile snapshot, or None if the user was never evaluated.
        """
        row = await self._get_profile_row(user_id)
        if row is None:
            return None
        return ProfileSnapshot.model_validate(row)

    async def check_breakthrough(self, user_id: str) -> BreakthroughStatus | None:
        """Check whether a user has had a breakthrough.

        Read-only: a breakthrough is a falling trend with a score at or
        below the breakthrough threshold.

        Args:
            user_id: Learner identifier.

        Returns:
            BreakthroughStatus, or None if the user has no profile.
        """
        row = await self._get_profile_row(user_id)
        if row is None:
            return None

        return BreakthroughStatus(
            is_breakthrough=self._scorer.is_breakthrough(row.trend, row.struggle_score),
            current_score=row.struggle_score,
            topic=row.last_reason_summary,
        )
