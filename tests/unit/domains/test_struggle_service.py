# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the struggle signal and scoring services.

Services run against an in-memory SQLite database so the unique
constraints and upserts are exercised for real.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from src.core.struggle.types import SignalType, SupportLevel, Trend
from src.domains.struggle import (
    StruggleScoringService,
    StruggleServiceError,
    StruggleSignalService,
)
from src.infrastructure.database.models import StruggleProfile, StruggleSignal, new_uuid


async def _signal_count(db_session, interaction_id: str) -> int:
    result = await db_session.execute(
        select(func.count())
        .select_from(StruggleSignal)
        .where(StruggleSignal.interaction_id == interaction_id)
    )
    return result.scalar_one()


class TestExtractSignals:
    """Tests for StruggleSignalService.extract_signals."""

    @pytest.mark.asyncio
    async def test_failed_interaction_creates_one_signal(
        self, db_session, struggle_config, create_user, create_interaction, now
    ):
        """Verify a failed interaction stores one failed-attempt signal."""
        learner = await create_user()
        interaction = await create_interaction(
            learner.id, status="failed", topic="recursion", input_text="why"
        )
        service = StruggleSignalService(db_session, struggle_config)

        result = await service.extract_signals(interaction, now=now)

        assert result.created == 1
        assert result.skipped == 0
        signal = result.signals[0]
        assert signal.signal_type is SignalType.FAILED_ATTEMPT
        assert signal.value == 1.0
        assert signal.topic == "recursion"
        assert signal.meta == {"window_hours": 24.0, "raw": {"failed": 1}}

    @pytest.mark.asyncio
    async def test_repeated_extraction_is_idempotent(
        self, db_session, struggle_config, create_user, create_interaction, now
    ):
        """Verify re-running extraction never adds a second signal per kind."""
        learner = await create_user()
        interaction = await create_interaction(learner.id, status="failed")
        service = StruggleSignalService(db_session, struggle_config)

        await service.extract_signals(interaction, now=now)
        second = await service.extract_signals(interaction, now=now)

        assert second.created == 0
        assert second.skipped == 1
        assert await _signal_count(db_session, interaction.id) == 1

    @pytest.mark.asyncio
    async def test_window_comes_from_storage(
        self, db_session, struggle_config, create_user, create_interaction, now
    ):
        """Verify earlier interactions inside the window are considered."""
        learner = await create_user()
        for hours in (1, 2):
            await create_interaction(learner.id, created_at=now - timedelta(hours=hours))
        interaction = await create_interaction(learner.id)
        service = StruggleSignalService(db_session, struggle_config)

        result = await service.extract_signals(interaction, now=now)

        kinds = {s.signal_type for s in result.signals}
        assert kinds == {SignalType.REPEATED_TOPIC}
        assert result.signals[0].value == 0.5

    @pytest.mark.asyncio
    async def test_interactions_outside_window_are_ignored(
        self, db_session, struggle_config, create_user, create_interaction, now
    ):
        """Verify interactions older than 24 hours are not loaded."""
        learner = await create_user()
        for hours in (30, 40):
            await create_interaction(learner.id, created_at=now - timedelta(hours=hours))
        interaction = await create_interaction(learner.id)
        service = StruggleSignalService(db_session, struggle_config)

        window = await service.load_window(interaction, now)

        assert [r.id for r in window] == [interaction.id]

    @pytest.mark.asyncio
    async def test_other_users_are_not_in_window(
        self, db_session, struggle_config, create_user, create_interaction, now
    ):
        """Verify the window is scoped to the interaction's user."""
        learner = await create_user()
        other = await create_user()
        await create_interaction(other.id)
        await create_interaction(other.id)
        interaction = await create_interaction(learner.id)
        service = StruggleSignalService(db_session, struggle_config)

        result = await service.extract_signals(interaction, now=now)

        assert result.created == 0

    @pytest.mark.asyncio
    async def test_non_learner_is_ignored(
        self, db_session, struggle_config, create_user, create_interaction, now
    ):
        """Verify tutor interactions produce nothing."""
        tutor = await create_user(role="tutor")
        interaction = await create_interaction(tutor.id, role="tutor", status="failed")
        service = StruggleSignalService(db_session, struggle_config)

        result = await service.extract_signals(interaction, now=now)

        assert result.created == 0
        assert await _signal_count(db_session, interaction.id) == 0

    @pytest.mark.asyncio
    async def test_load_interaction(self, db_session, struggle_config, create_user, create_interaction):
        """Verify interactions are loaded as records, or None when missing."""
        learner = await create_user()
        interaction = await create_interaction(learner.id)
        service = StruggleSignalService(db_session, struggle_config)

        assert (await service.load_interaction(interaction.id)).id == interaction.id
        assert await service.load_interaction(new_uuid()) is None

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, struggle_config, make_record, now):
        """Verify persistence errors are wrapped and raised."""
        db = AsyncMock()
        db.execute.side_effect = OperationalError("INSERT", {}, Exception("database is down"))
        service = StruggleSignalService(db, struggle_config)

        with pytest.raises(StruggleServiceError):
            await service.extract_signals(make_record(status="failed"), now=now)

        db.rollback.assert_awaited_once()


class TestRecomputeForUser:
    """Tests for StruggleScoringService.recompute_for_user."""

    @pytest.mark.asyncio
    async def test_single_failed_attempt_profile(
        self, db_session, struggle_config, create_user, create_interaction, now
    ):
        """Verify one failed attempt gives score 2.8 and low support."""
        learner = await create_user(cohort_id="cohort-b")
        interaction = await create_interaction(learner.id, status="failed", input_text="why")
        await StruggleSignalService(db_session, struggle_config).extract_signals(
            interaction, now=now
        )

        profile = await StruggleScoringService(db_session, struggle_config).recompute_for_user(
            learner.id, now=now
        )

        assert profile.struggle_score == 2.8
        assert profile.support_level is SupportLevel.LOW
        assert profile.trend is Trend.STABLE
        assert profile.track == "python"
        assert profile.cohort_id == "cohort-b"
        assert profile.last_reason_summary == "failed attempt"
        assert [c.signal_type for c in profile.contributing_signals] == [
            SignalType.FAILED_ATTEMPT
        ]

    @pytest.mark.asyncio
    async def test_no_signals_gives_baseline(self, db_session, struggle_config, create_user, now):
        """Verify a user without signals gets score 1, stable, low."""
        learner = await create_user()

        profile = await StruggleScoringService(db_session, struggle_config).recompute_for_user(
            learner.id, now=now
        )

        assert profile.struggle_score == 1.0
        assert profile.trend is Trend.STABLE
        assert profile.support_level is SupportLevel.LOW
        assert profile.contributing_signals == []

    @pytest.mark.asyncio
    async def test_profile_is_overwritten_not_appended(
        self, db_session, struggle_config, create_user, create_interaction, now
    ):
        """Verify one profile per user with the trend tracking the previous score."""
        learner = await create_user()
        signals = StruggleSignalService(db_session, struggle_config)
        scoring = StruggleScoringService(db_session, struggle_config)

        await scoring.recompute_for_user(learner.id, now=now)

        interaction = await create_interaction(learner.id, status="failed", input_text="why")
        await signals.extract_signals(interaction, now=now)
        profile = await scoring.recompute_for_user(learner.id, now=now)

        count = await db_session.execute(
            select(func.count())
            .select_from(StruggleProfile)
            .where(StruggleProfile.user_id == learner.id)
        )
        assert count.scalar_one() == 1
        assert profile.struggle_score == 2.8
        assert profile.trend is Trend.RISING

    @pytest.mark.asyncio
    async def test_signals_outside_window_are_ignored(
        self, db_session, struggle_config, create_user, create_interaction, now
    ):
        """Verify old signals no longer count."""
        learner = await create_user()
        interaction = await create_interaction(learner.id, status="failed", input_text="why")
        await StruggleSignalService(db_session, struggle_config).extract_signals(
            interaction, now=now - timedelta(hours=30)
        )

        profile = await StruggleScoringService(db_session, struggle_config).recompute_for_user(
            learner.id, now=now
        )

        assert profile.struggle_score == 1.0

    @pytest.mark.asyncio
    async def test_defaults_without_user_row(self, db_session, struggle_config, now):
        """Verify track and cohort defaults for an unknown user."""
        profile = await StruggleScoringService(db_session, struggle_config).recompute_for_user(
            new_uuid(), now=now
        )

        assert profile.track == "general"
        assert profile.cohort_id == "default"


class TestProfileReads:
    """Tests for get_profile and check_breakthrough."""

    @pytest.mark.asyncio
    async def test_get_profile_missing(self, db_session, struggle_config):
        """Verify None for a user never evaluated."""
        service = StruggleScoringService(db_session, struggle_config)

        assert await service.get_profile(new_uuid()) is None
        assert await service.check_breakthrough(new_uuid()) is None

    @pytest.mark.asyncio
    async def test_breakthrough(self, db_session, struggle_config, create_user, create_profile):
        """Verify a falling profile at or under 4 is a breakthrough."""
        learner = await create_user()
        await create_profile(
            learner.id,
            struggle_score=3.2,
            trend="falling",
            last_reason_summary="repeated topic",
        )
        service = StruggleScoringService(db_session, struggle_config)

        status = await service.check_breakthrough(learner.id)

        assert status.is_breakthrough is True
        assert status.current_score == 3.2
        assert status.topic == "repeated topic"

    @pytest.mark.asyncio
    async def test_no_breakthrough_when_stable(
        self, db_session, struggle_config, create_user, create_profile
    ):
        """Verify a stable profile is not a breakthrough."""
        learner = await create_user()
        await create_profile(learner.id, struggle_score=2.0, trend="stable")
        service = StruggleScoringService(db_session, struggle_config)

        assert (await service.check_breakthrough(learner.id)).is_breakthrough is False

    @pytest.mark.asyncio
    async def test_get_profile(self, db_session, struggle_config, create_user, create_profile):
        """Verify the stored profile is returned as a snapshot."""
        learner = await create_user()
        await create_profile(learner.id, struggle_score=5.5, support_level="medium")
        service = StruggleScoringService(db_session, struggle_config)

        profile = await service.get_profile(learner.id)

        assert profile.struggle_score == 5.5
        assert profile.support_level is SupportLevel.MEDIUM
        assert profile.last_evaluated_at.tzinfo is not None
