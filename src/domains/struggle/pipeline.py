# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle pipeline runner.

Runs the three struggle stages for one completed interaction:

    extraction -> scoring -> alerting

Each stage opens its own session and commits on its own, so a failure in
a later stage leaves the earlier stages' writes in place. The next
interaction re-evaluates the profile and catches up.

Usage:
    pipeline = StrugglePipeline(get_sessionmaker())
    result = await pipeline.run_safely(interaction)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import AsyncContextManager, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.core.struggle.config import StruggleConfig, get_struggle_config
from src.core.struggle.extractor import SignalExtractor
from src.core.struggle.scoring import StruggleScorer
from src.core.struggle.types import InteractionRecord
from src.domains.struggle.schemas import ExtractionResult, ProfileSnapshot
from src.domains.struggle.service import StruggleScoringService, StruggleSignalService
from src.domains.tutor_alerts.schemas import TutorAlertRecord
from src.domains.tutor_alerts.service import TutorAlertService
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]


@dataclass
class PipelineResult:
    """Outcome of one pipeline run."""

    extraction: ExtractionResult = field(default_factory=ExtractionResult)
    profile: ProfileSnapshot | None = None
    alerts: list[TutorAlertRecord] = field(default_factory=list)
    skipped: bool = False


class StrugglePipeline:
    """Runs extraction, scoring and alerting for an interaction."""

    def __init__(
        self,
        session_factory: SessionFactory,
        config: StruggleConfig | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            session_factory: Callable returning an async session context
                manager, e.g. an ``async_sessionmaker``.
            config: Struggle tuning tables. Defaults to the process config.
        """
        self._session_factory = session_factory
        self._config = config or get_struggle_config()
        self._extractor = SignalExtractor(self._config)
        self._scorer = StruggleScorer(self._config)

    async def run(
        self,
        interaction: InteractionRecord,
        now: datetime | None = None,
    ) -> PipelineResult:
        """Run all three stages.

        Args:
            interaction: The completed interaction.
            now: Evaluation time shared by every stage.

        Returns:
            PipelineResult. ``skipped`` is set for non-learner interactions,
            which touch no storage.

        Raises:
            StruggleServiceError: If signals or the profile cannot be stored.
            TutorAlertServiceError: If alerts cannot be stored.
        """
        if not interaction.is_learner:
            logger.debug("Skipping struggle pipeline for non-learner %s", interaction.user_id)
            return PipelineResult(skipped=True)

        now = now or utc_now()
        result = PipelineResult()

        async with self._session_factory() as session:
            signals = StruggleSignalService(session, self._config, extractor=self._extractor)
            result.extraction = await signals.extract_signals(interaction, now=now)

        async with self._session_factory() as session:
            scoring = StruggleScoringService(session, self._config, scorer=self._scorer)
            result.profile = await scoring.recompute_for_user(interaction.user_id, now=now)

        async with self._session_factory() as session:
            alerts = TutorAlertService(session, self._config)
            result.alerts = await alerts.create_alerts_if_needed(interaction.user_id, now=now)

        return result

    async def run_safely(
        self,
        interaction: InteractionRecord,
        now: datetime | None = None,
    ) -> PipelineResult | None:
        """Run the pipeline, logging and discarding any failure.

        Returns:
            PipelineResult, or None if a stage failed.
        """
        try:
            return await self.run(interaction, now=now)
        except Exception:
            logger.error(
                "Struggle pipeline failed for interaction %s",
                interaction.id,
                exc_info=True,
            )
            return None

    async def run_for_interaction_id(
        self,
        interaction_id: str,
        now: datetime | None = None,
    ) -> PipelineResult | None:
        """Load an interaction and run the pipeline for it.

        Returns:
            PipelineResult, or None if the interaction does not exist.
        """
        async with self._session_factory() as session:
            interaction = await StruggleSignalService(
                session, self._config, extractor=self._extractor
            ).load_interaction(interaction_id)

        if interaction is None:
            logger.warning("Interaction not found for struggle pipeline: %s", interaction_id)
            return None
        return await self.run(interaction, now=now)


async def dispatch_struggle_pipeline(
    interaction: InteractionRecord,
    session_factory: SessionFactory | None = None,
    settings: Settings | None = None,
) -> PipelineResult | None:
    """Hand an interaction to the struggle pipeline.

    In ``background`` mode a dramatiq message is enqueued and None is
    returned. In ``inline`` mode the pipeline is awaited in-process with
    failures logged and discarded. Nothing is raised either way.

    Args:
        interaction: The completed interaction.
        session_factory: Session factory for inline runs. Defaults to the
            process sessionmaker.
        settings: Application settings. Defaults to ``get_settings()``.

    Returns:
        PipelineResult for inline runs, else None.
    """
    settings = settings or get_settings()
    if not settings.struggle.enabled or not interaction.is_learner:
        return None

    try:
        if settings.struggle.dispatch_mode == "background":
            from src.infrastructure.background.tasks.struggle import run_struggle_pipeline

            run_struggle_pipeline.send(interaction.id)
            return None

        if session_factory is None:
            from src.infrastructure.database import get_sessionmaker

            session_factory = get_sessionmaker()
        pipeline = StrugglePipeline(session_factory)
    except Exception:
        logger.error(
            "Failed to dispatch struggle pipeline for interaction %s",
            interaction.id,
            exc_info=True,
        )
        return None

    return await pipeline.run_safely(interaction)
