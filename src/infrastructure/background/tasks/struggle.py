# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle background tasks for MentorBridge.

The struggle pipeline runs here after a tutoring interaction has been
served, so it never delays or fails the interaction itself.
"""

import logging
from typing import Any

import dramatiq

from src.core.config import get_settings
from src.infrastructure.background.broker import Queues, setup_dramatiq
from src.infrastructure.background.tasks.base import get_worker_sessionmaker, run_async
from src.utils.logging import bind_context, clear_context

# Setup broker before defining actors
setup_dramatiq()

logger = logging.getLogger(__name__)


@dramatiq.actor(
    queue_name=Queues.STRUGGLE,
    max_retries=0,
    time_limit=get_settings().worker.pipeline_time_limit_ms,
)
def run_struggle_pipeline(interaction_id: str) -> dict[str, Any]:
    """Run the struggle pipeline for one interaction.

    Failures are logged and discarded. The pipeline is not retried.

    Args:
        interaction_id: Interaction identifier.

    Returns:
        Result summary with processed flag, signal and alert counts.
    """

    async def _process() -> dict[str, Any]:
        from src.domains.struggle.pipeline import StrugglePipeline

        pipeline = StrugglePipeline(get_worker_sessionmaker())
        try:
            result = await pipeline.run_for_interaction_id(interaction_id)
        except Exception:
            logger.error(
                "Struggle pipeline task failed for interaction %s",
                interaction_id,
                exc_info=True,
            )
            return {"interaction_id": interaction_id, "processed": False, "reason": "error"}

        if result is None:
            return {"interaction_id": interaction_id, "processed": False, "reason": "not_found"}

        return {
            "interaction_id": interaction_id,
            "processed": not result.skipped,
            "signals_created": result.extraction.created,
            "signals_skipped": result.extraction.skipped,
            "struggle_score": result.profile.struggle_score if result.profile else None,
            "alerts_created": len(result.alerts),
        }

    bind_context(interaction_id=interaction_id)
    try:
        return run_async(_process())
    finally:
        clear_context()


def get_struggle_actors() -> list:
    """Get list of struggle actors."""
    return [run_struggle_pipeline]
