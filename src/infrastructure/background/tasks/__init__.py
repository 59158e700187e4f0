# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background task actors for MentorBridge.

- Struggle: Post-interaction struggle pipeline

Usage:
    from src.infrastructure.background.tasks import run_struggle_pipeline

    run_struggle_pipeline.send(interaction_id)

Running Workers:
    dramatiq src.infrastructure.background.tasks --processes 2 --threads 4
"""

from src.core.config import get_settings
from src.utils.logging import setup_logging

# Worker processes import this module first
setup_logging(get_settings())

from src.infrastructure.background.tasks.base import get_worker_sessionmaker, run_async  # noqa: E402
from src.infrastructure.background.tasks.struggle import (  # noqa: E402
    get_struggle_actors,
    run_struggle_pipeline,
)

__all__ = [
    "run_struggle_pipeline",
    "run_async",
    "get_worker_sessionmaker",
    "get_all_actors",
]


def get_all_actors() -> list:
    """Get list of all defined actors."""
    actors = []
    actors.extend(get_struggle_actors())
    return actors
