# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background task infrastructure module for MentorBridge.

Provides background task processing with Dramatiq:
- Redis broker for message persistence and durability
- The struggle pipeline actor

Quick Start:
    from src.infrastructure.background import setup_dramatiq
    setup_dramatiq()

    from src.infrastructure.background.tasks import run_struggle_pipeline
    run_struggle_pipeline.send(interaction_id)

Running Workers:
    dramatiq src.infrastructure.background.tasks --processes 2 --threads 4
"""

from src.infrastructure.background.broker import Queues, get_broker, setup_dramatiq

# Task actors are imported lazily to avoid circular imports
# Use: from src.infrastructure.background.tasks import run_struggle_pipeline

__all__ = [
    "Queues",
    "get_broker",
    "setup_dramatiq",
]
