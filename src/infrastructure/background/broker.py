# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dramatiq broker for the struggle worker.

One broker is chosen per process the first time an actor module is
imported: a StubBroker when DRAMATIQ_TEST_MODE=true, otherwise a
RedisBroker at REDIS_URL. Struggle messages go to their own queue so a
slow pipeline never holds up other work on the same Redis.
"""

import logging
import os

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker

from src.core.config import get_settings

logger = logging.getLogger(__name__)


class Queues:
    """Queue names used by MentorBridge actors."""

    STRUGGLE = "struggle"


_broker: dramatiq.Broker | None = None


def _test_mode() -> bool:
    return os.getenv("DRAMATIQ_TEST_MODE", "false").lower() == "true"


def setup_dramatiq() -> dramatiq.Broker:
    """Create and register the process broker.

    Safe to call more than once; later calls return the existing broker.

    Returns:
        The registered broker.
    """
    global _broker
    if _broker is not None:
        return _broker

    if _test_mode():
        broker: dramatiq.Broker = StubBroker()
        broker.emit_after("process_boot")
        logger.info("Using StubBroker for struggle tasks")
    else:
        redis_url = get_settings().redis.url
        broker = RedisBroker(url=redis_url)
        logger.info("Redis broker initialized (host: %s)", redis_url.split("@")[-1])

    dramatiq.set_broker(broker)
    _broker = broker
    return broker


def get_broker() -> dramatiq.Broker:
    """Get the process broker.

    Raises:
        RuntimeError: If setup_dramatiq() has not run.
    """
    if _broker is None:
        raise RuntimeError("Broker not initialized. Call setup_dramatiq() first.")
    return _broker
