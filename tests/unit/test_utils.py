# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for datetime and logging utilities."""

import logging
from datetime import datetime, timedelta, timezone

import structlog

from src.core.config import Settings
from src.utils import (
    bind_context,
    clear_context,
    ensure_utc,
    get_logger,
    hours_before,
    setup_logging,
    to_epoch_millis,
    utc_now,
)


class TestDatetime:
    """Tests for datetime helpers."""

    def test_utc_now_is_aware(self):
        """Verify utc_now carries UTC tzinfo."""
        assert utc_now().tzinfo == timezone.utc

    def test_ensure_utc(self):
        """Verify naive values are read as UTC and aware values converted."""
        naive = datetime(2025, 3, 10, 12, 0)
        plus_two = datetime(2025, 3, 10, 14, 0, tzinfo=timezone(timedelta(hours=2)))

        assert ensure_utc(None) is None
        assert ensure_utc(naive) == datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
        assert ensure_utc(plus_two) == datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)

    def test_hours_before_accepts_fractions(self, now):
        """Verify fractional hours are honoured."""
        assert hours_before(now, 1.5) == now - timedelta(minutes=90)

    def test_to_epoch_millis(self):
        """Verify millisecond epoch conversion."""
        assert to_epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) == 1000


class TestLogging:
    """Tests for logging setup."""

    def test_setup_quiets_third_party_loggers(self):
        """Verify noisy libraries are raised to WARNING."""
        setup_logging(Settings(log_level="INFO"))

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("dramatiq").level == logging.WARNING
        assert logging.getLogger("src").level == logging.INFO

    def test_context_binding(self):
        """Verify bound fields are visible until cleared."""
        bind_context(interaction_id="abc-123")
        assert structlog.contextvars.get_contextvars() == {"interaction_id": "abc-123"}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_get_logger(self):
        """Verify a structlog logger is returned."""
        assert get_logger(__name__) is not None
