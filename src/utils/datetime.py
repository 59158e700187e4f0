# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for MentorBridge.

This module provides standardized datetime operations to ensure consistency
across the struggle pipeline, the tutor surfaces and the gamification ledger.

Design Decisions:
-----------------
1. All timestamps are stored in UTC (PostgreSQL TIMESTAMPTZ)
2. All Python datetimes are timezone-aware (with timezone.utc)
3. Values read back from drivers that drop tzinfo (SQLite) go through
   ensure_utc() before being compared with aware values

Usage:
------
    from src.utils.datetime import hours_before, utc_now

    # For current time
    now = utc_now()

    # For lookback windows
    since = hours_before(now, 24)
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def hours_before(reference: datetime, hours: float) -> datetime:
    """Get the instant N hours before a reference time.

    Args:
        reference: Reference datetime (naive values are treated as UTC).
        hours: Number of hours to go back. May be fractional.

    Returns:
        Timezone-aware UTC datetime.
    """
    return ensure_utc(reference) - timedelta(hours=hours)  # type: ignore[operator]


def to_epoch_millis(dt: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch.

    Args:
        dt: Datetime to convert (naive values are treated as UTC).

    Returns:
        Milliseconds since epoch.
    """
    return int(ensure_utc(dt).timestamp() * 1000)  # type: ignore[union-attr]

