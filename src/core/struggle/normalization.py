# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Normalization helpers shared by every struggle detector."""

import math
from typing import Any


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)):
        return None
    result = float(value)
    if math.isnan(result):
        return None
    return result


def clamp01(value: Any) -> float:
    """Clamp a value into [0, 1].

    Args:
        value: Any value. Non-numeric, None and NaN inputs give 0.

    Returns:
        The clamped float.
    """
    number = _as_float(value)
    if number is None:
        return 0.0
    return max(0.0, min(1.0, number))


def normalize_linear(value: Any, lower: float, upper: float) -> float:
    """Linearly map ``value`` from [lower, upper] onto [0, 1].

    Values at or below ``lower`` map to 0, values at or above ``upper``
    map to 1. A degenerate range (upper <= lower) always maps to 0.

    Args:
        value: Input value. Non-numeric, None and NaN inputs give 0.
        lower: Lower bound of the input range.
        upper: Upper bound of the input range.

    Returns:
        Normalized value in [0, 1].

    Example:
        >>> normalize_linear(3, 1, 5)
        0.5
    """
    number = _as_float(value)
    if number is None or upper <= lower:
        return 0.0
    if number <= lower:
        return 0.0
    if number >= upper:
        return 1.0
    return (number - lower) / (upper - lower)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round half up to ``digits`` places (2.25 -> 2.3, unlike round())."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
