# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for struggle normalization helpers."""

import math

import pytest

from src.core.struggle.normalization import clamp01, normalize_linear, round_half_up


class TestNormalizeLinear:
    """Tests for normalize_linear."""

    def test_lower_bound_maps_to_zero(self):
        """Verify the lower bound maps to 0."""
        assert normalize_linear(1, 1, 5) == 0.0

    def test_upper_bound_maps_to_one(self):
        """Verify the upper bound maps to 1."""
        assert normalize_linear(5, 1, 5) == 1.0

    def test_midpoint(self):
        """Verify linear interpolation inside the range."""
        assert normalize_linear(3, 1, 5) == 0.5

    def test_values_outside_range_are_clamped(self):
        """Verify values outside the range clamp to [0, 1]."""
        assert normalize_linear(-10, 1, 5) == 0.0
        assert normalize_linear(50, 1, 5) == 1.0

    def test_monotonic_non_decreasing(self):
        """Verify the mapping never decreases as the input grows."""
        values = [normalize_linear(x / 10, 1.1, 2.5) for x in range(0, 40)]
        assert values == sorted(values)
        assert all(0.0 <= v <= 1.0 for v in values)

    @pytest.mark.parametrize("value", [None, "3", True, math.nan])
    def test_non_numeric_input_gives_zero(self, value):
        """Verify unusable inputs map to 0 instead of raising."""
        assert normalize_linear(value, 1, 5) == 0.0

    def test_degenerate_range_gives_zero(self):
        """Verify an inverted or empty range maps to 0."""
        assert normalize_linear(3, 5, 5) == 0.0
        assert normalize_linear(3, 5, 1) == 0.0


class TestClamp01:
    """Tests for clamp01."""

    def test_clamps_both_ends(self):
        """Verify values are clamped into [0, 1]."""
        assert clamp01(-0.5) == 0.0
        assert clamp01(1.7) == 1.0
        assert clamp01(0.42) == 0.42

    def test_unusable_input(self):
        """Verify None and NaN clamp to 0."""
        assert clamp01(None) == 0.0
        assert clamp01(math.nan) == 0.0


class TestRoundHalfUp:
    """Tests for round_half_up."""

    def test_rounds_half_up(self):
        """Verify .x5 rounds up, unlike banker's rounding."""
        assert round_half_up(2.25) == 2.3
        assert round_half_up(2.35) == 2.4

    def test_scenario_score(self):
        """Verify 1 + 0.20 * 9 rounds to 2.8."""
        assert round_half_up(1 + 0.20 * 9) == 2.8
