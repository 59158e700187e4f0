# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for gamification level tables."""

import pytest

from src.domains.gaming import (
    LEVEL_THRESHOLDS,
    MAX_LEVEL,
    XP_REWARDS,
    ActionType,
    calculate_level,
    get_next_level_info,
)


class TestCalculateLevel:
    """Tests for calculate_level."""

    @pytest.mark.parametrize(
        "xp,level",
        [
            (0, 1),
            (99, 1),
            (100, 2),
            (299, 2),
            (300, 3),
            (1000, 5),
            (5499, 9),
            (5500, 10),
            (99999, 10),
        ],
    )
    def test_levels(self, xp, level):
        """Verify level boundaries."""
        assert calculate_level(xp) == level

    def test_thresholds_ascending(self):
        """Verify thresholds are strictly ascending."""
        minimums = [xp for _, xp in LEVEL_THRESHOLDS]
        assert minimums == sorted(set(minimums))
        assert MAX_LEVEL == 10


class TestNextLevelInfo:
    """Tests for get_next_level_info."""

    def test_progress(self):
        """Verify progress towards the next threshold."""
        info = get_next_level_info(150)

        assert info.current_level == 2
        assert info.next_level == 3
        assert info.next_level_xp == 300
        assert info.xp_needed == 150
        assert info.progress == pytest.approx(0.5)

    def test_max_level_has_no_next(self):
        """Verify None at the maximum level."""
        assert get_next_level_info(6000) is None


def test_default_rewards():
    """Verify the XP reward table."""
    assert XP_REWARDS[ActionType.QA_ANSWER] == 10
    assert XP_REWARDS[ActionType.TUTORING_SESSION] == 100
    assert XP_REWARDS[ActionType.ENDORSEMENT_RECEIVED] == 50
    assert XP_REWARDS[ActionType.POST_QUESTION] == 5
    assert XP_REWARDS[ActionType.FIRST_LOGIN] == 25
    assert XP_REWARDS[ActionType.PROFILE_COMPLETE] == 15
