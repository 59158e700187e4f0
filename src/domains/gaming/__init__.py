# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gamification domain.

XP ledger, levels, badges and endorsements.
"""

from src.domains.gaming.models import (
    LEVEL_THRESHOLDS,
    MAX_LEVEL,
    XP_REWARDS,
    ActionType,
    Badge,
)
from src.domains.gaming.service import (
    EndorsementError,
    EndorsementExistsError,
    GamificationError,
    GamificationService,
    InvalidXPAmountError,
    UserNotFoundError,
    calculate_level,
    get_next_level_info,
)

__all__ = [
    "ActionType",
    "Badge",
    "LEVEL_THRESHOLDS",
    "MAX_LEVEL",
    "XP_REWARDS",
    "GamificationService",
    "GamificationError",
    "UserNotFoundError",
    "InvalidXPAmountError",
    "EndorsementError",
    "EndorsementExistsError",
    "calculate_level",
    "get_next_level_info",
]
