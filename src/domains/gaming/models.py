# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gamification domain models.

This module defines the static tables of the XP ledger:
- ActionType: Actions that earn XP
- XP_REWARDS: Default XP per action
- LEVEL_THRESHOLDS: Minimum XP per level
- Badge: Named badges awarded on milestones
- COUNTER_BADGES: Milestones on the per-action counters
"""

from enum import Enum


class ActionType(str, Enum):
    """Actions that earn XP."""

    QA_ANSWER = "qa_answer"
    TUTORING_SESSION = "tutoring_session"
    ENDORSEMENT_RECEIVED = "endorsement_received"
    POST_QUESTION = "post_question"
    FIRST_LOGIN = "first_login"
    PROFILE_COMPLETE = "profile_complete"


XP_REWARDS: dict[ActionType, int] = {
    ActionType.QA_ANSWER: 10,
    ActionType.TUTORING_SESSION: 100,
    ActionType.ENDORSEMENT_RECEIVED: 50,
    ActionType.POST_QUESTION: 5,
    ActionType.FIRST_LOGIN: 25,
    ActionType.PROFILE_COMPLETE: 15,
}

# (level, minimum XP), ascending
LEVEL_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (2, 100),
    (3, 300),
    (4, 600),
    (5, 1000),
    (6, 1500),
    (7, 2200),
    (8, 3000),
    (9, 4000),
    (10, 5500),
)

MAX_LEVEL = LEVEL_THRESHOLDS[-1][0]


class Badge(str, Enum):
    """Named milestone badges."""

    FIRST_ANSWER = "First Answer"
    HELPFUL_TUTOR = "Helpful Tutor"
    EXPERT_TUTOR = "Expert Tutor"
    MASTER_TUTOR = "Master Tutor"
    SESSION_STARTER = "Session Starter"
    DEDICATED_MENTOR = "Dedicated Mentor"
    ELITE_MENTOR = "Elite Mentor"
    COMMUNITY_FAVORITE = "Community Favorite"
    RISING_STAR = "Rising Star"
    CHAMPION = "Champion"


BADGE_DESCRIPTIONS: dict[Badge, str] = {
    Badge.FIRST_ANSWER: "Answered your first question",
    Badge.HELPFUL_TUTOR: "Answered 10 questions",
    Badge.EXPERT_TUTOR: "Answered 50 questions",
    Badge.MASTER_TUTOR: "Answered 100 questions",
    Badge.SESSION_STARTER: "Completed your first tutoring session",
    Badge.DEDICATED_MENTOR: "Completed 10 tutoring sessions",
    Badge.ELITE_MENTOR: "Completed 25 tutoring sessions",
    Badge.COMMUNITY_FAVORITE: "Received 5 endorsements",
    Badge.RISING_STAR: "Reached level 5",
    Badge.CHAMPION: "Reached level 10",
}

# Level reached -> special badge
LEVEL_BADGES: dict[int, Badge] = {
    5: Badge.RISING_STAR,
    10: Badge.CHAMPION,
}

# Action -> (User counter attribute, {count reached: badge})
COUNTER_BADGES: dict[ActionType, tuple[str, dict[int, Badge]]] = {
    ActionType.QA_ANSWER: (
        "total_answers",
        {
            1: Badge.FIRST_ANSWER,
            10: Badge.HELPFUL_TUTOR,
            50: Badge.EXPERT_TUTOR,
            100: Badge.MASTER_TUTOR,
        },
    ),
    ActionType.TUTORING_SESSION: (
        "total_sessions",
        {
            1: Badge.SESSION_STARTER,
            10: Badge.DEDICATED_MENTOR,
            25: Badge.ELITE_MENTOR,
        },
    ),
    ActionType.ENDORSEMENT_RECEIVED: (
        "endorsements_received",
        {5: Badge.COMMUNITY_FAVORITE},
    ),
    ActionType.POST_QUESTION: ("total_posts", {}),
}
