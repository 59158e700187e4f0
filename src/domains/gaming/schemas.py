# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Schemas for the gamification domain.

- NextLevelInfo: Progress towards the next level
- PointTransactionRecord: One stored XP award
- AwardResult: Outcome of award_xp
- EndorsementResult: Outcome of create_endorsement
- UserStats / LeaderboardEntry: Read views
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NextLevelInfo(BaseModel):
    """Progress towards the next level."""

    current_level: int
    next_level: int
    current_xp: int
    next_level_xp: int
    xp_needed: int
    progress: float = Field(description="current_xp / next_level_xp")


class PointTransactionRecord(BaseModel):
    """A stored XP award."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    action_type: str
    points_awarded: int
    previous_xp: int
    new_xp: int
    previous_level: int
    new_level: int
    meta: dict[str, Any] = Field(default_factory=dict)
    idempotency_key: str
    created_at: datetime


class AwardResult(BaseModel):
    """Outcome of an XP award."""

    duplicate: bool = False
    transaction: PointTransactionRecord
    xp_awarded: int = 0
    new_xp: int = 0
    old_level: int = 1
    new_level: int = 1
    level_up: bool = False
    new_badges: list[str] = Field(default_factory=list)


class EndorsementRecord(BaseModel):
    """A stored endorsement."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    endorser_id: str
    endorsee_id: str
    message: str
    created_at: datetime


class EndorsementResult(BaseModel):
    """Outcome of an endorsement."""

    endorsement: EndorsementRecord
    xp_awarded: int = 0
    level_up: bool = False
    new_badges: list[str] = Field(default_factory=list)


class UserStats(BaseModel):
    """A user's gamification state."""

    user_id: str
    current_xp: int
    level: int
    badges: list[str] = Field(default_factory=list)
    total_answers: int = 0
    total_sessions: int = 0
    total_posts: int = 0
    endorsements_received: int = 0
    next_level: NextLevelInfo | None = None
    recent_transactions: list[PointTransactionRecord] = Field(default_factory=list)
    recent_endorsements: list[EndorsementRecord] = Field(default_factory=list)


class LeaderboardEntry(BaseModel):
    """One leaderboard row."""

    rank: int
    user_id: str
    name: str
    role: str
    xp: int
    level: int
    badge_count: int = 0
