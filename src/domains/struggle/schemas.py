# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Schemas for the struggle domain.

These are plain read models returned by the struggle services. None of
them is ever shown to the learner they describe.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.struggle.types import SignalType, SupportLevel, Trend
from src.utils.datetime import ensure_utc


class SignalRecord(BaseModel):
    """A persisted struggle signal."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    interaction_id: str
    track: str
    topic: str
    signal_type: SignalType
    value: float = Field(ge=0.0, le=1.0)
    meta: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    @field_validator("created_at", mode="after")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)  # type: ignore[return-value]


class ExtractionResult(BaseModel):
    """Outcome of one extraction pass."""

    created: int = Field(default=0, description="Signals written by this pass")
    skipped: int = Field(default=0, description="Signals already recorded for the interaction")
    signals: list[SignalRecord] = Field(default_factory=list, description="Created signals")


class ContributingSignalView(BaseModel):
    """One signal kind's share of a struggle score."""

    signal_type: SignalType
    weight: float
    value: float


class ProfileSnapshot(BaseModel):
    """Current struggle profile of one user."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    track: str = "general"
    cohort_id: str = "default"
    struggle_score: float = Field(ge=1.0, le=10.0)
    trend: Trend
    support_level: SupportLevel
    contributing_signals: list[ContributingSignalView] = Field(default_factory=list)
    last_reason_summary: str = ""
    last_evaluated_at: datetime

    @field_validator("last_evaluated_at", mode="after")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)  # type: ignore[return-value]


class BreakthroughStatus(BaseModel):
    """Whether a learner's struggle has visibly eased."""

    is_breakthrough: bool
    current_score: float
    topic: str = ""
