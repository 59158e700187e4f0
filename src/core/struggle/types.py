# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared types for struggle detection.

Closed enumerations replace the free-form role, status and signal-kind
strings of upstream records, so an unknown value fails when the record is
built rather than silently producing no signal deep inside a detector.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.datetime import ensure_utc


class UserRole(str, Enum):
    """Platform roles."""

    LEARNER = "learner"
    TUTOR = "tutor"
    ADMIN = "admin"


class InteractionStatus(str, Enum):
    """Outcome of an AI tutoring interaction."""

    SUCCESS = "success"
    FAILED = "failed"
    RATE_LIMITED = "rate_limited"
    REFUSED = "refused"
    TIMEOUT = "timeout"
    INVALID_INPUT = "invalid_input"


class SignalType(str, Enum):
    """Kinds of struggle signal."""

    REPEATED_TOPIC = "repeated_topic"
    FAILED_ATTEMPT = "failed_attempt"
    NEGATIVE_SENTIMENT = "negative_sentiment"
    ENGAGEMENT_DROP = "engagement_drop"
    LONG_RESPONSE_TIME = "long_response_time"
    HINT_DEPENDENCY = "hint_dependency"

    @property
    def label(self) -> str:
        """Human-readable lowercase label, e.g. "repeated topic"."""
        return self.value.replace("_", " ").lower()


class Trend(str, Enum):
    """Direction of a struggle score between two evaluations."""

    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


class SupportLevel(str, Enum):
    """Coarse classification of how much help a learner may need."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AlertUrgency(str, Enum):
    """Urgency of a tutor alert."""

    SOFT = "soft"
    URGENT = "urgent"


class InteractionRecord(BaseModel):
    """Read-only view of one completed AI tutoring interaction.

    Built from the upstream tutoring subsystem's row, either directly or
    through ``InteractionRecord.model_validate(orm_row)``.

    Attributes:
        id: Interaction identifier.
        user_id: Learner (or other role) that produced the interaction.
        role: Role of the user at interaction time.
        track: Learning track label.
        topic: One-line topic label.
        input_text: Raw user input. Used for matching only, never stored
            in signals or logs.
        status: Outcome status.
        latency_ms: Processing latency, None when absent or unparseable.
        created_at: Interaction timestamp, None when absent.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    user_id: str
    role: UserRole
    track: str = "general"
    topic: str = "unknown"
    input_text: str = ""
    status: InteractionStatus = InteractionStatus.SUCCESS
    latency_ms: float | None = Field(default=None)
    created_at: datetime | None = None

    @field_validator("role", "status", mode="before")
    @classmethod
    def _lowercase_enum(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("track", mode="before")
    @classmethod
    def _default_track(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            return "general"
        return str(value).strip()

    @field_validator("topic", mode="before")
    @classmethod
    def _default_topic(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            return "unknown"
        return str(value).strip()

    @field_validator("input_text", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("latency_ms", mode="before")
    @classmethod
    def _parse_latency(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            latency = float(value)
        except (TypeError, ValueError):
            return None
        if latency != latency:  # NaN
            return None
        return latency

    @field_validator("created_at", mode="after")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @property
    def is_learner(self) -> bool:
        """Whether this interaction drives struggle detection."""
        return self.role is UserRole.LEARNER


@dataclass(frozen=True)
class SignalDraft:
    """A fired detection rule, not yet persisted.

    Attributes:
        signal_type: Which rule fired.
        value: Normalized magnitude in [0, 1].
        raw: Numeric inputs that produced the magnitude.
    """

    signal_type: SignalType
    value: float
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ContributingSignal:
    """One signal kind's share of a struggle score."""

    signal_type: SignalType
    weight: float
    value: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "signal_type": self.signal_type.value,
            "weight": self.weight,
            "value": self.value,
        }
