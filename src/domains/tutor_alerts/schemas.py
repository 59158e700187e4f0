# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Schemas for tutor alerts.

TutorAlertRecord is the stored alert. TutorAlertView is the tutor-facing
shape: it carries the templated message and never the underlying signals.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.struggle.types import AlertUrgency
from src.utils.datetime import ensure_utc


class TutorAlertRecord(BaseModel):
    """A persisted tutor alert."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tutor_id: str
    student_id: str
    urgency: AlertUrgency
    topic: str
    struggle_score: float
    reason_summary: str
    is_read: bool = False
    created_at: datetime

    @field_validator("created_at", mode="after")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)  # type: ignore[return-value]


class TutorAlertView(BaseModel):
    """Unread alert as shown to a tutor."""

    id: str
    student_id: str
    student_name: str = Field(description="Display name, else first and last name")
    topic: str
    urgency: AlertUrgency
    message: str = Field(description="Templated supportive message")
    created_at: datetime
    is_read: bool = False


class TutorStats(BaseModel):
    """Tutor impact statistics."""

    students_helped: int = 0
    alerts_responded: int = 0
    impact_score: int = 0
