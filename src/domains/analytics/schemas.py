# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Schemas for struggle analytics read projections."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.struggle.types import SupportLevel, Trend


class TopicStruggle(BaseModel):
    """Signal volume for one topic over a trailing window."""

    topic: str
    signal_count: int
    average_value: float


class AdminOverview(BaseModel):
    """Platform-wide struggle overview for admins."""

    total_profiles: int = 0
    high_support: int = 0
    medium_support: int = 0
    low_support: int = 0
    trending_up: int = 0
    top_topics: list[TopicStruggle] = Field(default_factory=list)
    window_days: int = 7


class HeatmapCell(BaseModel):
    """High-support profiles sharing one reason summary."""

    reason: str
    count: int
    average_score: float


class CohortHeatmap(BaseModel):
    """High-support reasons within one cohort."""

    cohort_id: str
    cells: list[HeatmapCell] = Field(default_factory=list)


class TutorQueueEntry(BaseModel):
    """A student in a tutor's support queue.

    Carries the trend arrow and support level only; the numeric score is
    not exposed to tutors.
    """

    student_id: str
    student_name: str
    topic: str
    trend: Trend
    trend_arrow: str
    support_level: SupportLevel
    helped_before: bool = True
    updated_at: datetime
