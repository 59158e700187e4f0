# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle analytics domain.

Read-only admin and tutor projections over struggle data.
"""

from src.domains.analytics.schemas import (
    AdminOverview,
    CohortHeatmap,
    HeatmapCell,
    TopicStruggle,
    TutorQueueEntry,
)
from src.domains.analytics.service import TREND_ARROWS, StruggleAnalyticsService

__all__ = [
    "AdminOverview",
    "CohortHeatmap",
    "HeatmapCell",
    "StruggleAnalyticsService",
    "TopicStruggle",
    "TREND_ARROWS",
    "TutorQueueEntry",
]
