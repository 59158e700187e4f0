# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle detectors.

One detector per signal kind. Each is independent: any subset may fire
for a single interaction.
"""

from src.core.struggle.config import DetectionConfig
from src.core.struggle.detectors.base import (
    BaseDetector,
    DetectionContext,
    count_phrase_matches,
)
from src.core.struggle.detectors.engagement import EngagementDetector
from src.core.struggle.detectors.failed_attempt import FailedAttemptDetector
from src.core.struggle.detectors.hint_dependency import HintDependencyDetector
from src.core.struggle.detectors.repeated_topic import RepeatedTopicDetector
from src.core.struggle.detectors.response_time import ResponseTimeDetector
from src.core.struggle.detectors.sentiment import SentimentDetector


def default_detectors(config: DetectionConfig) -> list[BaseDetector]:
    """Create the standard detector set.

    Args:
        config: Detection tuning tables.

    Returns:
        One detector per signal kind.
    """
    return [
        FailedAttemptDetector(config),
        RepeatedTopicDetector(config),
        ResponseTimeDetector(config),
        SentimentDetector(config),
        HintDependencyDetector(config),
        EngagementDetector(config),
    ]


__all__ = [
    "BaseDetector",
    "DetectionContext",
    "count_phrase_matches",
    "default_detectors",
    "EngagementDetector",
    "FailedAttemptDetector",
    "HintDependencyDetector",
    "RepeatedTopicDetector",
    "ResponseTimeDetector",
    "SentimentDetector",
]
