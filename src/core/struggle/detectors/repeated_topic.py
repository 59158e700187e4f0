# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Repeated topic detector.

A learner asking about the same topic again and again within the window
is circling a concept without landing it.
"""

from src.core.struggle.detectors.base import BaseDetector, DetectionContext
from src.core.struggle.normalization import normalize_linear
from src.core.struggle.types import SignalDraft, SignalType


class RepeatedTopicDetector(BaseDetector):
    """Counts window interactions sharing the current topic label."""

    @property
    def signal_type(self) -> SignalType:
        return SignalType.REPEATED_TOPIC

    def detect(self, context: DetectionContext) -> SignalDraft | None:
        rule = self.config.repeated_topic
        topic = context.interaction.topic
        count = sum(1 for record in context.window if record.topic == topic)

        if count < rule.min_count:
            return None

        value = normalize_linear(count, rule.range.lower, rule.range.upper)
        return self.draft(value, same_topic_count=count)
