# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Engagement drop detector.

Compares activity in the most recent bucket against the bucket before
it. Both buckets are measured back from the evaluation time.
"""

from datetime import timedelta

from src.core.struggle.detectors.base import BaseDetector, DetectionContext
from src.core.struggle.normalization import normalize_linear
from src.core.struggle.types import SignalDraft, SignalType
from src.utils.datetime import ensure_utc


class EngagementDetector(BaseDetector):
    """Fires when recent activity falls sharply below the previous bucket."""

    @property
    def signal_type(self) -> SignalType:
        return SignalType.ENGAGEMENT_DROP

    def bucket_counts(self, context: DetectionContext) -> tuple[int, int]:
        """Count window interactions in the recent and preceding buckets.

        Args:
            context: Detection context.

        Returns:
            (recent, preceding) counts. Rows without a timestamp are ignored.
        """
        bucket = timedelta(hours=self.config.engagement.bucket_hours)
        now = ensure_utc(context.now)
        recent = 0
        preceding = 0

        for record in context.window:
            if record.created_at is None:
                continue
            age = now - record.created_at
            if age <= bucket:
                recent += 1
            elif age <= 2 * bucket:
                preceding += 1

        return recent, preceding

    def detect(self, context: DetectionContext) -> SignalDraft | None:
        rule = self.config.engagement
        if len(context.window) < rule.min_window_size:
            return None

        recent, preceding = self.bucket_counts(context)
        if preceding < rule.min_preceding:
            return None

        ratio = recent / preceding
        value = normalize_linear(1 - ratio, rule.range.lower, rule.range.upper)

        if value < rule.min_magnitude:
            return None

        return self.draft(value, recent_count=recent, preceding_count=preceding, ratio=ratio)
