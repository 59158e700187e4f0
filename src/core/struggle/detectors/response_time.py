# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Long response time detector.

Compares the current processing latency with the learner's own recent
baseline.
"""

from src.core.struggle.detectors.base import BaseDetector, DetectionContext
from src.core.struggle.normalization import normalize_linear
from src.core.struggle.types import SignalDraft, SignalType


class ResponseTimeDetector(BaseDetector):
    """Fires when latency is well above the window's median latency."""

    @property
    def signal_type(self) -> SignalType:
        return SignalType.LONG_RESPONSE_TIME

    def baseline(self, context: DetectionContext) -> float:
        """Upper median of the most recent numeric latencies in the window.

        Args:
            context: Detection context.

        Returns:
            Baseline latency in milliseconds, or the configured default
            when the window has no numeric latencies.
        """
        rule = self.config.response_time
        latencies = [
            record.latency_ms for record in context.window if record.latency_ms is not None
        ][: rule.sample_size]

        if not latencies:
            return rule.default_baseline_ms

        latencies.sort()
        return latencies[len(latencies) // 2]

    def detect(self, context: DetectionContext) -> SignalDraft | None:
        latency = context.interaction.latency_ms
        if latency is None:
            return None

        rule = self.config.response_time
        baseline = self.baseline(context)
        ratio = latency / baseline if baseline > 0 else 1.0

        if ratio < rule.min_ratio:
            return None

        value = normalize_linear(ratio, rule.range.lower, rule.range.upper)
        return self.draft(value, latency_ms=latency, baseline_ms=baseline, ratio=ratio)
