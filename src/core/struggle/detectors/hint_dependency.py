# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Hint dependency detector."""

from src.core.struggle.detectors.base import (
    BaseDetector,
    DetectionContext,
    count_phrase_matches,
)
from src.core.struggle.normalization import normalize_linear
from src.core.struggle.types import SignalDraft, SignalType


class HintDependencyDetector(BaseDetector):
    """Fires on every hint-seeking request.

    Magnitude grows with the number of hint-seeking requests in the window,
    so a first request is recorded at 0 and a habit approaches 1.
    """

    @property
    def signal_type(self) -> SignalType:
        return SignalType.HINT_DEPENDENCY

    def is_hint_request(self, text: str) -> bool:
        """Check whether text matches any hint-seeking marker."""
        return count_phrase_matches(text, self.config.hint_dependency.markers) > 0

    def detect(self, context: DetectionContext) -> SignalDraft | None:
        if not self.is_hint_request(context.interaction.input_text):
            return None

        rule = self.config.hint_dependency
        hint_count = sum(1 for record in context.window if self.is_hint_request(record.input_text))
        value = normalize_linear(hint_count, rule.range.lower, rule.range.upper)
        return self.draft(value, hint_count=hint_count)
