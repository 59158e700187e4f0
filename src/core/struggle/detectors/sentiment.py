# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Negative sentiment detector.

Only the aggregate lexicon score is kept in signal metadata. Matched
phrases and the input text itself are never stored or logged.
"""

from src.core.struggle.detectors.base import (
    BaseDetector,
    DetectionContext,
    count_phrase_matches,
)
from src.core.struggle.normalization import clamp01
from src.core.struggle.types import SignalDraft, SignalType


class SentimentDetector(BaseDetector):
    """Scores input text against a fixed positive/negative lexicon."""

    @property
    def signal_type(self) -> SignalType:
        return SignalType.NEGATIVE_SENTIMENT

    def sentiment_score(self, text: str) -> float:
        """Lexicon sentiment of text in [-1, 1].

        Args:
            text: Raw input text.

        Returns:
            (positive matches - negative matches), clamped to
            [-score_clamp, score_clamp] and divided by score_clamp.
        """
        rule = self.config.sentiment
        score = count_phrase_matches(text, rule.positive_phrases) - count_phrase_matches(
            text, rule.negative_phrases
        )
        score = max(-rule.score_clamp, min(rule.score_clamp, score))
        return score / rule.score_clamp

    def detect(self, context: DetectionContext) -> SignalDraft | None:
        rule = self.config.sentiment
        score = self.sentiment_score(context.interaction.input_text)
        value = clamp01((-score + rule.magnitude_offset) / rule.magnitude_scale)

        if value < rule.min_magnitude:
            return None

        return self.draft(value, sentiment_score=score)
