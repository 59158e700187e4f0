# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle score aggregation.

Turns a window of signals into a composite 1..10 score, a trend against
the previous score, a support level and a short reason summary.

Algorithm:
    1. Keep the maximum magnitude per signal kind.
    2. raw = sum(weight * max magnitude) over all kinds.
    3. score = min + raw * (max - min), rounded half up to one decimal
       and clamped to [min, max].
    4. Trend compares the new score to the previous one with a dead band.
    5. Support level thresholds apply to the new score.

An empty window resets the result to the baseline (minimum score,
stable, low support) regardless of the previous score.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from src.core.struggle.config import StruggleConfig
from src.core.struggle.normalization import clamp01, round_half_up
from src.core.struggle.types import ContributingSignal, SignalType, SupportLevel, Trend


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of one score evaluation.

    Attributes:
        score: Composite score in [1, 10], one decimal place.
        trend: Direction against the previous score.
        support_level: Coarse support classification.
        contributing: Non-zero per-kind maxima in canonical order.
        reason_summary: Up to two kind labels joined with " & ".
        raw_score: Weighted sum before rescaling, in [0, 1].
    """

    score: float
    trend: Trend
    support_level: SupportLevel
    contributing: list[ContributingSignal] = field(default_factory=list)
    reason_summary: str = ""
    raw_score: float = 0.0


class StruggleScorer:
    """Computes struggle scores from signal magnitudes."""

    def __init__(self, config: StruggleConfig) -> None:
        self.config = config

    def aggregate(self, signals: Iterable[tuple[SignalType, float]]) -> dict[SignalType, float]:
        """Maximum magnitude per signal kind.

        Args:
            signals: (kind, magnitude) pairs.

        Returns:
            Mapping of kind to its largest clamped magnitude.
        """
        maxima: dict[SignalType, float] = {}
        for signal_type, value in signals:
            kind = SignalType(signal_type)
            maxima[kind] = max(maxima.get(kind, 0.0), clamp01(value))
        return maxima

    def to_score(self, raw: float) -> float:
        """Rescale a raw weighted sum onto the score range."""
        scoring = self.config.scoring
        span = scoring.max_score - scoring.min_score
        score = round_half_up(scoring.min_score + raw * span, 1)
        return min(scoring.max_score, max(scoring.min_score, score))

    def classify_trend(self, score: float, previous_score: float | None) -> Trend:
        """Classify the change from the previous score."""
        if previous_score is None:
            return Trend.STABLE
        delta = self.config.scoring.trend_delta
        if score > previous_score + delta:
            return Trend.RISING
        if score < previous_score - delta:
            return Trend.FALLING
        return Trend.STABLE

    def classify_support(self, score: float) -> SupportLevel:
        """Map a score onto a support level."""
        scoring = self.config.scoring
        if score >= scoring.high_threshold:
            return SupportLevel.HIGH
        if score >= scoring.medium_threshold:
            return SupportLevel.MEDIUM
        return SupportLevel.LOW

    def summarize(self, contributing: list[ContributingSignal]) -> str:
        """Build the reason summary from the highest-weighted kinds.

        Only coarse kind labels are used, never raw inputs.
        """
        top = sorted(contributing, key=lambda c: c.weight, reverse=True)
        top = top[: self.config.scoring.reason_max_kinds]
        return " & ".join(c.signal_type.label for c in top)

    def score(
        self,
        signals: Iterable[tuple[SignalType, float]],
        previous_score: float | None = None,
    ) -> ScoreResult:
        """Evaluate a window of signals.

        Args:
            signals: (kind, magnitude) pairs inside the evaluation window.
            previous_score: Score of the stored profile, if any.

        Returns:
            ScoreResult for the window.
        """
        maxima = self.aggregate(signals)

        if not maxima:
            return ScoreResult(
                score=self.config.scoring.min_score,
                trend=Trend.STABLE,
                support_level=SupportLevel.LOW,
            )

        raw = 0.0
        contributing: list[ContributingSignal] = []
        for signal_type, weight in self.config.weights.items():
            value = maxima.get(signal_type, 0.0)
            raw += weight * value
            if value > 0:
                contributing.append(
                    ContributingSignal(signal_type=signal_type, weight=weight, value=value)
                )

        score = self.to_score(raw)
        return ScoreResult(
            score=score,
            trend=self.classify_trend(score, previous_score),
            support_level=self.classify_support(score),
            contributing=contributing,
            reason_summary=self.summarize(contributing),
            raw_score=raw,
        )

    def is_breakthrough(self, trend: Trend | str, score: float) -> bool:
        """Whether a profile shows a breakthrough (falling and low enough)."""
        return (
            Trend(trend) is Trend.FALLING
            and score <= self.config.scoring.breakthrough_max_score
        )
