# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for StruggleScorer."""

import pytest

from src.core.struggle.config import SignalWeights, StruggleConfig
from src.core.struggle.scoring import StruggleScorer
from src.core.struggle.types import SignalType, SupportLevel, Trend


@pytest.fixture
def scorer(struggle_config):
    """Scorer with default tables."""
    return StruggleScorer(struggle_config)


class TestScore:
    """Tests for StruggleScorer.score."""

    def test_single_failed_attempt(self, scorer):
        """Verify raw 0.20 gives score 2.8 and low support."""
        result = scorer.score([(SignalType.FAILED_ATTEMPT, 1.0)])

        assert result.raw_score == pytest.approx(0.20)
        assert result.score == 2.8
        assert result.support_level is SupportLevel.LOW
        assert result.trend is Trend.STABLE
        assert result.reason_summary == "failed attempt"

    def test_empty_window_is_baseline(self, scorer):
        """Verify no signals give score 1, stable, low."""
        result = scorer.score([], previous_score=8.5)

        assert result.score == 1.0
        assert result.trend is Trend.STABLE
        assert result.support_level is SupportLevel.LOW
        assert result.contributing == []
        assert result.reason_summary == ""

    def test_every_signal_at_max_gives_ten(self, scorer):
        """Verify full magnitudes on every kind reach the top of the scale."""
        result = scorer.score([(kind, 1.0) for kind in SignalType])

        assert result.score == 10.0
        assert result.support_level is SupportLevel.HIGH

    def test_max_magnitude_per_kind_is_used(self, scorer):
        """Verify repeated signals of one kind are not summed."""
        result = scorer.score(
            [(SignalType.REPEATED_TOPIC, 0.25), (SignalType.REPEATED_TOPIC, 0.75)]
        )

        assert result.raw_score == pytest.approx(0.1875)
        assert result.score == 2.7
        assert result.contributing[0].value == 0.75

    def test_contributing_in_canonical_order(self, scorer):
        """Verify contributing signals follow the weight table order."""
        result = scorer.score(
            [(SignalType.HINT_DEPENDENCY, 0.5), (SignalType.REPEATED_TOPIC, 0.5)]
        )

        assert [c.signal_type for c in result.contributing] == [
            SignalType.REPEATED_TOPIC,
            SignalType.HINT_DEPENDENCY,
        ]

    def test_zero_magnitude_signals_do_not_contribute(self, scorer):
        """Verify zero-valued signals are left out of the contributors."""
        result = scorer.score([(SignalType.HINT_DEPENDENCY, 0.0), (SignalType.FAILED_ATTEMPT, 1.0)])

        assert [c.signal_type for c in result.contributing] == [SignalType.FAILED_ATTEMPT]

    def test_score_always_in_range(self, scorer):
        """Verify scores stay in [1, 10] for magnitudes in [0, 1]."""
        for step in range(11):
            value = step / 10
            result = scorer.score([(kind, value) for kind in SignalType])
            assert 1.0 <= result.score <= 10.0

    def test_substituted_weights(self):
        """Verify an injected weight table changes the score."""
        config = StruggleConfig(
            weights=SignalWeights(
                repeated_topic=0.0,
                failed_attempt=1.0,
                negative_sentiment=0.0,
                engagement_drop=0.0,
                long_response_time=0.0,
                hint_dependency=0.0,
            )
        )
        result = StruggleScorer(config).score([(SignalType.FAILED_ATTEMPT, 1.0)])

        assert result.score == 10.0


class TestClassification:
    """Tests for trend, support level and summaries."""

    @pytest.mark.parametrize(
        "score,previous,expected",
        [
            (2.8, None, Trend.STABLE),
            (2.8, 2.0, Trend.RISING),
            (2.8, 2.5, Trend.STABLE),
            (2.8, 3.5, Trend.FALLING),
            (3.0, 2.5, Trend.STABLE),
        ],
    )
    def test_trend(self, scorer, score, previous, expected):
        """Verify the 0.5 dead band around the previous score."""
        assert scorer.classify_trend(score, previous) is expected

    @pytest.mark.parametrize(
        "score,expected",
        [
            (1.0, SupportLevel.LOW),
            (3.9, SupportLevel.LOW),
            (4.0, SupportLevel.MEDIUM),
            (6.9, SupportLevel.MEDIUM),
            (7.0, SupportLevel.HIGH),
        ],
    )
    def test_support_level(self, scorer, score, expected):
        """Verify support thresholds at 4 and 7."""
        assert scorer.classify_support(score) is expected

    def test_summary_takes_two_heaviest_kinds(self, scorer):
        """Verify the reason summary names the two highest-weighted kinds."""
        result = scorer.score([(kind, 0.5) for kind in SignalType])

        assert result.reason_summary == "repeated topic & failed attempt"

    def test_summary_ties_keep_canonical_order(self, scorer):
        """Verify equal weights keep weight-table order."""
        result = scorer.score(
            [
                (SignalType.LONG_RESPONSE_TIME, 0.5),
                (SignalType.ENGAGEMENT_DROP, 0.5),
                (SignalType.NEGATIVE_SENTIMENT, 0.5),
            ]
        )

        assert result.reason_summary == "negative sentiment & engagement drop"

    @pytest.mark.parametrize(
        "trend,score,expected",
        [
            (Trend.FALLING, 3.5, True),
            (Trend.FALLING, 4.0, True),
            (Trend.FALLING, 4.5, False),
            (Trend.STABLE, 2.0, False),
            ("falling", 1.0, True),
        ],
    )
    def test_breakthrough(self, scorer, trend, score, expected):
        """Verify breakthrough needs a falling trend and score at most 4."""
        assert scorer.is_breakthrough(trend, score) is expected
