# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for struggle tuning tables and their YAML overrides."""

import pytest
from pydantic import ValidationError

from src.core.struggle.config import (
    NormalizationRange,
    SignalWeights,
    StruggleConfig,
    StruggleConfigError,
    load_struggle_config,
)
from src.core.struggle.types import SignalType


class TestDefaults:
    """Tests for the default tuning tables."""

    def test_default_weights(self):
        """Verify the default weights and their canonical order."""
        weights = StruggleConfig().weights

        assert list(weights.items()) == [
            (SignalType.REPEATED_TOPIC, 0.25),
            (SignalType.FAILED_ATTEMPT, 0.20),
            (SignalType.NEGATIVE_SENTIMENT, 0.15),
            (SignalType.ENGAGEMENT_DROP, 0.15),
            (SignalType.LONG_RESPONSE_TIME, 0.15),
            (SignalType.HINT_DEPENDENCY, 0.10),
        ]
        assert sum(w for _, w in weights.items()) == pytest.approx(1.0)

    def test_default_thresholds(self):
        """Verify the product thresholds."""
        config = StruggleConfig()

        assert config.detection.repeated_topic.min_count == 3
        assert config.detection.response_time.min_ratio == 1.5
        assert config.detection.sentiment.min_magnitude == 0.45
        assert config.alerts.cooldown_hours == 24.0
        assert config.alerts.critical_score == 9.0

    def test_config_is_frozen(self):
        """Verify tables cannot be mutated after construction."""
        config = StruggleConfig()

        with pytest.raises(ValidationError):
            config.alerts.cooldown_hours = 1


class TestValidation:
    """Tests for table validation."""

    def test_weights_above_one_are_rejected(self):
        """Verify weights summing above 1.0 fail."""
        with pytest.raises(ValidationError):
            SignalWeights(repeated_topic=0.9)

    def test_inverted_range_is_rejected(self):
        """Verify upper must exceed lower."""
        with pytest.raises(ValidationError):
            NormalizationRange(lower=5, upper=1)

    def test_range_accepts_pair(self):
        """Verify a [lower, upper] pair is accepted."""
        assert NormalizationRange.model_validate([1, 5]) == NormalizationRange(lower=1, upper=5)

    def test_unknown_keys_are_rejected(self):
        """Verify typos in tables fail rather than being ignored."""
        with pytest.raises(ValidationError):
            StruggleConfig.model_validate({"alerts": {"cooldown_hrs": 12}})


class TestLoadStruggleConfig:
    """Tests for load_struggle_config."""

    def test_no_path_returns_defaults(self):
        """Verify defaults without an override file."""
        assert load_struggle_config() == StruggleConfig()

    def test_yaml_overrides_subset(self, tmp_path):
        """Verify a YAML file overrides only the keys it names."""
        path = tmp_path / "struggle.yaml"
        path.write_text(
            "weights:\n"
            "  repeated_topic: 0.30\n"
            "  hint_dependency: 0.05\n"
            "alerts:\n"
            "  cooldown_hours: 12\n"
            "detection:\n"
            "  hint_dependency:\n"
            "    markers: [\"help me\"]\n"
            "    range: [1, 4]\n",
            encoding="utf-8",
        )

        config = load_struggle_config(path)

        assert config.weights.repeated_topic == 0.30
        assert config.weights.failed_attempt == 0.20
        assert config.alerts.cooldown_hours == 12
        assert config.alerts.critical_score == 9.0
        assert config.detection.hint_dependency.markers == ("help me",)
        assert config.detection.hint_dependency.range.upper == 4

    def test_invalid_override_raises(self, tmp_path):
        """Verify an invalid merged table raises StruggleConfigError."""
        path = tmp_path / "struggle.yaml"
        path.write_text("weights:\n  repeated_topic: 0.9\n", encoding="utf-8")

        with pytest.raises(StruggleConfigError):
            load_struggle_config(path)

    def test_missing_file_raises(self, tmp_path):
        """Verify a missing override file raises StruggleConfigError."""
        with pytest.raises(StruggleConfigError):
            load_struggle_config(tmp_path / "missing.yaml")
