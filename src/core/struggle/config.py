# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tuning tables for struggle detection, scoring and alerting.

Every threshold, weight and lexicon used by the pipeline lives in one
frozen StruggleConfig tree that is handed to each component at
construction. Defaults reproduce the production tuning; a YAML file can
override any subset of it.

Example YAML override (``STRUGGLE_CONFIG_PATH=config/struggle.yaml``):

    weights:
      repeated_topic: 0.30
      hint_dependency: 0.05
    alerts:
      cooldown_hours: 12

Example:
    >>> from src.core.struggle.config import load_struggle_config
    >>> config = load_struggle_config()
    >>> config.weights.failed_attempt
    0.2
"""

from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.core.config.yaml_loader import YAMLLoadError, deep_merge, load_yaml
from src.core.struggle.types import SignalType

_WEIGHT_SUM_TOLERANCE = 1e-9


class StruggleConfigError(ValueError):
    """Raised when a struggle tuning table is missing or invalid."""


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class NormalizationRange(_FrozenModel):
    """Input range mapped linearly onto [0, 1]."""

    lower: float
    upper: float

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)) and len(data) == 2:
            return {"lower": data[0], "upper": data[1]}
        return data

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.upper <= self.lower:
            raise ValueError(
                f"Normalization range upper ({self.upper}) must exceed lower ({self.lower})"
            )
        return self


class SignalWeights(_FrozenModel):
    """Per-kind weights of the composite score.

    Field order is the canonical signal order used for contributing
    signals and reason summaries.
    """

    repeated_topic: float = Field(default=0.25, ge=0.0, le=1.0)
    failed_attempt: float = Field(default=0.20, ge=0.0, le=1.0)
    negative_sentiment: float = Field(default=0.15, ge=0.0, le=1.0)
    engagement_drop: float = Field(default=0.15, ge=0.0, le=1.0)
    long_response_time: float = Field(default=0.15, ge=0.0, le=1.0)
    hint_dependency: float = Field(default=0.10, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_sum(self) -> Self:
        total = sum(weight for _, weight in self.items())
        if total > 1.0 + _WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Signal weights must sum to at most 1.0, got {total:.4f}")
        return self

    def items(self) -> Iterator[tuple[SignalType, float]]:
        """Iterate (signal type, weight) pairs in canonical order."""
        for name in type(self).model_fields:
            yield SignalType(name), getattr(self, name)

    def for_type(self, signal_type: SignalType) -> float:
        """Get the weight of one signal kind."""
        return getattr(self, signal_type.value)


class RepeatedTopicConfig(_FrozenModel):
    """Repeated-topic rule."""

    min_count: int = Field(default=3, ge=1)
    range: NormalizationRange = NormalizationRange(lower=1, upper=5)


class ResponseTimeConfig(_FrozenModel):
    """Long-response-time rule."""

    sample_size: int = Field(default=30, ge=1)
    default_baseline_ms: float = Field(default=4000.0, gt=0)
    min_ratio: float = Field(default=1.5, gt=0)
    range: NormalizationRange = NormalizationRange(lower=1.1, upper=2.5)


class SentimentConfig(_FrozenModel):
    """Negative-sentiment rule and its lexicon."""

    negative_phrases: tuple[str, ...] = (
        "stuck",
        "confused",
        "frustrated",
        "annoying",
        "hate",
        "cant",
        "can't",
        "won't",
        "doesnt make sense",
        "doesn't make sense",
        "im lost",
        "i'm lost",
        "give up",
        "hard",
        "im done",
        "i'm done",
        "this sucks",
    )
    positive_phrases: tuple[str, ...] = (
        "got it",
        "thanks",
        "thank you",
        "understand",
        "makes sense",
        "nice",
        "awesome",
        "great",
        "cool",
        "worked",
        "solved",
        "lets go",
        "let's go",
    )
    score_clamp: int = Field(default=3, ge=1)
    magnitude_offset: float = 0.1
    magnitude_scale: float = Field(default=1.1, gt=0)
    min_magnitude: float = Field(default=0.45, ge=0.0, le=1.0)


class HintDependencyConfig(_FrozenModel):
    """Hint-dependency rule."""

    markers: tuple[str, ...] = (
        "hint",
        "clue",
        "nudge",
        "dont give answer",
        "don't give answer",
        "no answer",
        "just help",
        "guide me",
    )
    range: NormalizationRange = NormalizationRange(lower=1, upper=8)


class EngagementConfig(_FrozenModel):
    """Engagement-drop rule."""

    min_window_size: int = Field(default=10, ge=1)
    bucket_hours: float = Field(default=6.0, gt=0)
    min_preceding: int = Field(default=3, ge=1)
    range: NormalizationRange = NormalizationRange(lower=0.1, upper=0.8)
    min_magnitude: float = Field(default=0.6, ge=0.0, le=1.0)


class DetectionConfig(_FrozenModel):
    """Signal extraction settings."""

    window_hours: float = Field(default=24.0, gt=0)
    window_limit: int = Field(default=100, ge=1)
    repeated_topic: RepeatedTopicConfig = RepeatedTopicConfig()
    response_time: ResponseTimeConfig = ResponseTimeConfig()
    sentiment: SentimentConfig = SentimentConfig()
    hint_dependency: HintDependencyConfig = HintDependencyConfig()
    engagement: EngagementConfig = EngagementConfig()


class ScoringConfig(_FrozenModel):
    """Score aggregation settings."""

    window_hours: float = Field(default=24.0, gt=0)
    min_score: float = 1.0
    max_score: float = 10.0
    trend_delta: float = Field(default=0.5, ge=0.0)
    high_threshold: float = 7.0
    medium_threshold: float = 4.0
    breakthrough_max_score: float = 4.0
    reason_max_kinds: int = Field(default=2, ge=1)

    @model_validator(mode="after")
    def _check_thresholds(self) -> Self:
        if not self.min_score < self.max_score:
            raise ValueError("min_score must be below max_score")
        if not self.medium_threshold <= self.high_threshold:
            raise ValueError("medium_threshold must not exceed high_threshold")
        return self


class AlertConfig(_FrozenModel):
    """Tutor alert dispatch settings."""

    cooldown_hours: float = Field(default=24.0, gt=0)
    critical_score: float = 9.0
    fallback_topic: str = "current topic"
    reason_template: str = "A learner you helped before may benefit from support."
    unread_limit: int = Field(default=20, ge=1)


class StruggleConfig(_FrozenModel):
    """Complete struggle tuning tree."""

    weights: SignalWeights = SignalWeights()
    detection: DetectionConfig = DetectionConfig()
    scoring: ScoringConfig = ScoringConfig()
    alerts: AlertConfig = AlertConfig()


def load_struggle_config(path: Path | None = None) -> StruggleConfig:
    """Build a StruggleConfig, optionally overriding defaults from YAML.

    Args:
        path: YAML file with overrides. None returns the defaults.

    Returns:
        Validated, frozen configuration.

    Raises:
        StruggleConfigError: If the file cannot be read or the merged
            tables are invalid.
    """
    if path is None:
        return StruggleConfig()

    try:
        overrides = load_yaml(Path(path))
    except YAMLLoadError as e:
        raise StruggleConfigError(str(e)) from e

    merged = deep_merge(StruggleConfig().model_dump(), overrides)
    try:
        return StruggleConfig.model_validate(merged)
    except ValidationError as e:
        raise StruggleConfigError(f"Invalid struggle configuration in '{path}': {e}") from e


@lru_cache(maxsize=1)
def get_struggle_config() -> StruggleConfig:
    """Get the process-wide struggle configuration from settings.

    Returns:
        Cached StruggleConfig honoring STRUGGLE_CONFIG_PATH.
    """
    from src.core.config import get_settings

    return load_struggle_config(get_settings().struggle.config_path)
