# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle detection core.

Pure, storage-free building blocks of the struggle pipeline:

- config: Frozen tuning tables (weights, lexicons, thresholds)
- detectors: One rule per signal kind
- extractor: Runs the detectors over an interaction and its window
- scoring: Aggregates signals into a score, trend and support level

Persistence and orchestration live in src.domains.struggle.
"""

from src.core.struggle.config import (
    AlertConfig,
    DetectionConfig,
    NormalizationRange,
    ScoringConfig,
    SignalWeights,
    StruggleConfig,
    StruggleConfigError,
    get_struggle_config,
    load_struggle_config,
)
from src.core.struggle.extractor import SignalExtractor
from src.core.struggle.normalization import clamp01, normalize_linear, round_half_up
from src.core.struggle.scoring import ScoreResult, StruggleScorer
from src.core.struggle.types import (
    AlertUrgency,
    ContributingSignal,
    InteractionRecord,
    InteractionStatus,
    SignalDraft,
    SignalType,
    SupportLevel,
    Trend,
    UserRole,
)

__all__ = [
    # Config
    "StruggleConfig",
    "StruggleConfigError",
    "SignalWeights",
    "DetectionConfig",
    "ScoringConfig",
    "AlertConfig",
    "NormalizationRange",
    "load_struggle_config",
    "get_struggle_config",
    # Components
    "SignalExtractor",
    "StruggleScorer",
    "ScoreResult",
    # Normalization
    "clamp01",
    "normalize_linear",
    "round_half_up",
    # Types
    "AlertUrgency",
    "ContributingSignal",
    "InteractionRecord",
    "InteractionStatus",
    "SignalDraft",
    "SignalType",
    "SupportLevel",
    "Trend",
    "UserRole",
]
