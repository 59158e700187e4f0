# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle domain.

Persists struggle signals and profiles and runs the struggle pipeline.
"""

from src.domains.struggle.pipeline import (
    PipelineResult,
    StrugglePipeline,
    dispatch_struggle_pipeline,
)
from src.domains.struggle.schemas import (
    BreakthroughStatus,
    ContributingSignalView,
    ExtractionResult,
    ProfileSnapshot,
    SignalRecord,
)
from src.domains.struggle.service import (
    StruggleScoringService,
    StruggleServiceError,
    StruggleSignalService,
)

__all__ = [
    "BreakthroughStatus",
    "ContributingSignalView",
    "ExtractionResult",
    "PipelineResult",
    "ProfileSnapshot",
    "SignalRecord",
    "StrugglePipeline",
    "StruggleScoringService",
    "StruggleServiceError",
    "StruggleSignalService",
    "dispatch_struggle_pipeline",
]
