# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base detector class and the context every detector receives.

Each detector implements one independent struggle rule. Detectors are
pure: they look at the current interaction and its lookback window and
either return a SignalDraft or None. They never touch storage.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from src.core.struggle.config import DetectionConfig
from src.core.struggle.types import InteractionRecord, SignalDraft, SignalType


@dataclass(frozen=True)
class DetectionContext:
    """Inputs shared by all detectors for one extraction pass.

    Attributes:
        interaction: The interaction being evaluated.
        window: Lookback interactions for the same user, newest first,
            including ``interaction`` exactly once.
        now: Evaluation time.
        window_hours: Lookback window length, recorded in signal metadata.
    """

    interaction: InteractionRecord
    window: tuple[InteractionRecord, ...]
    now: datetime
    window_hours: float


def count_phrase_matches(text: str, phrases: Iterable[str]) -> int:
    """Count how many phrases occur in text (case-insensitive, each once)."""
    lowered = (text or "").lower()
    return sum(1 for phrase in phrases if phrase.lower() in lowered)


class BaseDetector(ABC):
    """Abstract base class for struggle detectors."""

    def __init__(self, config: DetectionConfig) -> None:
        """Initialize the detector.

        Args:
            config: Detection tuning tables.
        """
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def signal_type(self) -> SignalType:
        """Return the signal kind this detector emits."""
        ...

    @property
    def name(self) -> str:
        """Return the detector name."""
        return self.signal_type.value

    @abstractmethod
    def detect(self, context: DetectionContext) -> SignalDraft | None:
        """Evaluate the rule.

        Args:
            context: Current interaction and lookback window.

        Returns:
            SignalDraft if the rule fires, None otherwise.
        """
        ...

    def draft(self, value: float, **raw: float | int) -> SignalDraft:
        """Build a SignalDraft of this detector's kind."""
        return SignalDraft(signal_type=self.signal_type, value=value, raw=dict(raw))
