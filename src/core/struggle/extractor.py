# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Signal extractor.

Runs every detector over one interaction and its lookback window and
returns the signals that fired. Storage is handled by
StruggleSignalService; this module does no I/O.

Example:
    >>> extractor = SignalExtractor(load_struggle_config())
    >>> drafts = extractor.extract(interaction, window, now=utc_now())
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from src.core.struggle.config import StruggleConfig
from src.core.struggle.detectors import BaseDetector, DetectionContext, default_detectors
from src.core.struggle.normalization import clamp01
from src.core.struggle.types import InteractionRecord, SignalDraft
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class SignalExtractor:
    """Applies all struggle detection rules to one interaction.

    Attributes:
        config: Struggle tuning tables.
        detectors: Rules to apply, in order.
    """

    def __init__(
        self,
        config: StruggleConfig,
        detectors: Sequence[BaseDetector] | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            config: Struggle tuning tables.
            detectors: Optional custom detector list. Defaults to one
                detector per signal kind.
        """
        self.config = config
        self.detectors = list(detectors) if detectors is not None else default_detectors(
            config.detection
        )

    def build_window(
        self,
        interaction: InteractionRecord,
        recent: Sequence[InteractionRecord],
    ) -> tuple[InteractionRecord, ...]:
        """Build the lookback window with the current interaction exactly once.

        Args:
            interaction: The interaction being evaluated.
            recent: Recent interactions for the same user, newest first.
                May or may not already contain ``interaction``.

        Returns:
            Window capped at the configured limit, current interaction first.
        """
        others = [record for record in recent if record.id != interaction.id]
        window = [interaction, *others]
        return tuple(window[: self.config.detection.window_limit])

    def extract(
        self,
        interaction: InteractionRecord,
        recent: Sequence[InteractionRecord],
        now: datetime | None = None,
    ) -> list[SignalDraft]:
        """Run every detector and collect fired signals.

        Args:
            interaction: The completed interaction.
            recent: Recent interactions for the same user, newest first.
            now: Evaluation time. Defaults to the current UTC time.

        Returns:
            Fired signals with magnitudes clamped to [0, 1]. Empty for
            interactions not attributed to a learner.
        """
        if not interaction.is_learner:
            return []

        context = DetectionContext(
            interaction=interaction,
            window=self.build_window(interaction, recent),
            now=now or utc_now(),
            window_hours=self.config.detection.window_hours,
        )

        drafts: list[SignalDraft] = []
        for detector in self.detectors:
            try:
                draft = detector.detect(context)
            except (TypeError, ValueError, ArithmeticError) as e:
                logger.warning(
                    "Detector %s skipped for interaction %s: %s",
                    detector.name,
                    interaction.id,
                    type(e).__name__,
                )
                continue

            if draft is not None:
                drafts.append(replace(draft, value=clamp01(draft.value)))

        logger.debug(
            "Extracted %d signal(s) for interaction %s",
            len(drafts),
            interaction.id,
        )
        return drafts
