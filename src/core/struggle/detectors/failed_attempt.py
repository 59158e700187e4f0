# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Failed attempt detector."""

from src.core.struggle.detectors.base import BaseDetector, DetectionContext
from src.core.struggle.types import InteractionStatus, SignalDraft, SignalType


class FailedAttemptDetector(BaseDetector):
    """Fires at full magnitude when the interaction failed."""

    @property
    def signal_type(self) -> SignalType:
        return SignalType.FAILED_ATTEMPT

    def detect(self, context: DetectionContext) -> SignalDraft | None:
        if context.interaction.status is not InteractionStatus.FAILED:
            return None
        return self.draft(1.0, failed=1)
