# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor alerts domain.

Cooldown-gated alert dispatch and the tutor-facing alert inbox.
"""

from src.domains.tutor_alerts.schemas import TutorAlertRecord, TutorAlertView, TutorStats
from src.domains.tutor_alerts.service import TutorAlertService, TutorAlertServiceError

__all__ = [
    "TutorAlertRecord",
    "TutorAlertService",
    "TutorAlertServiceError",
    "TutorAlertView",
    "TutorStats",
]
