# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on Base.metadata.
"""

from src.infrastructure.database.models.base import Base, JSONType, new_uuid
from src.infrastructure.database.models.gaming import Endorsement, PointTransaction
from src.infrastructure.database.models.interaction import AIInteraction
from src.infrastructure.database.models.struggle import StruggleProfile, StruggleSignal
from src.infrastructure.database.models.tutor import (
    CareNetworkTutor,
    TutorAlert,
    TutorAlertCooldown,
    TutorCareNetwork,
)
from src.infrastructure.database.models.user import User

__all__ = [
    "Base",
    "JSONType",
    "new_uuid",
    "User",
    "AIInteraction",
    "StruggleSignal",
    "StruggleProfile",
    "TutorCareNetwork",
    "CareNetworkTutor",
    "TutorAlert",
    "TutorAlertCooldown",
    "PointTransaction",
    "Endorsement",
]
