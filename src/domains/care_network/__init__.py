# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Care network domain."""

from src.domains.care_network.service import (
    CareNetworkError,
    CareNetworkService,
    CareNetworkStudent,
    CareNetworkView,
)

__all__ = [
    "CareNetworkError",
    "CareNetworkService",
    "CareNetworkStudent",
    "CareNetworkView",
]
