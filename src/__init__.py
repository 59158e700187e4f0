"""MentorBridge Backend.

Mentorship platform backend: struggle detection over AI tutoring
interactions, cooldown-gated tutor alerts, care networks and a
gamification ledger.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
