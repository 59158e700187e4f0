# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for MentorBridge.

This package contains domain services that encapsulate business logic
on top of the database models.

Domains:
    struggle: Signal persistence, profile scoring and the pipeline runner.
    tutor_alerts: Cooldown-gated alerts and the tutor-facing read surface.
    care_network: Which tutors have helped which students.
    analytics: Admin and tutor read projections over struggle data.
    gaming: XP, levels, badges and endorsements.
"""
