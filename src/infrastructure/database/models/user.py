# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User model with gamification counters."""

from sqlalchemy import Boolean, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    JSONType,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Platform user (learner, tutor or admin).

    Account management (passwords, tokens) is owned by the auth service;
    this table only carries what struggle detection and gamification read.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="learner")
    track: Mapped[str | None] = mapped_column(String(100), nullable=True)
    cohort_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Gamification
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    badges: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    total_answers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_sessions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_posts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    endorsements_received: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    endorsements_given: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("role IN ('learner', 'tutor', 'admin')", name="valid_user_role"),
    )

    @property
    def full_name(self) -> str:
        """Display name, else "first last", else a neutral placeholder."""
        if self.display_name:
            return self.display_name
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or "A learner"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role})>"
