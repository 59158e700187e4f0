# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Struggle signal and profile models.

StruggleSignal rows are append-only; the (interaction_id, signal_type)
unique constraint makes repeated extraction of one interaction a no-op.
StruggleProfile holds exactly one current snapshot per user and is
overwritten on every evaluation.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    JSONType,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.utils.datetime import utc_now


class StruggleSignal(UUIDPrimaryKeyMixin, Base):
    """One normalized observation of struggle derived from one interaction."""

    __tablename__ = "struggle_signals"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    interaction_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("ai_interactions.id", ondelete="CASCADE"), nullable=False
    )
    track: Mapped[str] = mapped_column(String(100), nullable=False, default="general")
    topic: Mapped[str] = mapped_column(String(255), nullable=False, default="unknown")
    signal_type: Mapped[str] = mapped_column(String(30), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    meta: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "interaction_id", "signal_type", name="uq_struggle_signals_interaction_type"
        ),
        Index("ix_struggle_signals_user_created", "user_id", "created_at"),
        Index("ix_struggle_signals_topic_created", "topic", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<StruggleSignal(type={self.signal_type}, value={self.value:.2f})>"


class StruggleProfile(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Current aggregated struggle state of one user."""

    __tablename__ = "struggle_profiles"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    track: Mapped[str] = mapped_column(String(100), nullable=False, default="general")
    cohort_id: Mapped[str] = mapped_column(String(100), nullable=False, default="default")
    struggle_score: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    trend: Mapped[str] = mapped_column(String(20), nullable=False, default="stable")
    support_level: Mapped[str] = mapped_column(String(20), nullable=False, default="low")
    contributing_signals: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, nullable=False, default=list
    )
    last_reason_summary: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    last_evaluated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        Index("ix_struggle_profiles_support_level", "support_level"),
        Index("ix_struggle_profiles_cohort", "cohort_id", "support_level"),
    )

    def __repr__(self) -> str:
        return (
            f"<StruggleProfile(user_id={self.user_id}, score={self.struggle_score}, "
            f"trend={self.trend})>"
        )
