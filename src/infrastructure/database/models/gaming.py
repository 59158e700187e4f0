# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gamification ledger models."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, JSONType, UUIDPrimaryKeyMixin
from src.utils.datetime import utc_now


class PointTransaction(UUIDPrimaryKeyMixin, Base):
    """One XP award. The idempotency key makes repeated awards no-ops."""

    __tablename__ = "point_transactions"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    action_type: Mapped[str] = mapped_column(String(30), nullable=False)
    points_awarded: Mapped[int] = mapped_column(Integer, nullable=False)
    previous_xp: Mapped[int] = mapped_column(Integer, nullable=False)
    new_xp: Mapped[int] = mapped_column(Integer, nullable=False)
    previous_level: Mapped[int] = mapped_column(Integer, nullable=False)
    new_level: Mapped[int] = mapped_column(Integer, nullable=False)
    meta: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    idempotency_key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    __table_args__ = (Index("ix_point_transactions_user_created", "user_id", "created_at"),)


class Endorsement(UUIDPrimaryKeyMixin, Base):
    """A tutor vouching for another tutor."""

    __tablename__ = "endorsements"

    endorser_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    endorsee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("endorser_id", "endorsee_id", name="uq_endorsements_pair"),
        Index("ix_endorsements_endorsee", "endorsee_id"),
    )
