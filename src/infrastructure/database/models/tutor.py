# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Care network and tutor alert models."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, UUIDPrimaryKeyMixin
from src.utils.datetime import utc_now


class TutorCareNetwork(UUIDPrimaryKeyMixin, Base):
    """Tutors who have previously helped one student."""

    __tablename__ = "tutor_care_networks"

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    last_interaction_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    tutors: Mapped[list["CareNetworkTutor"]] = relationship(
        back_populates="network",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CareNetworkTutor.added_at",
    )

    @property
    def tutor_ids(self) -> list[str]:
        """Tutor ids in the order they joined the network."""
        return [member.tutor_id for member in self.tutors]


class CareNetworkTutor(Base):
    """Membership of one tutor in one care network.

    The composite primary key keeps the tutor set free of duplicates.
    """

    __tablename__ = "care_network_tutors"

    network_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tutor_care_networks.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tutor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    network: Mapped[TutorCareNetwork] = relationship(back_populates="tutors")

    __table_args__ = (Index("ix_care_network_tutors_tutor", "tutor_id"),)


class TutorAlert(UUIDPrimaryKeyMixin, Base):
    """Notification directed at one tutor about one student."""

    __tablename__ = "tutor_alerts"

    tutor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    student_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    urgency: Mapped[str] = mapped_column(String(10), nullable=False, default="soft")
    topic: Mapped[str] = mapped_column(String(255), nullable=False)
    struggle_score: Mapped[float] = mapped_column(Float, nullable=False)
    reason_summary: Mapped[str] = mapped_column(String(255), nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_tutor_alerts_pair_created", "tutor_id", "student_id", "created_at"),
        Index("ix_tutor_alerts_tutor_read", "tutor_id", "is_read"),
    )

    def __repr__(self) -> str:
        return f"<TutorAlert(tutor_id={self.tutor_id}, urgency={self.urgency})>"


class TutorAlertCooldown(Base):
    """Last alert time per (tutor, student) pair.

    Claimed with a conditional upsert before an alert is written, so two
    concurrent dispatchers cannot both alert the same pair in one window.
    """

    __tablename__ = "tutor_alert_cooldowns"

    tutor_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    student_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    last_alert_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
