# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial MentorBridge schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-06-02

Creates users, AI interactions, struggle signals and profiles, care
networks, tutor alerts with their cooldown leases, and the XP ledger.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, server_default: bool = True) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()") if server_default else None,
    )


def _user_fk(name: str, **kwargs) -> sa.Column:
    return sa.Column(
        name,
        sa.String(36),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        **kwargs,
    )


def upgrade() -> None:
    """Create MentorBridge tables."""
    # ==========================================================================
    # 1. users
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="learner"),
        sa.Column("track", sa.String(100), nullable=True),
        sa.Column("cohort_id", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("xp", sa.Integer, nullable=False, server_default="0"),
        sa.Column("level", sa.Integer, nullable=False, server_default="1"),
        sa.Column("badges", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("total_answers", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_sessions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_posts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("endorsements_received", sa.Integer, nullable=False, server_default="0"),
        sa.Column("endorsements_given", sa.Integer, nullable=False, server_default="0"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint("role IN ('learner', 'tutor', 'admin')", name="valid_user_role"),
    )
    op.create_index("ix_users_cohort_id", "users", ["cohort_id"])

    # ==========================================================================
    # 2. ai_interactions
    # ==========================================================================
    op.create_table(
        "ai_interactions",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("user_id"),
        sa.Column("role", sa.String(20), nullable=False, server_default="learner"),
        sa.Column("track", sa.String(100), nullable=True),
        sa.Column("topic", sa.String(255), nullable=True),
        sa.Column("input_text", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="success"),
        sa.Column("latency_ms", sa.Float, nullable=True),
        _timestamp("created_at"),
    )
    op.create_index(
        "ix_ai_interactions_user_created", "ai_interactions", ["user_id", "created_at"]
    )

    # ==========================================================================
    # 3. struggle_signals
    # ==========================================================================
    op.create_table(
        "struggle_signals",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("user_id"),
        sa.Column(
            "interaction_id",
            sa.String(36),
            sa.ForeignKey("ai_interactions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("track", sa.String(100), nullable=False, server_default="general"),
        sa.Column("topic", sa.String(255), nullable=False, server_default="unknown"),
        sa.Column("signal_type", sa.String(30), nullable=False),
        sa.Column("value", sa.Float, nullable=False),
        sa.Column("meta", postgresql.JSONB, nullable=False, server_default="{}"),
        _timestamp("created_at"),
        sa.UniqueConstraint(
            "interaction_id", "signal_type", name="uq_struggle_signals_interaction_type"
        ),
    )
    op.create_index(
        "ix_struggle_signals_user_created", "struggle_signals", ["user_id", "created_at"]
    )
    op.create_index(
        "ix_struggle_signals_topic_created", "struggle_signals", ["topic", "created_at"]
    )

    # ==========================================================================
    # 4. struggle_profiles
    # ==========================================================================
    op.create_table(
        "struggle_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("user_id", unique=True),
        sa.Column("track", sa.String(100), nullable=False, server_default="general"),
        sa.Column("cohort_id", sa.String(100), nullable=False, server_default="default"),
        sa.Column("struggle_score", sa.Float, nullable=False, server_default="1.0"),
        sa.Column("trend", sa.String(20), nullable=False, server_default="stable"),
        sa.Column("support_level", sa.String(20), nullable=False, server_default="low"),
        sa.Column(
            "contributing_signals", postgresql.JSONB, nullable=False, server_default="[]"
        ),
        sa.Column("last_reason_summary", sa.String(255), nullable=False, server_default=""),
        _timestamp("last_evaluated_at", server_default=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index(
        "ix_struggle_profiles_support_level", "struggle_profiles", ["support_level"]
    )
    op.create_index(
        "ix_struggle_profiles_cohort", "struggle_profiles", ["cohort_id", "support_level"]
    )

    # ==========================================================================
    # 5. tutor_care_networks / care_network_tutors
    # ==========================================================================
    op.create_table(
        "tutor_care_networks",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("student_id", unique=True),
        _timestamp("last_interaction_at", server_default=False),
        _timestamp("created_at"),
    )
    op.create_table(
        "care_network_tutors",
        sa.Column(
            "network_id",
            sa.String(36),
            sa.ForeignKey("tutor_care_networks.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "tutor_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        _timestamp("added_at", server_default=False),
    )
    op.create_index("ix_care_network_tutors_tutor", "care_network_tutors", ["tutor_id"])

    # ==========================================================================
    # 6. tutor_alerts / tutor_alert_cooldowns
    # ==========================================================================
    op.create_table(
        "tutor_alerts",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("tutor_id"),
        _user_fk("student_id"),
        sa.Column("urgency", sa.String(10), nullable=False, server_default="soft"),
        sa.Column("topic", sa.String(255), nullable=False),
        sa.Column("struggle_score", sa.Float, nullable=False),
        sa.Column("reason_summary", sa.String(255), nullable=False),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default="false"),
        _timestamp("created_at"),
    )
    op.create_index(
        "ix_tutor_alerts_pair_created",
        "tutor_alerts",
        ["tutor_id", "student_id", "created_at"],
    )
    op.create_index("ix_tutor_alerts_tutor_read", "tutor_alerts", ["tutor_id", "is_read"])

    op.create_table(
        "tutor_alert_cooldowns",
        sa.Column("tutor_id", sa.String(36), primary_key=True),
        sa.Column("student_id", sa.String(36), primary_key=True),
        _timestamp("last_alert_at", server_default=False),
    )

    # ==========================================================================
    # 7. point_transactions / endorsements
    # ==========================================================================
    op.create_table(
        "point_transactions",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("user_id"),
        sa.Column("action_type", sa.String(30), nullable=False),
        sa.Column("points_awarded", sa.Integer, nullable=False),
        sa.Column("previous_xp", sa.Integer, nullable=False),
        sa.Column("new_xp", sa.Integer, nullable=False),
        sa.Column("previous_level", sa.Integer, nullable=False),
        sa.Column("new_level", sa.Integer, nullable=False),
        sa.Column("meta", postgresql.JSONB, nullable=False, server_default="{}"),
        sa.Column("idempotency_key", sa.String(255), unique=True, nullable=False),
        _timestamp("created_at"),
    )
    op.create_index(
        "ix_point_transactions_user_created",
        "point_transactions",
        ["user_id", "created_at"],
    )

    op.create_table(
        "endorsements",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("endorser_id"),
        _user_fk("endorsee_id"),
        sa.Column("message", sa.Text, nullable=False, server_default=""),
        _timestamp("created_at"),
        sa.UniqueConstraint("endorser_id", "endorsee_id", name="uq_endorsements_pair"),
    )
    op.create_index("ix_endorsements_endorsee", "endorsements", ["endorsee_id"])


def downgrade() -> None:
    """Drop MentorBridge tables."""
    op.drop_table("endorsements")
    op.drop_table("point_transactions")
    op.drop_table("tutor_alert_cooldowns")
    op.drop_table("tutor_alerts")
    op.drop_table("care_network_tutors")
    op.drop_table("tutor_care_networks")
    op.drop_table("struggle_profiles")
    op.drop_table("struggle_signals")
    op.drop_table("ai_interactions")
    op.drop_table("users")
