# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gamification Service.

This service manages the XP ledger:
- Award XP for actions, idempotent on a per-award key
- Derive levels from XP and award level and milestone badges
- Record tutor-to-tutor endorsements
- Read user stats and the leaderboard

Every award is written to point_transactions first. The unique
idempotency key means a retried award is reported as a duplicate and
does not change the user's XP.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.struggle.types import UserRole
from src.domains.gaming.models import (
    COUNTER_BADGES,
    LEVEL_BADGES,
    LEVEL_THRESHOLDS,
    XP_REWARDS,
    ActionType,
)
from src.domains.gaming.schemas import (
    AwardResult,
    EndorsementRecord,
    EndorsementResult,
    LeaderboardEntry,
    NextLevelInfo,
    PointTransactionRecord,
    UserStats,
)
from src.infrastructure.database.models import Endorsement, PointTransaction, User, new_uuid
from src.infrastructure.database.upsert import dialect_insert
from src.utils.datetime import to_epoch_millis, utc_now

logger = logging.getLogger(__name__)


class GamificationError(Exception):
    """Base exception for gamification errors."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class UserNotFoundError(GamificationError):
    """Raised when a user does not exist."""

    pass


class InvalidXPAmountError(GamificationError):
    """Raised when an award would grant zero or negative XP."""

    pass


class EndorsementError(GamificationError):
    """Raised when an endorsement is not allowed."""

    pass


class EndorsementExistsError(EndorsementError):
    """Raised when the endorser already endorsed the endorsee."""

    pass


def calculate_level(xp: int) -> int:
    """Get the level for an XP total.

    Args:
        xp: Total XP.

    Returns:
        Highest level whose threshold is at or below ``xp``.
    """
    for level, min_xp in reversed(LEVEL_THRESHOLDS):
        if xp >= min_xp:
            return level
    return 1


def get_next_level_info(xp: int) -> NextLevelInfo | None:
    """Get progress towards the next level.

    Args:
        xp: Total XP.

    Returns:
        Progress info, or None at the maximum level.
    """
    current_level = calculate_level(xp)
    thresholds = dict(LEVEL_THRESHOLDS)
    next_xp = thresholds.get(current_level + 1)
    if next_xp is None:
        return None

    return NextLevelInfo(
        current_level=current_level,
        next_level=current_level + 1,
        current_xp=xp,
        next_level_xp=next_xp,
        xp_needed=next_xp - xp,
        progress=xp / next_xp,
    )


class GamificationService:
    """Service for XP, levels, badges and endorsements."""

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the gamification service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def _get_user(self, user_id: str) -> User:
        user = await self._db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return user

    async def _get_transaction(self, idempotency_key: str) -> PointTransaction:
        result = await self._db.execute(
            select(PointTransaction).where(PointTransaction.idempotency_key == idempotency_key)
        )
        return result.scalar_one()

    def _apply_badges(self, user: User, action: ActionType, old_level: int, new_level: int) -> list[str]:
        """Update counters and award level and milestone badges.

        Returns:
            Badges newly granted by this award.
        """
        badges = list(user.badges or [])
        granted: list[str] = []

        def grant(badge: str) -> None:
            if badge not in badges:
                badges.append(badge)
                granted.append(badge)

        if new_level > old_level:
            grant(f"Level {new_level}")
            special = LEVEL_BADGES.get(new_level)
            if special is not None:
                grant(special.value)

        counter = COUNTER_BADGES.get(action)
        if counter is not None:
            attribute, milestones = counter
            count = (getattr(user, attribute) or 0) + 1
            setattr(user, attribute, count)
            milestone = milestones.get(count)
            if milestone is not None:
                grant(milestone.value)

        user.badges = badges
        return granted

    async def award_xp(
        self,
        user_id: str,
        action: ActionType,
        amount: int | None = None,
        metadata: dict[str, Any] | None = None,
        idempotency_key: str | None = None,
        now: datetime | None = None,
    ) -> AwardResult:
        """Award XP to a user for an action.

        Args:
            user_id: User identifier.
            action: Action being rewarded.
            amount: XP to award. Defaults to the action's standard reward.
            metadata: Extra context stored on the transaction.
            idempotency_key: Key making the award idempotent. Defaults to
                ``{user_id}_{action}_{epoch ms}``.
            now: Award time. Defaults to the current UTC time.

        Returns:
            AwardResult. ``duplicate`` is set when the key was already used;
            the user's XP is then unchanged.

        Raises:
            UserNotFoundError: If the user does not exist.
            InvalidXPAmountError: If the amount is zero or negative.
            GamificationError: If the award cannot be persisted.
        """
        action = ActionType(action)
        now = now or utc_now()
        user = await self._get_user(user_id)

        xp_amount = amount if amount is not None else XP_REWARDS.get(action, 0)
        if xp_amount <= 0:
            raise InvalidXPAmountError(f"Invalid XP amount: {xp_amount}")

        key = idempotency_key or f"{user_id}_{action.value}_{to_epoch_millis(now)}"
        old_level = calculate_level(user.xp)
        new_xp = user.xp + xp_amount
        new_level = calculate_level(new_xp)

        try:
            values = {
                "id": new_uuid(),
                "user_id": user_id,
                "action_type": action.value,
                "points_awarded": xp_amount,
                "previous_xp": user.xp,
                "new_xp": new_xp,
                "previous_level": old_level,
                "new_level": new_level,
                "meta": dict(metadata or {}),
                "idempotency_key": key,
                "created_at": now,
            }
            stmt = (
                dialect_insert(self._db, PointTransaction)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["idempotency_key"])
                .returning(PointTransaction.id)
            )
            inserted = (await self._db.execute(stmt)).scalar_one_or_none()

            if inserted is None:
                existing = await self._get_transaction(key)
                await self._db.commit()
                logger.info("Duplicate XP award ignored: %s", key)
                return AwardResult(
                    duplicate=True,
                    transaction=PointTransactionRecord.model_validate(existing),
                    new_xp=user.xp,
                    old_level=old_level,
                    new_level=old_level,
                )

            user.xp = new_xp
            user.level = new_level
            new_badges = self._apply_badges(user, action, old_level, new_level)
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise GamificationError("Failed to award XP", e) from e

        logger.info("XP awarded: %d to user %s for %s", xp_amount, user_id, action.value)

        return AwardResult(
            transaction=PointTransactionRecord(**values),
            xp_awarded=xp_amount,
            new_xp=new_xp,
            old_level=old_level,
            new_level=new_level,
            level_up=new_level > old_level,
            new_badges=new_badges,
        )

    async def create_endorsement(
        self,
        endorser_id: str,
        endorsee_id: str,
        message: str = "",
        now: datetime | None = None,
    ) -> EndorsementResult:
        """Record one tutor endorsing another and reward the endorsee.

        Args:
            endorser_id: Tutor giving the endorsement.
            endorsee_id: Tutor receiving it.
            message: Optional note.
            now: Endorsement time. Defaults to the current UTC time.

        Returns:
            The endorsement and the endorsee's XP outcome.

        Raises:
            UserNotFoundError: If either user does not exist.
            EndorsementError: If either user is not a tutor, or on self-endorsement.
            EndorsementExistsError: If the pair already has an endorsement.
        """
        now = now or utc_now()
        endorser = await self._get_user(endorser_id)
        endorsee = await self._get_user(endorsee_id)

        if endorser.role != UserRole.TUTOR.value or endorsee.role != UserRole.TUTOR.value:
            raise EndorsementError("Only tutors can endorse other tutors")
        if endorser_id == endorsee_id:
            raise EndorsementError("Cannot endorse yourself")

        try:
            values = {
                "id": new_uuid(),
                "endorser_id": endorser_id,
                "endorsee_id": endorsee_id,
                "message": (message or "").strip(),
                "created_at": now,
            }
            stmt = (
                dialect_insert(self._db, Endorsement)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["endorser_id", "endorsee_id"])
                .returning(Endorsement.id)
            )
            if (await self._db.execute(stmt)).scalar_one_or_none() is None:
                await self._db.rollback()
                raise EndorsementExistsError("You have already endorsed this tutor")

            endorser.endorsements_given = (endorser.endorsements_given or 0) + 1
            await self._db.flush()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise GamificationError("Failed to create endorsement", e) from e

        award = await self.award_xp(
            endorsee_id,
            ActionType.ENDORSEMENT_RECEIVED,
            metadata={"endorser_id": endorser_id, "endorsement_id": values["id"]},
            idempotency_key=f"endorsement_{endorser_id}_{endorsee_id}",
            now=now,
        )

        logger.info("Endorsement created: %s -> %s", endorser_id, endorsee_id)

        return EndorsementResult(
            endorsement=EndorsementRecord(**values),
            xp_awarded=award.xp_awarded,
            level_up=award.level_up,
            new_badges=award.new_badges,
        )

    async def get_user_stats(self, user_id: str) -> UserStats:
        """Get a user's gamification state.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self._get_user(user_id)

        transactions = await self._db.execute(
            select(PointTransaction)
            .where(PointTransaction.user_id == user_id)
            .order_by(PointTransaction.created_at.desc())
            .limit(10)
        )
        endorsements = await self._db.execute(
            select(Endorsement)
            .where(Endorsement.endorsee_id == user_id)
            .order_by(Endorsement.created_at.desc())
            .limit(5)
        )

        return UserStats(
            user_id=user.id,
            current_xp=user.xp,
            level=user.level,
            badges=list(user.badges or []),
            total_answers=user.total_answers,
            total_sessions=user.total_sessions,
            total_posts=user.total_posts,
            endorsements_received=user.endorsements_received,
            next_level=get_next_level_info(user.xp),
            recent_transactions=[
                PointTransactionRecord.model_validate(t) for t in transactions.scalars()
            ],
            recent_endorsements=[
                EndorsementRecord.model_validate(e) for e in endorsements.scalars()
            ],
        )

    async def get_leaderboard(
        self,
        role: UserRole | None = None,
        limit: int = 50,
    ) -> list[LeaderboardEntry]:
        """Rank active users by XP, then level.

        Args:
            role: Optional role filter.
            limit: Maximum entries.

        Returns:
            Leaderboard rows, rank 1 first.
        """
        query = select(User).where(User.is_active.is_(True))
        if role is not None:
            query = query.where(User.role == UserRole(role).value)
        query = query.order_by(User.xp.desc(), User.level.desc()).limit(limit)

        result = await self._db.execute(query)
        return [
            LeaderboardEntry(
                rank=rank,
                user_id=user.id,
                name=user.full_name,
                role=user.role,
                xp=user.xp,
                level=user.level,
                badge_count=len(user.badges or []),
            )
            for rank, user in enumerate(result.scalars(), start=1)
        ]
