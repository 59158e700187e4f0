# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Care network service.

A care network records which tutors have previously helped one student.
The tutoring subsystem links tutors as they assist; the struggle pipeline
only reads the network to decide whom to alert.
"""

import logging
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import (
    CareNetworkTutor,
    TutorCareNetwork,
    User,
    new_uuid,
)
from src.infrastructure.database.upsert import dialect_insert
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class CareNetworkError(Exception):
    """Exception raised for care network operations."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class CareNetworkView(BaseModel):
    """A student's care network."""

    model_config = ConfigDict(from_attributes=True)

    student_id: str
    tutor_ids: list[str]
    last_interaction_at: datetime


class CareNetworkStudent(BaseModel):
    """A student in a tutor's care network."""

    student_id: str
    name: str
    level: int = 1
    last_interaction_at: datetime


class CareNetworkService:
    """Service for maintaining and reading care networks."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def link_tutor_to_student(
        self,
        student_id: str,
        tutor_id: str,
        now: datetime | None = None,
    ) -> CareNetworkView:
        """Add a tutor to a student's care network.

        Creates the network on first use and stamps the last interaction
        time. Linking an existing member is a no-op apart from the stamp.

        Args:
            student_id: Student identifier.
            tutor_id: Tutor identifier.
            now: Interaction time. Defaults to the current UTC time.

        Returns:
            The updated network.

        Raises:
            CareNetworkError: If the network cannot be updated.
        """
        now = now or utc_now()

        try:
            network_stmt = (
                dialect_insert(self._db, TutorCareNetwork)
                .values(id=new_uuid(), student_id=student_id, last_interaction_at=now, created_at=now)
                .on_conflict_do_update(
                    index_elements=["student_id"],
                    set_={"last_interaction_at": now},
                )
                .returning(TutorCareNetwork.id)
            )
            network_id = (await self._db.execute(network_stmt)).scalar_one()

            member_stmt = (
                dialect_insert(self._db, CareNetworkTutor)
                .values(network_id=network_id, tutor_id=tutor_id, added_at=now)
                .on_conflict_do_nothing(index_elements=["network_id", "tutor_id"])
            )
            await self._db.execute(member_stmt)
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise CareNetworkError("Failed to link tutor to student", e) from e

        logger.info("Linked tutor %s to care network of student %s", tutor_id, student_id)
        network = await self.get_network(student_id)
        if network is None:
            raise CareNetworkError("Care network missing after link")
        return network

    async def get_network(self, student_id: str) -> CareNetworkView | None:
        """Get a student's care network, or None if no tutor has helped yet."""
        result = await self._db.execute(
            select(TutorCareNetwork)
            .where(TutorCareNetwork.student_id == student_id)
            .execution_options(populate_existing=True)
        )
        network = result.scalar_one_or_none()
        if network is None:
            return None
        return CareNetworkView(
            student_id=network.student_id,
            tutor_ids=network.tutor_ids,
            last_interaction_at=ensure_utc(network.last_interaction_at),
        )

    async def get_tutor_ids(self, student_id: str) -> list[str]:
        """Get the tutors in a student's care network."""
        network = await self.get_network(student_id)
        return network.tutor_ids if network is not None else []

    async def list_students_for_tutor(self, tutor_id: str) -> list[CareNetworkStudent]:
        """List the students whose care network includes the tutor.

        Args:
            tutor_id: Tutor identifier.

        Returns:
            Students with display name, gamification level and last
            interaction time, most recent first.
        """
        result = await self._db.execute(
            select(TutorCareNetwork, User)
            .join(CareNetworkTutor, CareNetworkTutor.network_id == TutorCareNetwork.id)
            .outerjoin(User, User.id == TutorCareNetwork.student_id)
            .where(CareNetworkTutor.tutor_id == tutor_id)
            .order_by(TutorCareNetwork.last_interaction_at.desc())
        )

        return [
            CareNetworkStudent(
                student_id=network.student_id,
                name=student.full_name if student is not None else "A learner",
                level=student.level if student is not None else 1,
                last_interaction_at=ensure_utc(network.last_interaction_at),
            )
            for network, student in result.all()
        ]
