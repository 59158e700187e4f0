# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Pure struggle components (config, records)
- Services running against an in-memory SQLite database
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

os.environ.setdefault("DRAMATIQ_TEST_MODE", "true")

from src.core.struggle.config import StruggleConfig  # noqa: E402
from src.core.struggle.types import InteractionRecord  # noqa: E402
from src.infrastructure.database.connection import build_engine  # noqa: E402
from src.infrastructure.database.models import (  # noqa: E402
    AIInteraction,
    Base,
    StruggleProfile,
    User,
    new_uuid,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Struggle Fixtures
# =============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time."""
    return datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def struggle_config() -> StruggleConfig:
    """Default struggle tuning tables."""
    return StruggleConfig()


@pytest.fixture
def make_record(now: datetime) -> Callable[..., InteractionRecord]:
    """Factory for InteractionRecord instances."""

    def _make(**overrides: Any) -> InteractionRecord:
        data: dict[str, Any] = {
            "id": new_uuid(),
            "user_id": "learner-1",
            "role": "learner",
            "track": "python",
            "topic": "loops",
            "input_text": "how do for loops work",
            "status": "success",
            "latency_ms": 4000,
            "created_at": now,
        }
        data.update(overrides)
        return InteractionRecord(**data)

    return _make


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema."""
    test_engine = build_engine(TEST_DATABASE_URL)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessionmaker bound to the test engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for one test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def create_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory persisting a User."""

    async def _create(**overrides: Any) -> User:
        user_id = overrides.pop("id", new_uuid())
        data: dict[str, Any] = {
            "id": user_id,
            "email": f"{user_id}@example.com",
            "first_name": "Test",
            "last_name": "User",
            "role": "learner",
            "track": "python",
            "cohort_id": "cohort-a",
            "badges": [],
        }
        data.update(overrides)
        user = User(**data)
        db_session.add(user)
        await db_session.commit()
        return user

    return _create


@pytest.fixture
def create_interaction(
    db_session: AsyncSession,
    now: datetime,
) -> Callable[..., Awaitable[InteractionRecord]]:
    """Factory persisting an AIInteraction and returning its record."""

    async def _create(user_id: str, **overrides: Any) -> InteractionRecord:
        data: dict[str, Any] = {
            "id": new_uuid(),
            "user_id": user_id,
            "role": "learner",
            "track": "python",
            "topic": "loops",
            "input_text": "how do for loops work",
            "status": "success",
            "latency_ms": 4000.0,
            "created_at": now,
        }
        data.update(overrides)
        row = AIInteraction(**data)
        db_session.add(row)
        await db_session.commit()
        return InteractionRecord.model_validate(row)

    return _create


@pytest.fixture
def create_profile(
    db_session: AsyncSession,
    now: datetime,
) -> Callable[..., Awaitable[StruggleProfile]]:
    """Factory persisting a StruggleProfile directly."""

    async def _create(user_id: str, **overrides: Any) -> StruggleProfile:
        data: dict[str, Any] = {
            "id": new_uuid(),
            "user_id": user_id,
            "track": "python",
            "cohort_id": "cohort-a",
            "struggle_score": 1.0,
            "trend": "stable",
            "support_level": "low",
            "contributing_signals": [],
            "last_reason_summary": "",
            "last_evaluated_at": now - timedelta(hours=1),
        }
        data.update(overrides)
        profile = StruggleProfile(**data)
        db_session.add(profile)
        await db_session.commit()
        return profile

    return _create
