# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base utilities for Dramatiq tasks.

Thread-Local Event Loop Management:
    Dramatiq workers use multiple threads (--threads N). SQLAlchemy async
    engines and asyncpg connections are bound to the event loop that
    created them, so each worker thread keeps:
    1. One persistent event loop, reused for every task in that thread
    2. One engine and sessionmaker created on that loop

    When a thread's loop is replaced, its engine is dropped with it.
"""

import asyncio
import logging
import threading
from typing import Any, Coroutine, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.config import get_settings
from src.infrastructure.database.connection import build_engine

logger = logging.getLogger(__name__)

T = TypeVar("T")

_thread_local = threading.local()


def _get_thread_event_loop() -> asyncio.AbstractEventLoop:
    """Get or create a persistent event loop for the current thread.

    Returns:
        Event loop for current thread.
    """
    loop = getattr(_thread_local, "event_loop", None)

    if loop is None or loop.is_closed():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        _thread_local.event_loop = loop

        # Engines from a previous loop cannot be reused
        _thread_local.sessionmaker = None

        logger.debug(
            "Created new event loop for thread %s",
            threading.current_thread().name,
        )

    return loop


def get_worker_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the sessionmaker bound to the current worker thread's loop.

    Must be called from inside ``run_async``.

    Returns:
        Sessionmaker with ``expire_on_commit=False``.
    """
    sessionmaker = getattr(_thread_local, "sessionmaker", None)
    if sessionmaker is None:
        db = get_settings().database
        engine = build_engine(
            db.url,
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            echo=db.echo,
        )
        sessionmaker = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        _thread_local.sessionmaker = sessionmaker
    return sessionmaker


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run async coroutine in sync Dramatiq worker context.

    Args:
        coro: Coroutine to run.

    Returns:
        Result of coroutine.

    Example:
        @dramatiq.actor
        def my_task(interaction_id: str):
            async def _process():
                async with get_worker_sessionmaker()() as session:
                    ...
            return run_async(_process())
    """
    loop = _get_thread_event_loop()
    return loop.run_until_complete(coro)
