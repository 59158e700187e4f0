# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dialect-aware INSERT ... ON CONFLICT construction.

PostgreSQL and SQLite both support ON CONFLICT with RETURNING, but each
needs its own dialect ``insert`` construct. Services call
``dialect_insert(session, Model)`` and chain ``on_conflict_do_nothing``
or ``on_conflict_do_update`` as usual.
"""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.connection import DatabaseError


def dialect_insert(session: AsyncSession, model: Any) -> Any:
    """Build an INSERT for ``model`` in the dialect the session is bound to.

    Args:
        session: Active async session.
        model: ORM model class or Table.

    Returns:
        A dialect-specific Insert supporting on_conflict clauses.

    Raises:
        DatabaseError: If the bound dialect has no ON CONFLICT support.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise DatabaseError(f"ON CONFLICT inserts are not supported for dialect '{dialect}'")
