"""
Dialect-specific INSERT constructs.

ON CONFLICT clauses live on the PostgreSQL and SQLite insert constructs,
so the one matching the session's bound engine is picked at runtime.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel.ext.asyncio.session import AsyncSession


def dialect_insert(session: AsyncSession, model):
    dialect_name = session.get_bind().dialect.name
    if dialect_name == "postgresql":
        return postgresql.insert(model)
    if dialect_name == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upsert is not supported on {dialect_name}")
