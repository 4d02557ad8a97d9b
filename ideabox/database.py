"""
IdeaBox – Async SQLAlchemy engine, session, and declarative base.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from ideabox.config import settings


def configure_sqlite(engine: AsyncEngine) -> None:
    """Enable foreign keys and real SAVEPOINT support on SQLite connections.

    The sqlite3 driver defers BEGIN on its own, which breaks nested
    transactions; autocommit is switched off at the driver level and
    SQLAlchemy emits BEGIN itself.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine for ``url`` with the per-backend tweaks applied."""
    engine_kwargs = {"echo": settings.DEBUG, "future": True, **kwargs}

    # If using PostgreSQL behind PgBouncer (transaction mode), disable
    # prepared statement caching.
    if "postgresql" in url:
        engine_kwargs.setdefault("connect_args", {"statement_cache_size": 0})

    new_engine = create_async_engine(url, **engine_kwargs)
    if url.startswith("sqlite"):
        configure_sqlite(new_engine)
    return new_engine


# ── Engine ──
engine = build_engine(settings.DATABASE_URL)

# ── Session factory ──
async_session = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Declarative base ──
class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def dialect_insert(session: AsyncSession):
    """Return the ``insert`` construct with ON CONFLICT support for the bound backend."""
    if session.get_bind().dialect.name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        from sqlalchemy.dialects.sqlite import insert
    return insert


# ── Dependency for FastAPI routes ──
async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async database session, auto-closed on exit."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
