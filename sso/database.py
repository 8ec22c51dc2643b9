"""
Database connection and session management.
Uses SQLAlchemy 2.0 async pattern.
"""

from pathlib import Path
from typing import Tuple

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool


def _ensure_sqlite_parent_dir(database_url: str) -> None:
    """Create the directory holding a file-based SQLite database."""
    database = make_url(database_url).database
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    Path(database).parent.mkdir(parents=True, exist_ok=True)


def create_engine_and_sessionmaker(
    database_url: str,
    debug: bool = False,
) -> Tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """
    Build an async engine and its session factory.

    SQLite file databases get NullPool (one connection per session), WAL
    pragmas and a parent directory created on demand; in-memory SQLite
    shares a single connection so every session sees the same schema.
    """
    is_sqlite = database_url.startswith("sqlite")

    if is_sqlite:
        in_memory = ":memory:" in database_url
        if not in_memory:
            _ensure_sqlite_parent_dir(database_url)
        engine = create_async_engine(
            database_url,
            echo=debug,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool if in_memory else NullPool,
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            """Enable WAL mode + foreign keys on every new SQLite connection."""
            cursor = dbapi_conn.cursor()
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()
    else:
        # PostgreSQL settings with connection pooling
        engine = create_async_engine(
            database_url,
            echo=debug,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
        )

    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return engine, session_maker


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    # Import Base from kernel models to ensure all models are registered
    from sso.kernel.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()
