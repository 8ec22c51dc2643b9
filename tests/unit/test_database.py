"""Unit tests for engine and session factory construction."""

from sqlalchemy.pool import NullPool, StaticPool

from sso.database import close_db, create_engine_and_sessionmaker, init_db


async def test_file_database_creates_parent_directory(tmp_path):
    db_path = tmp_path / "nested" / "dir" / "sso.db"

    engine, _ = create_engine_and_sessionmaker(f"sqlite+aiosqlite:///{db_path}")
    try:
        assert db_path.parent.is_dir()
        assert isinstance(engine.pool, NullPool)
        await init_db(engine)
    finally:
        await close_db(engine)

    assert db_path.exists()


async def test_in_memory_database_shares_one_connection(db_engine):
    assert isinstance(db_engine.pool, StaticPool)


async def test_session_factory_settings(session_maker):
    assert session_maker.kw["expire_on_commit"] is False
    assert session_maker.kw["autoflush"] is False
