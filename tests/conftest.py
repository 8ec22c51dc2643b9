"""
Pytest fixtures for SSO tests.
"""

import logging
from datetime import timedelta
from typing import AsyncGenerator, Dict, Tuple

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from sso.database import close_db, create_engine_and_sessionmaker, init_db
from sso.kernel.identity import Authenticator, JWTIssuer, PasswordHasher
from sso.kernel.models import Application, User
from sso.kernel.storage import AppNotFoundError, UserExistsError, UserNotFoundError
from sso.kernel.storage.sqlalchemy_storage import SQLAlchemyStorage

# In-memory database shared by every session of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_APP_NAME = "test"
TEST_APP_SECRET = "test-secret"
TEST_TOKEN_TTL = timedelta(hours=1)

# Minimum bcrypt cost; keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


class FakeDirectory:
    """In-memory User Directory and Application Registry."""

    def __init__(self) -> None:
        self.users: Dict[str, User] = {}
        self.apps: Dict[int, Application] = {
            1: Application(id=1, name=TEST_APP_NAME, secret=TEST_APP_SECRET),
        }

    async def save_user(self, email: str, password_hash: bytes) -> int:
        if email in self.users:
            raise UserExistsError("user already exists")
        user = User(id=len(self.users) + 1, email=email, password_hash=password_hash)
        self.users[email] = user
        return user.id

    async def get_user(self, email: str) -> User:
        try:
            return self.users[email]
        except KeyError:
            raise UserNotFoundError("user not found") from None

    async def get_application(self, app_id: int) -> Application:
        try:
            return self.apps[app_id]
        except KeyError:
            raise AppNotFoundError("app not found") from None


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def auth_logger() -> logging.Logger:
    return logging.getLogger("sso.tests.auth")


@pytest.fixture
def fake_directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def fake_authenticator(
    fake_directory: FakeDirectory,
    hasher: PasswordHasher,
    auth_logger: logging.Logger,
) -> Authenticator:
    """Authenticator over in-memory collaborators."""
    return Authenticator(
        users=fake_directory,
        apps=fake_directory,
        token_ttl=TEST_TOKEN_TTL,
        logger=auth_logger,
        token_issuer=JWTIssuer(),
        hasher=hasher,
    )


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Tuple[AsyncEngine, async_sessionmaker[AsyncSession]], None]:
    """Create a test database with the schema in place."""
    engine, session_maker = create_engine_and_sessionmaker(TEST_DATABASE_URL)
    await init_db(engine)

    yield engine, session_maker

    await close_db(engine)


@pytest.fixture
def db_engine(database) -> AsyncEngine:
    return database[0]


@pytest.fixture
def session_maker(database) -> async_sessionmaker[AsyncSession]:
    """The session factory the service itself uses."""
    return database[1]


@pytest_asyncio.fixture
async def storage(session_maker: async_sessionmaker[AsyncSession]) -> SQLAlchemyStorage:
    return SQLAlchemyStorage(session_maker)


@pytest_asyncio.fixture
async def test_app_id(storage: SQLAlchemyStorage) -> int:
    """Register the test application."""
    return await storage.save_application(TEST_APP_NAME, TEST_APP_SECRET)


@pytest_asyncio.fixture
async def authenticator(
    storage: SQLAlchemyStorage,
    hasher: PasswordHasher,
    auth_logger: logging.Logger,
) -> Authenticator:
    """Authenticator over the SQL storage."""
    return Authenticator(
        users=storage,
        apps=storage,
        token_ttl=TEST_TOKEN_TTL,
        logger=auth_logger,
        hasher=hasher,
    )
