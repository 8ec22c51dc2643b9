"""
SQLAlchemy-backed User Directory and Application Registry.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sso.kernel.models import Application, User
from sso.kernel.storage import (
    AppNotFoundError,
    StorageError,
    UserExistsError,
    UserNotFoundError,
)


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively."""
    return email.strip().lower()


class SQLAlchemyStorage:
    """
    User Directory and Application Registry over one database.

    Each call opens its own session and transaction, so a single instance
    can serve concurrent requests.

    Usage:
        storage = SQLAlchemyStorage(session_maker)
        user_id = await storage.save_user("a@x.com", password_hash)
        user = await storage.get_user("a@x.com")
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def save_user(self, email: str, password_hash: bytes) -> int:
        """
        Insert a new user.

        Args:
            email: User's email address
            password_hash: Output of the hashing policy

        Returns:
            The new user's id

        Raises:
            UserExistsError: If the email is already registered
            StorageError: On any other database failure
        """
        user = User(email=normalize_email(email), password_hash=password_hash)
        try:
            async with self.session_maker() as session:
                async with session.begin():
                    session.add(user)
                    await session.flush()
                    user_id = user.id
        except IntegrityError as e:
            raise UserExistsError("user already exists") from e
        except SQLAlchemyError as e:
            raise StorageError("failed to save user") from e

        return user_id

    async def get_user(self, email: str) -> User:
        """Get a user by email."""
        query = select(User).where(User.email == normalize_email(email))
        try:
            async with self.session_maker() as session:
                result = await session.execute(query)
                user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError("failed to get user") from e

        if user is None:
            raise UserNotFoundError("user not found")
        return user

    async def get_application(self, app_id: int) -> Application:
        """Get an application by id."""
        try:
            async with self.session_maker() as session:
                app = await session.get(Application, app_id)
        except SQLAlchemyError as e:
            raise StorageError("failed to get application") from e

        if app is None:
            raise AppNotFoundError("app not found")
        return app

    async def save_application(self, name: str, secret: str) -> int:
        """
        Register a client application.

        Raises:
            StorageError: If the name is taken or the insert fails
        """
        app = Application(name=name, secret=secret)
        try:
            async with self.session_maker() as session:
                async with session.begin():
                    session.add(app)
                    await session.flush()
                    app_id = app.id
        except IntegrityError as e:
            raise StorageError(f"application {name!r} already exists") from e
        except SQLAlchemyError as e:
            raise StorageError("failed to save application") from e

        return app_id
