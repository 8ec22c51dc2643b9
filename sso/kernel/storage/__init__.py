"""
Storage contracts shared by every backend.

The errors here let the identity layer tell what went wrong without knowing
whether users live in SQLite, Postgres or a test double.
"""

from typing import Protocol

from sso.kernel.models import Application, User


class StorageError(Exception):
    """Base class for storage failures."""


class UserExistsError(StorageError):
    """A user with this email is already registered."""


class UserNotFoundError(StorageError):
    """No user with this email."""


class AppNotFoundError(StorageError):
    """No application with this id."""


class UserDirectory(Protocol):
    """Stores and retrieves users keyed by email."""

    async def save_user(self, email: str, password_hash: bytes) -> int:
        """Persist a new user and return its id. Raises UserExistsError on conflict."""
        ...

    async def get_user(self, email: str) -> User:
        """Fetch a user by email. Raises UserNotFoundError."""
        ...


class ApplicationRegistry(Protocol):
    """Resolves application ids to application metadata."""

    async def get_application(self, app_id: int) -> Application:
        """Fetch an application by id. Raises AppNotFoundError."""
        ...


__all__ = [
    "AppNotFoundError",
    "ApplicationRegistry",
    "StorageError",
    "UserDirectory",
    "UserExistsError",
    "UserNotFoundError",
]
