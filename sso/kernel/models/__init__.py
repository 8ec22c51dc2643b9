"""
Kernel Data Models

SQLAlchemy models backing the User Directory and Application Registry.
"""

from sso.kernel.models.base import Base, TimestampMixin
from sso.kernel.models.user import User
from sso.kernel.models.application import Application

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Application",
]
