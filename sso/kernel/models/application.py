"""
Application model: a client that users log in to.

Tokens issued for an application are signed with its secret.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from sso.kernel.models.base import Base, TimestampMixin


class Application(Base, TimestampMixin):
    """Registered client application."""
    
    __tablename__ = "apps"
    
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    secret: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    def __repr__(self) -> str:
        return f"<Application {self.id} {self.name}>"
