"""
User model for identity management.
"""

from sqlalchemy import Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from sso.kernel.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """User account model."""
    
    __tablename__ = "users"
    
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    # bcrypt output, kept as raw bytes
    password_hash: Mapped[bytes] = mapped_column(
        LargeBinary,
        nullable=False,
    )
    
    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
