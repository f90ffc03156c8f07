"""
AssetVault Backend — User SQLAlchemy Model
============================================

What:  ORM model representing the `users` table.
Why:   Holds the credentials used by /register, /login, and token verification.

The password is never stored in plaintext; `password_hash` holds a passlib
hash string (algorithm, salt, and digest in one value).
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from assetvault.database import Base


class User(Base):
    """A registered account. Immutable after registration."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    # Unique index doubles as the race-safe guard against duplicate usernames
    username: Mapped[str] = mapped_column(String(20), nullable=False, unique=True, index=True)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
