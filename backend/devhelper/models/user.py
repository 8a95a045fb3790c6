"""
DevHelper Backend — User Model
================================

What:  ORM model for the `users` table.
Who:   Written by AuthService.register(), read by AuthService.authenticate().

Lifecycle:
    Created on registration. Never updated or deleted by the application.

The UNIQUE constraint on username is what actually guarantees one account per
name; the lookup in AuthService only produces the friendlier error message.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from devhelper.database import Base

USERNAME_MAX_LENGTH = 150


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH),
        nullable=False,
        unique=True,
        comment="Login name, matched exactly (case-sensitive)",
    )

    # bcrypt hash produced by passlib; the plaintext is never stored
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
