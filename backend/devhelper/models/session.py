"""
DevHelper Backend — Server-Side Session Model
===============================================

What:  ORM model for the `sessions` table.
How:   The browser holds only the row id, inside a cookie signed by
       Starlette's SessionMiddleware. The row maps that id to a user and a
       fixed expiry (creation + SESSION_MAX_AGE, never extended).
Who:   Written and read by SessionService.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from devhelper.database import Base


class UserSession(Base):
    __tablename__ = "sessions"

    # secrets.token_urlsafe(32) → 43 characters
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_sessions_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<UserSession(user_id={self.user_id}, expires_at='{self.expires_at}')>"
