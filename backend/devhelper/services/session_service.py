"""
DevHelper Backend — Server-Side Session Service
=================================================

What:  Creates, resolves and destroys rows of the `sessions` table.
How:   The signed cookie (Starlette SessionMiddleware) carries only the row id
       under SESSION_KEY. The row holds the user id and a fixed expiry.

State machine:
    Anonymous ──login (create)──▶ Authenticated ──logout (destroy) | expiry──▶ Anonymous

Expiry is checked in SQL (expires_at > now) so the comparison happens in one
place for every backend. An expired row found by resolve() is deleted on the
spot; purge_expired() sweeps the rest at startup.
"""

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devhelper.config import settings
from devhelper.exceptions import DatabaseError, SessionError
from devhelper.models.session import UserSession

logger = logging.getLogger(__name__)

# Key inside the signed cookie payload
SESSION_KEY = "sid"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SessionService:
    def __init__(self, max_age: int = settings.session_max_age):
        self.max_age = max_age

    async def create(self, db: AsyncSession, user_id: uuid.UUID) -> str:
        """
        Start a session for `user_id` and return its id.

        Raises:
            DatabaseError: the row could not be written
        """
        now = _now()
        row = UserSession(
            id=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + timedelta(seconds=self.max_age),
        )
        try:
            db.add(row)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Failed to create session for user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Error in logging in",
                context={"error_type": type(e).__name__},
            )

        logger.info("Session started for user %s", user_id)
        return row.id

    async def resolve(self, db: AsyncSession, session_id: str) -> Optional[uuid.UUID]:
        """
        Return the user id of a live session, or None.

        Unknown and expired ids both return None; an expired row is removed.
        """
        try:
            result = await db.execute(
                select(UserSession.user_id).where(
                    UserSession.id == session_id,
                    UserSession.expires_at > _now(),
                )
            )
            user_id = result.scalar_one_or_none()
            if user_id is None:
                await self._drop(db, session_id)
            return user_id
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Failed to resolve session: %s", str(e))
            raise DatabaseError(
                message="Error in reading the session",
                context={"error_type": type(e).__name__},
            )

    async def destroy(self, db: AsyncSession, session_id: str) -> None:
        """
        End a session. Destroying an unknown id is a no-op.

        Raises:
            SessionError: the row could not be deleted
        """
        try:
            await self._drop(db, session_id)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Failed to destroy session: %s", str(e))
            raise SessionError(context={"error_type": type(e).__name__})
        logger.info("Session destroyed")

    async def purge_expired(self, db: AsyncSession) -> int:
        """Delete every expired row; returns the number removed."""
        result = await db.execute(
            delete(UserSession)
            .where(UserSession.expires_at <= _now())
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount or 0

    async def _drop(self, db: AsyncSession, session_id: str) -> None:
        result = await db.execute(delete(UserSession).where(UserSession.id == session_id))
        if result.rowcount:
            await db.commit()


session_service = SessionService()
