"""
DevHelper Backend — Authentication Service
============================================

What:  Registration and credential verification.
How:   Passwords are hashed with passlib's bcrypt scheme. Hashing is CPU-bound,
       so hash and verify run in Starlette's threadpool instead of on the
       event loop.

Registration race:
    The SELECT before INSERT gives the "User already exists" message in the
    common case. Two simultaneous registrations for one name both pass it;
    the UNIQUE constraint on users.username rejects the second INSERT, which
    is reported as the same ConflictError.
"""

import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from devhelper.config import settings
from devhelper.exceptions import ConflictError, DatabaseError, InvalidCredentialsError
from devhelper.models.user import User

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, bcrypt_rounds: int = settings.bcrypt_rounds):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=bcrypt_rounds,
        )

    async def hash_password(self, password: str) -> str:
        return await run_in_threadpool(self.pwd_context.hash, password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        return await run_in_threadpool(self.pwd_context.verify, password, password_hash)

    async def get_user_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def register(self, db: AsyncSession, username: str, password: str) -> User:
        """
        Create a new account.

        Raises:
            ConflictError: username already taken (lookup or unique constraint)
            DatabaseError: any other store failure
        """
        try:
            if await self.get_user_by_username(db, username) is not None:
                raise ConflictError(context={"username": username})

            user = User(username=username, password_hash=await self.hash_password(password))
            db.add(user)
            await db.commit()
        except ConflictError:
            raise
        except IntegrityError:
            await db.rollback()
            logger.info("Concurrent registration for username %r rejected by constraint", username)
            raise ConflictError(context={"username": username, "source": "unique_constraint"})
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error registering %r: %s", username, str(e))
            raise DatabaseError(
                message="Error in registering the user",
                context={"error_type": type(e).__name__},
            )

        logger.info("User registered: %s", user.id)
        return user

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> User:
        """
        Return the user whose credentials match.

        Raises:
            InvalidCredentialsError: unknown username or wrong password
            DatabaseError: the lookup failed
        """
        try:
            user = await self.get_user_by_username(db, username)
        except SQLAlchemyError as e:
            logger.error("Database error looking up %r: %s", username, str(e))
            raise DatabaseError(
                message="Error in logging in",
                context={"error_type": type(e).__name__},
            )

        if user is None:
            raise InvalidCredentialsError(context={"reason": "unknown_user"})
        if not await self.verify_password(password, user.password_hash):
            raise InvalidCredentialsError(context={"reason": "bad_password", "user_id": str(user.id)})

        return user


auth_service = AuthService()
