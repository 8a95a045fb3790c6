"""
DevHelper Backend — Authentication Service Tests
==================================================

What:  Password hashing, registration (including the unique-constraint race)
       and credential checks.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from devhelper.exceptions import ConflictError, DatabaseError, InvalidCredentialsError
from devhelper.services.auth_service import AuthService


class TestPasswordHashing:

    def setup_method(self):
        self.service = AuthService(bcrypt_rounds=4)

    @pytest.mark.asyncio
    async def test_hash_verifies(self):
        hashed = await self.service.hash_password("hunter2")
        assert hashed != "hunter2"
        assert await self.service.verify_password("hunter2", hashed) is True
        assert await self.service.verify_password("hunter3", hashed) is False

    @pytest.mark.asyncio
    async def test_hashes_are_salted(self):
        first = await self.service.hash_password("same")
        second = await self.service.hash_password("same")
        assert first != second


class TestRegisterAndAuthenticate:

    def setup_method(self):
        self.service = AuthService(bcrypt_rounds=4)

    @pytest.mark.asyncio
    async def test_register_then_authenticate(self, db_session):
        user = await self.service.register(db_session, "alice", "pw")
        found = await self.service.authenticate(db_session, "alice", "pw")
        assert found.id == user.id

    @pytest.mark.asyncio
    async def test_duplicate_register(self, db_session):
        await self.service.register(db_session, "alice", "pw")
        with pytest.raises(ConflictError) as exc_info:
            await self.service.register(db_session, "alice", "pw2")
        assert exc_info.value.message == "User already exists"

    @pytest.mark.asyncio
    async def test_bad_password(self, db_session):
        await self.service.register(db_session, "alice", "pw")
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await self.service.authenticate(db_session, "alice", "nope")
        assert exc_info.value.context["reason"] == "bad_password"

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await self.service.authenticate(db_session, "ghost", "pw")
        assert exc_info.value.message == "Invalid username or password"


class TestStoreFailures:

    def setup_method(self):
        self.service = AuthService(bcrypt_rounds=4)

    def _no_existing_user(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = result

    @pytest.mark.asyncio
    async def test_unique_constraint_race_is_conflict(self, mock_db_session):
        self._no_existing_user(mock_db_session)
        mock_db_session.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE"))

        with pytest.raises(ConflictError):
            await self.service.register(mock_db_session, "alice", "pw")
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_other_store_error_on_register(self, mock_db_session):
        self._no_existing_user(mock_db_session)
        mock_db_session.commit.side_effect = SQLAlchemyError("down")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.register(mock_db_session, "alice", "pw")
        assert exc_info.value.message == "Error in registering the user"

    @pytest.mark.asyncio
    async def test_store_error_on_login(self, mock_db_session):
        mock_db_session.execute.side_effect = SQLAlchemyError("down")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.authenticate(mock_db_session, "alice", "pw")
        assert exc_info.value.message == "Error in logging in"
