"""
DevHelper Backend — Session Service Tests
===========================================

What:  Server-side session rows: create, resolve, expiry, destroy, purge.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from devhelper.exceptions import SessionError
from devhelper.models.session import UserSession
from devhelper.models.user import User
from devhelper.services.session_service import SessionService


async def _user(db_session) -> User:
    user = User(username="alice", password_hash="x")
    db_session.add(user)
    await db_session.commit()
    return user


class TestSessionLifecycle:

    @pytest.mark.asyncio
    async def test_create_and_resolve(self, db_session):
        service = SessionService(max_age=3600)
        user = await _user(db_session)

        sid = await service.create(db_session, user.id)
        assert len(sid) >= 32
        assert await service.resolve(db_session, sid) == user.id

    @pytest.mark.asyncio
    async def test_each_session_id_is_unique(self, db_session):
        service = SessionService(max_age=3600)
        user = await _user(db_session)
        assert await service.create(db_session, user.id) != await service.create(db_session, user.id)

    @pytest.mark.asyncio
    async def test_unknown_id_resolves_to_none(self, db_session):
        assert await SessionService().resolve(db_session, "no-such-session") is None

    @pytest.mark.asyncio
    async def test_destroy(self, db_session):
        service = SessionService(max_age=3600)
        user = await _user(db_session)
        sid = await service.create(db_session, user.id)

        await service.destroy(db_session, sid)
        assert await service.resolve(db_session, sid) is None

    @pytest.mark.asyncio
    async def test_expired_session_is_dropped_on_resolve(self, db_session):
        service = SessionService(max_age=-1)
        user = await _user(db_session)
        sid = await service.create(db_session, user.id)

        assert await service.resolve(db_session, sid) is None
        assert await db_session.get(UserSession, sid) is None

    @pytest.mark.asyncio
    async def test_purge_expired_keeps_live_sessions(self, db_session):
        user = await _user(db_session)
        await SessionService(max_age=-1).create(db_session, user.id)
        await SessionService(max_age=-1).create(db_session, user.id)
        live = await SessionService(max_age=3600).create(db_session, user.id)

        assert await SessionService().purge_expired(db_session) == 2
        remaining = (await db_session.execute(select(UserSession.id))).scalars().all()
        assert remaining == [live]


class TestSessionStoreFailures:

    @pytest.mark.asyncio
    async def test_destroy_failure_is_session_error(self, mock_db_session):
        mock_db_session.execute.side_effect = SQLAlchemyError("down")

        with pytest.raises(SessionError) as exc_info:
            await SessionService().destroy(mock_db_session, "sid")
        assert exc_info.value.message == "Error in logging out"
