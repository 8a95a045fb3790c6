"""
DevHelper Backend — Session Guard Tests
=========================================

What:  current_user_id / SessionGuard in isolation, with a stub request.
"""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from devhelper.dependencies import SessionGuard, current_user_id
from devhelper.exceptions import UnauthenticatedError


class TestCurrentUserId:

    @pytest.mark.asyncio
    async def test_no_session_id_makes_no_store_query(self, mock_db_session):
        request = SimpleNamespace(session={})
        assert await current_user_id(request, mock_db_session) is None
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_live_session_resolves(self, mock_db_session):
        user_id = uuid.uuid4()
        request = SimpleNamespace(session={"sid": "abc"}, state=SimpleNamespace())
        with patch("devhelper.dependencies.session_service") as mock_sessions:
            mock_sessions.resolve = AsyncMock(return_value=user_id)
            assert await current_user_id(request, mock_db_session) == user_id
        assert request.session == {"sid": "abc"}
        assert request.state.user_id == user_id

    @pytest.mark.asyncio
    async def test_stale_session_id_is_cleared(self, mock_db_session):
        request = SimpleNamespace(session={"sid": "gone"}, state=SimpleNamespace())
        with patch("devhelper.dependencies.session_service") as mock_sessions:
            mock_sessions.resolve = AsyncMock(return_value=None)
            assert await current_user_id(request, mock_db_session) is None
        assert request.session == {}
        assert not hasattr(request.state, "user_id")


class TestSessionGuard:

    @pytest.mark.asyncio
    async def test_passes_user_through(self):
        user_id = uuid.uuid4()
        assert await SessionGuard("add a snippet")(user_id) == user_id

    @pytest.mark.asyncio
    async def test_page_guard_redirects(self):
        with pytest.raises(UnauthenticatedError) as exc_info:
            await SessionGuard()(None)
        assert exc_info.value.redirect is True

    @pytest.mark.asyncio
    async def test_action_guard_names_the_action(self):
        with pytest.raises(UnauthenticatedError) as exc_info:
            await SessionGuard("delete a snippet")(None)
        assert exc_info.value.redirect is False
        assert exc_info.value.message == "You must be logged in to delete a snippet"
