"""
DevHelper Backend — Session Guard Dependencies
================================================

What:  The single authorization guard applied to every protected route.
How:   `current_user_id` reads the session id out of the signed cookie and
       resolves it against the sessions table. `SessionGuard` turns "no user"
       into UnauthenticatedError:

           SessionGuard()                 → page views: 303 redirect to /login
           SessionGuard("add a snippet")  → form actions: 401 "You must be
                                            logged in to add a snippet"

A request whose cookie carries no session id is rejected before any store
query is made.
"""

import uuid
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from devhelper.database import get_db_session
from devhelper.exceptions import UnauthenticatedError
from devhelper.services.session_service import SESSION_KEY, session_service


async def current_user_id(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[uuid.UUID]:
    """User id of the live session attached to this request, or None."""
    session_id = request.session.get(SESSION_KEY)
    if not session_id:
        return None

    user_id = await session_service.resolve(db, session_id)
    if user_id is None:
        # Stale or expired id: drop it from the cookie too
        request.session.clear()
    else:
        # Read by the access log middleware
        request.state.user_id = user_id
    return user_id


class SessionGuard:
    """
    Dependency that requires an authenticated session.

    Args:
        action: Phrase completing "You must be logged in to ...". None marks a
                page view, which redirects to /login instead of returning 401.
    """

    def __init__(self, action: Optional[str] = None):
        self.action = action

    async def __call__(
        self, user_id: Optional[uuid.UUID] = Depends(current_user_id)
    ) -> uuid.UUID:
        if user_id is not None:
            return user_id
        if self.action is None:
            raise UnauthenticatedError(redirect=True)
        raise UnauthenticatedError(
            message=f"You must be logged in to {self.action}",
            redirect=False,
        )


require_page_user = SessionGuard()
