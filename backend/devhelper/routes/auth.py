"""
DevHelper Backend — Authentication Routes
===========================================

POST /register  → create account, redirect /login
POST /login     → verify, start session, redirect /snippets
GET  /logout    → destroy session, redirect /login

Only the session id goes into the signed cookie; the user id stays in the
sessions table.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from sqlalchemy.ext.asyncio import AsyncSession

from devhelper.database import get_db_session
from devhelper.exceptions import DatabaseError, SessionError
from devhelper.schemas.forms import CredentialsForm
from devhelper.services.auth_service import auth_service
from devhelper.services.session_service import SESSION_KEY, session_service
from devhelper.templating import redirect

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post("/register")
async def register(
    username: str = Form(""),
    password: str = Form(""),
    db: AsyncSession = Depends(get_db_session),
):
    credentials = CredentialsForm.from_form(username, password)
    await auth_service.register(db, credentials.username, credentials.password)
    return redirect("/login")


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    db: AsyncSession = Depends(get_db_session),
):
    # A blank field can never match; report it like any failed login
    username = username.strip()
    user = await auth_service.authenticate(db, username, password)

    previous = request.session.get(SESSION_KEY)
    if previous:
        try:
            await session_service.destroy(db, previous)
        except SessionError as e:
            raise DatabaseError(message="Error in logging in", context=e.context) from e
    request.session.clear()

    request.session[SESSION_KEY] = await session_service.create(db, user.id)
    return redirect("/snippets")


@router.get("/logout")
async def logout(request: Request, db: AsyncSession = Depends(get_db_session)):
    session_id = request.session.get(SESSION_KEY)
    if session_id:
        await session_service.destroy(db, session_id)
    request.session.clear()
    return redirect("/login")
