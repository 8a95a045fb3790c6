"""
DevHelper Backend — Snippet Routes
====================================

GET  /snippets?tag=x          list the caller's snippets, newest first
GET  /edit-snippet/{id}       edit form for one of the caller's snippets
POST /add-snippet             create (form on /add-snippet)
POST /save-snippet            create (save form on the generate page)
POST /edit-snippet/{id}       overwrite an owned snippet
POST /delete-snippet/{id}     delete an owned snippet

Both create paths are bound to the same handler. Page views redirect to
/login without a session; form actions answer 401.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from devhelper.database import get_db_session
from devhelper.dependencies import SessionGuard, require_page_user
from devhelper.schemas.forms import SnippetForm
from devhelper.services.snippet_service import snippet_service
from devhelper.templating import redirect, render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Snippets"])


@router.get("/snippets", response_class=HTMLResponse)
async def list_snippets(
    request: Request,
    tag: Optional[str] = Query(default=None, description="Only snippets carrying this tag"),
    user_id: uuid.UUID = Depends(require_page_user),
    db: AsyncSession = Depends(get_db_session),
):
    snippets = await snippet_service.list_snippets(db, user_id, tag=tag)
    return render(request, "snippets.html", snippets=snippets, tag=tag)


@router.post("/add-snippet")
@router.post("/save-snippet")
async def create_snippet(
    title: str = Form(""),
    language: str = Form(""),
    content: str = Form(""),
    tags: str = Form(""),
    user_id: uuid.UUID = Depends(SessionGuard("save a snippet")),
    db: AsyncSession = Depends(get_db_session),
):
    form = SnippetForm.from_form(title, language, content, tags)
    await snippet_service.create_snippet(db, form, user_id)
    return redirect("/snippets")


@router.get("/edit-snippet/{snippet_id}", response_class=HTMLResponse)
async def edit_snippet_page(
    request: Request,
    snippet_id: str,
    user_id: uuid.UUID = Depends(require_page_user),
    db: AsyncSession = Depends(get_db_session),
):
    snippet = await snippet_service.get_owned(db, snippet_id, user_id)
    return render(request, "edit.html", snippet=snippet)


@router.post("/edit-snippet/{snippet_id}")
async def edit_snippet(
    snippet_id: str,
    title: str = Form(""),
    language: str = Form(""),
    content: str = Form(""),
    tags: str = Form(""),
    user_id: uuid.UUID = Depends(SessionGuard("edit a snippet")),
    db: AsyncSession = Depends(get_db_session),
):
    form = SnippetForm.from_form(title, language, content, tags)
    await snippet_service.update_snippet(db, snippet_id, form, user_id)
    return redirect("/snippets")


@router.post("/delete-snippet/{snippet_id}")
async def delete_snippet(
    snippet_id: str,
    user_id: uuid.UUID = Depends(SessionGuard("delete a snippet")),
    db: AsyncSession = Depends(get_db_session),
):
    deleted = await snippet_service.delete_snippet(db, snippet_id, user_id)
    if not deleted:
        logger.info("Delete of unknown snippet %s treated as success", snippet_id)
    return redirect("/snippets")
