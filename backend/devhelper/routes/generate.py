"""
DevHelper Backend — Snippet Generation Routes
===============================================

GET  /generate   empty prompt form
POST /generate   forward the prompt to the text generator and show the result

The generated text is only rendered. The page carries a separate save form
that posts to /save-snippet; nothing is stored unless the user submits it.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from devhelper.dependencies import SessionGuard, require_page_user
from devhelper.schemas.forms import PromptForm
from devhelper.services.llm_base import TextGenerator
from devhelper.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Generate"])


def get_generator(request: Request) -> TextGenerator:
    return request.app.state.generator


@router.get("/generate", response_class=HTMLResponse)
async def generate_page(
    request: Request,
    user_id: uuid.UUID = Depends(require_page_user),
):
    return render(request, "generate.html", prompt="", snippet_content="", user_id=user_id)


@router.post("/generate", response_class=HTMLResponse)
async def generate(
    request: Request,
    prompt: str = Form(""),
    user_id: uuid.UUID = Depends(SessionGuard("generate a snippet")),
    generator: TextGenerator = Depends(get_generator),
):
    form = PromptForm.from_form(prompt)
    snippet_content = await generator.generate(form.prompt)
    return render(
        request,
        "generate.html",
        prompt=form.prompt,
        snippet_content=snippet_content,
        user_id=user_id,
    )
