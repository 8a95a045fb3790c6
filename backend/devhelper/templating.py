"""
DevHelper Backend — View Rendering
====================================

Jinja2 templates live in devhelper/templates. Autoescaping is on for .html
files, so snippet content and generated text are rendered as text, never as
markup.
"""

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette import status

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, name: str, status_code: int = 200, **context: Any) -> HTMLResponse:
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def redirect(url: str) -> RedirectResponse:
    """303 See Other, so a redirect after a POST is followed with a GET."""
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)
