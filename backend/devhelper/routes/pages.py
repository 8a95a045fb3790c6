"""Static pages: forms that need neither a session nor the store."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from devhelper.templating import render

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return render(request, "home.html")


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return render(request, "login.html")


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    return render(request, "register.html")


@router.get("/add-snippet", response_class=HTMLResponse)
async def add_snippet_page(request: Request):
    return render(request, "add.html")
