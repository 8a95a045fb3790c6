"""
DevHelper Backend — Application Package
=========================================

What: Server-rendered snippet manager: accounts, per-user code snippets with
      tags, and Gemini-backed snippet generation.
Who:  Imported by uvicorn (devhelper.main:app), Alembic, and pytest.

Layering:
    ┌─────────────────────────────────────┐
    │   Routes + Templates (HTTP / HTML)  │  ← forms in, pages/redirects out
    ├─────────────────────────────────────┤
    │   Session guard (dependencies.py)   │  ← Anonymous vs Authenticated
    ├─────────────────────────────────────┤
    │   Services (auth, sessions,         │  ← business rules, error mapping
    │   snippets, text generation)        │
    ├─────────────────────────────────────┤
    │   Models (SQLAlchemy) / Database    │  ← persistence, explicit lifecycle
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
