"""
DevHelper Backend — Routes Package
====================================

Route Inventory:
    - pages.py:     GET  /, /login, /register, /add-snippet   (static forms)
    - auth.py:      POST /register, /login; GET /logout
    - snippets.py:  GET  /snippets, /edit-snippet/{id}
                    POST /add-snippet, /save-snippet, /edit-snippet/{id},
                         /delete-snippet/{id}
    - generate.py:  GET/POST /generate
    - health.py:    GET  /health

Routes stay thin: read the form, call a service, render or redirect.
Failures are raised and formatted by the handlers in main.py.
"""
