"""
DevHelper Backend — Services Layer
====================================

What:  Business logic between the routes (HTTP) and the models (persistence).

Service Inventory:
    - TextGenerator (abstract): contract for prompt → text providers
    - GeminiService: TextGenerator backed by Google Gemini
    - AuthService: registration, credential checks, password hashing
    - SessionService: server-side session rows behind the signed cookie
    - SnippetService: per-user snippet CRUD and tag filtering

Services receive the request's AsyncSession as an argument and hold no
per-request state, so one module-level instance of each is shared.
"""
