"""
DevHelper Backend — Middleware Package
========================================

Middleware Chain (outermost first):
    Request → [Request ID + access log] → [GZip] → [Session cookie] → Route

    The access middleware is outermost so the request id exists before any
    other code logs, and the access line sees the final status. The user id
    it logs is left on request.state by the session guard further in.
"""
