"""
DevHelper Backend — Request Context & Access Log Middleware
=============================================================

What:  Tags every request with a correlation id and writes one access line
       once the response is ready.
How:   The id comes from an incoming X-Request-ID header or is generated
       (8 hex chars). It is kept in `request_id_var` for the exception
       handlers and echoed in the X-Request-ID response header.

Access line:
    POST /add-snippet 303 12.4ms [a1b2c3d4] user=5f0c... -> /snippets

    user   id resolved by the session guard (request.state.user_id), "-" for
           anonymous requests and for pages that have no guard
    ->     Location of a redirect; shows where the guard sent the browser

Level follows the status (5xx ERROR, 4xx WARNING, else INFO). /health and
/static are not logged. Form bodies are never logged; they carry passwords.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("devhelper.access")

# Coroutine-local: concurrent requests on one thread each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_UNLOGGED_PREFIXES = ("/health", "/static/")


class AccessLogMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        start_time = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = rid

        path = request.url.path
        if path.startswith(_UNLOGGED_PREFIXES):
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        user_id = getattr(request.state, "user_id", None)
        location = response.headers.get("location")

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] user=%s%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            user_id or "-",
            f" -> {location}" if location else "",
            extra={
                "request_id": rid,
                "user_id": str(user_id) if user_id else None,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
