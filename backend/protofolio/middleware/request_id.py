"""
Protofolio Backend — Request ID Middleware
============================================

What:  Gives every request a correlation ID, echoed as X-Request-ID.
How:   A caller-supplied X-Request-ID is reused only if it looks like an ID
       (it ends up verbatim in log lines); otherwise a fresh one is minted.
       The ID lives in a ContextVar for the duration of the request, so the
       access log and the exception handlers in protofolio.main can read it
       without threading it through every call.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Letters, digits, dot, dash, underscore; no whitespace or control characters
_ACCEPTED_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def accepted_request_id(header_value: str | None) -> str:
    """Return the caller's ID if it is safe to log, else a new one."""
    if header_value and _ACCEPTED_ID.fullmatch(header_value):
        return header_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accepted_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
