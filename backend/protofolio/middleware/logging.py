"""
Protofolio Backend — Catalog Access Log
=========================================

What:  One log line per catalog call, phrased in catalog terms.
How:   After the downstream app has routed the request, read the matched
       route template and path parameters from the ASGI scope, plus the
       result count that GET /records reports in X-Total-Count.

Example lines (logger "protofolio.access"):
    GET /records → 200 count=12 search=yes category=ui-kit 3.4ms [1f2e3d4c5b6a]
    PUT /records/{record_id} → 404 record=7c0d... 1.2ms [1f2e3d4c5b6a]

Record content (titles, descriptions, links) is never logged; only whether a
search term was present.
"""

import logging
import time
from typing import List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from protofolio.middleware.request_id import request_id_var

logger = logging.getLogger("protofolio.access")

# Probes and API docs are not catalog traffic
QUIET_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json")


def describe_call(request: Request, response: Response) -> List[str]:
    """Catalog-specific fields for the access line."""
    fields = []
    record_id = request.scope.get("path_params", {}).get("record_id")
    if record_id:
        fields.append(f"record={record_id}")

    total = response.headers.get("X-Total-Count")
    if total is not None:
        fields.append(f"count={total}")
        if request.query_params.get("search"):
            fields.append("search=yes")
        category = request.query_params.get("category")
        if category:
            fields.append(f"category={category}")
        sort_by = request.query_params.get("sortBy")
        if sort_by:
            fields.append(f"sortBy={sort_by}")
    return fields


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Server faults log at ERROR, rejected calls at WARNING, the rest at INFO."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        status = response.status_code
        level = logging.ERROR if status >= 500 else logging.WARNING if status >= 400 else logging.INFO
        fields = describe_call(request, response)
        logger.log(
            level,
            "%s %s → %d %s%.1fms [%s]",
            request.method,
            route_template(request),
            status,
            "".join(f"{field} " for field in fields),
            elapsed_ms,
            request_id_var.get(""),
        )
        return response
