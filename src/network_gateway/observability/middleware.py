"""
network_gateway.observability.middleware

HTTP middleware for request-scoped logging context.

Responsibilities:
- Generate/propagate request IDs.
- Bind request metadata (and the addressed network, if any) into structlog contextvars.
- Log one `request_finished` line per request with status and latency.
"""

from __future__ import annotations

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from network_gateway.observability.logging import get_logger

log = get_logger(__name__)

_NETWORK_PATH = re.compile(r"^/api/networks/(?P<network_id>[^/]+)")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        context = {"request_id": request_id, "path": request.url.path, "method": request.method}
        match = _NETWORK_PATH.match(request.url.path)
        if match:
            context["network_id"] = match.group("network_id")

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(**context)
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
            # Streaming bodies are still being produced here; latency covers time to headers.
            log.info(
                "request_finished",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response
