"""HTTP middleware: request ids, Prometheus metrics, access logging.

Add in reverse order of execution::

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)
"""

from __future__ import annotations

import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .logging import get_logger, request_id_ctx
from .metrics import (
    HTTP_REQUEST_DURATION_SECONDS,
    HTTP_REQUESTS_IN_FLIGHT,
    HTTP_REQUESTS_TOTAL,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"^[a-zA-Z0-9\-]{8,128}$")
_SHARED_PATH = re.compile(r"^/shared/.*")

# Not worth an access log line.
_QUIET_PATHS = frozenset({"/health", "/metrics"})


def route_label(path: str) -> str:
    """Metric/log label for ``path``; share ids collapse to one label."""
    return _SHARED_PATH.sub("/shared/{share_id}", path)


def accept_request_id(incoming: str | None) -> str:
    """Reuse a well-formed caller id, otherwise mint a UUID4."""
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Expose the request id to loggers and echo it on the response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_ctx.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers[REQUEST_ID_HEADER] = rid
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count and time every request by method and route label."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        labels = {"method": request.method, "path": route_label(request.url.path)}
        status = "500"
        with HTTP_REQUESTS_IN_FLIGHT.track_inprogress(), \
                HTTP_REQUEST_DURATION_SECONDS.labels(**labels).time():
            try:
                response = await call_next(request)
                status = str(response.status_code)
            finally:
                HTTP_REQUESTS_TOTAL.labels(status=status, **labels).inc()
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One ``request_completed`` event per request; 5xx logged as warnings."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path in _QUIET_PATHS:
            return response

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "request_completed",
            method=request.method,
            path=route_label(request.url.path),
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
