"""Observability infrastructure for file-explorer.

Provides structured logging, Prometheus metrics, and request-ID
correlation middleware for the explorer API.

Quick start::

    from file_explorer.observability import configure_logging, get_logger
    from file_explorer.observability.middleware import (
        MetricsMiddleware,
        RequestIdMiddleware,
        RequestLoggingMiddleware,
    )

    configure_logging()
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)
"""

from .logging import configure_logging, get_logger, request_id_ctx
from .metrics import metrics_text

__all__ = [
    "configure_logging",
    "get_logger",
    "metrics_text",
    "request_id_ctx",
]
