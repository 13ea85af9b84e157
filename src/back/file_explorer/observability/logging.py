"""structlog setup for file-explorer.

Every event carries the service name and, inside a request, the
``X-Request-ID`` of that request. Output is one JSON object per line
unless ``LOG_FORMAT=console``.

Usage::

    from file_explorer.observability.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    logger.info("list_directory", path="/file-explorer:sys/home")
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar

import structlog

SERVICE_NAME = "file-explorer"

# Set by RequestIdMiddleware for the duration of a request.
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

_configured = False


def _add_request_context(logger, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    rid = request_id_ctx.get()
    if rid is not None:
        event_dict["request_id"] = rid
    return event_dict


def configure_logging(*, level: str | None = None, json_output: bool | None = None) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Idempotent; only the first call takes effect.

    Args:
        level: Log level name. Defaults to ``LOG_LEVEL`` or INFO.
        json_output: Emit JSON lines. Defaults to ``LOG_FORMAT != "console"``.
    """
    global _configured
    if _configured:
        return
    _configured = True

    level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    if json_output is None:
        json_output = os.environ.get("LOG_FORMAT", "json") != "console"

    pre_chain = [
        structlog.contextvars.merge_contextvars,
        _add_request_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level, logging.INFO))

    # uvicorn's own access log duplicates request_completed.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
