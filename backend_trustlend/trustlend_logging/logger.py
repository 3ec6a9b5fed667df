"""
TrustLend log output.

Every line is one JSON object: event_type, level, logger, timestamp and, while
an HTTP request is being served, its request_id. Collectors, the scoring engine
client and the API all log through get_logger(__name__) with a snake_case event
name and keyword context (source, asset, score, error).

LOG_FORMAT=console switches to structlog's human-readable renderer.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# json (default) or console
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _stamp_event(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Rename structlog's event key to event_type and add a UTC timestamp."""
    if "event" in event_dict:
        event_dict.setdefault("event_type", event_dict.pop("event"))
    event_dict.setdefault("message", str(event_dict.get("event_type", "")))
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _renderer() -> Any:
    if LOG_FORMAT == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def configure_structlog() -> None:
    """Install the TrustLend processor chain; runs once on first import."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            _stamp_event,
            _renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """Module logger; every line carries logger=<name>."""
    return structlog.get_logger(name).bind(logger=name)


def bind_request(request_id: str) -> None:
    """Bind request_id to every log line emitted in the current context."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)
