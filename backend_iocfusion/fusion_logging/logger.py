"""
Structured JSON logging: timestamp, event_type, ioc_type/ioc_value, verdict fields.

structlog with ISO timestamps, log level, and consistent keys for aggregation.
All modules use get_logger(__name__) and log a snake_case event name as the
first argument with keyword fields:

    logger.info("ioc_scored", verdict="malicious", final_score=100)

Uses only Python stdlib logging and structlog; no backend_iocfusion imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# JSON output for production (LOG_FORMAT=json); human-readable for local
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def configure_structlog() -> None:
    """Configure structlog once at import: JSON or console renderer, timestamp, level."""
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _event_type,
    ]
    if LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

    Output (JSON): {"event_type": "ioc_scored", "verdict": "...", "timestamp": "...",
    "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_ioc(ioc_type: str, ioc_value: str) -> structlog.BoundLogger:
    """Return a logger with the indicator bound to all subsequent log calls."""
    return get_logger("backend_iocfusion").bind(ioc_type=ioc_type, ioc_value=ioc_value)
