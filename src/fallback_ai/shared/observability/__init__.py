"""Structured logging setup for the fallback client."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_CREDENTIAL_KEYS = frozenset({"api_key", "authorization", "credential"})


def drop_credentials(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask credential-looking fields that slipped into a log call."""
    for key in list(event_dict):
        if key.lower() in _CREDENTIAL_KEYS:
            event_dict[key] = "[REDACTED]"
    return event_dict


def configure_logging(*, log_level: str = "INFO", json_logs: bool = False) -> None:
    """Route structlog through stdlib logging with console or JSON output."""
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        drop_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["configure_logging", "drop_credentials"]
