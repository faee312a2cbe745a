"""Structured logging configuration.

This module initializes structlog with a stable JSON line format so
ingest and reconciliation events can be filtered by event name.
Record-scoped fields bound through ``structlog.contextvars`` are
merged into every event.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

_CONFIGURED = False


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to a module name.

    Args:
        name: Logger name, usually __name__.

    Returns:
        Bound logger emitting JSON lines at INFO and above.
    """
    _configure_once()
    return structlog.get_logger(name)


def _configure_once() -> None:
    """Install the shared processor chain on first use."""
    global _CONFIGURED
    if _CONFIGURED:
        return
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        # Uncached loggers pick up the current sys.stdout on every event.
        cache_logger_on_first_use=False,
    )
    _CONFIGURED = True
