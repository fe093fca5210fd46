"""
SprintPilot Structured Logging

Configures structlog once per process and exposes helpers for binding
request and sprint context, so every event logged while handling a request
carries the same `request_id` / `sprint_id` keys.
"""

import logging
import sys
import uuid
from typing import Optional

import structlog

from sprintpilot.platform.config import settings


def configure_logging() -> None:
    """Configure structured logging for the application."""

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.APP_ENV == "production"
        else structlog.dev.ConsoleRenderer(colors=settings.DEBUG)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # SQLAlchemy and the repository log through stdlib logging
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def bind_request_context(request_id: Optional[str] = None, **values) -> str:
    """Start a fresh log context for one request and return its id."""
    request_id = request_id or uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **values)
    return request_id


def bind_sprint_context(sprint_id: str) -> None:
    """Tag subsequent events in this context with the sprint being changed."""
    structlog.contextvars.bind_contextvars(sprint_id=sprint_id)