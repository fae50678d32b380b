"""
Logging configuration for airday.

This module configures structlog for JSON logging across the application.
"""

import logging
import re
import sys
from typing import Any

import structlog

from .settings import settings

# Keys whose values are never written to a log line
_SECRET_KEYS = (
    "broadcast_key",
    "token",
    "credential",
    "authorization",
    "password",
    "secret",
    "api_key",
)

# Patterns to redact in string values
_SECRET_PATTERNS = (
    (re.compile(r"(token|key)=[^&\s]+"), r"\1=***"),  # Query parameters
    (re.compile(r"Bearer\s+\S+"), "Bearer ***"),
)


def _redact_value(value: Any) -> Any:
    if isinstance(value, str):
        for pattern, replacement in _SECRET_PATTERNS:
            value = pattern.sub(replacement, value)
        return value
    if isinstance(value, dict):
        return {k: _redact_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_redact_value(item) for item in value]
    return value


def redact_secrets(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Redact sensitive information from log events."""
    for key in list(event_dict.keys()):
        if any(secret in key.lower() for secret in _SECRET_KEYS):
            event_dict[key] = "***REDACTED***"
        else:
            event_dict[key] = _redact_value(event_dict[key])
    return event_dict


def add_service_context(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Stamp every event with the service name and environment."""
    event_dict.setdefault("service", "airday")
    event_dict.setdefault("env", settings.env)
    return event_dict


def configure_logging(level: str | None = None) -> None:
    """Configure structlog for JSON logging."""
    log_level = (level or settings.log_level).upper()
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            redact_secrets,  # Redact secrets before rendering
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
