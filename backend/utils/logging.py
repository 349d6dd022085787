"""
Logging utilities for the PG Community backend.

Provides standardized logger configuration following privacy rules.

CRITICAL PRIVACY RULES:
- NEVER log auth cookies, JWTs, or secrets
- NEVER log resident phone numbers or email addresses
- NEVER log full request bodies

Acceptable logging:
- High-level events (e.g., "Technician created", "Logout requested")
- Non-sensitive identifiers (technician id, PG community id, user id)
- Validation failures by field path (never the rejected value)

Two output modes, chosen by environment:
- development: human-readable single-line records
- anything else: one JSON object per record (structured)
"""

import json
import logging
from typing import Optional

from backend.config import settings

PRETTY_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PRETTY_DATEFMT = "%d-%m-%Y %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["err"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _resolve_level(level: Optional[str]) -> int:
    name = (level or "info").upper()
    resolved = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return resolved if isinstance(resolved, int) else logging.INFO


def build_handler(environment: str) -> logging.Handler:
    """Create a stream handler with the formatter for the given environment."""
    handler = logging.StreamHandler()
    if environment.lower() == "development":
        handler.setFormatter(logging.Formatter(fmt=PRETTY_FORMAT, datefmt=PRETTY_DATEFMT))
    else:
        handler.setFormatter(JsonFormatter())
    return handler


def configure_logging(
    level: Optional[str] = None,
    enabled: Optional[bool] = None,
    environment: Optional[str] = None,
) -> None:
    """
    Configure the root logger once at application start.

    Args:
        level: Minimum severity name (debug, info, warning, error). Defaults to LOG_LEVEL.
        enabled: Whether records are emitted at all. Defaults to LOG_ENABLED,
                 and is forced off under the test environment.
        environment: Selects pretty vs structured output. Defaults to ENVIRONMENT.
    """
    environment = environment or settings.ENVIRONMENT
    if enabled is None:
        enabled = settings.LOG_ENABLED and not settings.is_test()

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if not enabled:
        root.addHandler(logging.NullHandler())
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    root.setLevel(_resolve_level(level or settings.LOG_LEVEL))
    root.addHandler(build_handler(environment))


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger for the specified module.

    Handlers live on the root logger (see configure_logging), so module
    loggers only carry an optional level override.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level override

    Returns:
        Logger instance

    Usage:
        >>> from backend.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level)

    return logger
