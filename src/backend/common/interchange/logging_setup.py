"""Structured logging for the interchange toolkit.

Library modules only call ``get_logger(__name__)``. Entrypoints (the export
script) call ``configure_logging(...)`` once at startup.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

import structlog

_CONFIGURED = False


def _level_from_name(name: str) -> int | None:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        parsed = _level_from_name(level)
        if parsed is not None:
            return parsed
    # Env override when ``level`` is None or unparseable
    env_val = os.getenv("INTERCHANGE_LOG_LEVEL")
    if env_val:
        parsed = _level_from_name(env_val)
        if parsed is not None:
            return parsed
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    json: bool = False,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure stdlib logging and structlog exactly once.

    ``level`` falls back to ``INTERCHANGE_LOG_LEVEL`` and then INFO. With
    ``json=True`` events are rendered as JSON lines, otherwise as key=value
    console output.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    numeric_level = _parse_level(level)
    logging.basicConfig(format="%(message)s", stream=stream, level=numeric_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
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
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str):
    return structlog.get_logger(name)
