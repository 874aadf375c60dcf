"""Structured logging for articlex (structlog).

Modules log through ``structlog.get_logger(component="extraction.<name>")``
with snake_case event names; this module only decides how events render and
where they go.
"""

from __future__ import annotations

import sys
from typing import TextIO

import structlog

from articlex.config import settings

_LEVELS = {"debug": 10, "info": 20, "warning": 30, "warn": 30, "error": 40, "critical": 50}


def setup_logging(
    level: str | None = None,
    fmt: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for articlex.

    Args:
        level:   Overrides ``settings.log_level`` (the CLI's ``--verbose``).
        fmt:     ``"console"`` for dev, ``"json"`` for production; overrides
                 ``settings.log_format``.
        stream:  Defaults to stderr so command output on stdout stays clean.
    """
    fmt = (fmt or settings.log_format).lower()
    threshold = _LEVELS.get((level or settings.log_level).lower(), 20)
    stream = stream or sys.stderr

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if fmt == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )
