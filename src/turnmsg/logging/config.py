# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging configuration for turnmsg.

Logs go to stderr, stdout carries parse results. The level comes from the
command line when given, otherwise from TURNMSG_LOG_LEVEL (default: WARNING).

Rule-file diagnostics are bound with ``source`` and ``line``; they are
rendered as a single ``location=file:line`` field so the offending line can
be found from the console output.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.typing import EventDict

    from turnmsg.settings import Settings

__all__ = ["LOG_LEVELS", "configure_logging", "get_logger", "render_rule_location"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def render_rule_location(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
    """Fold ``source`` and ``line`` of a rule-file diagnostic into ``location``."""
    if "source" not in event_dict:
        return event_dict
    source = event_dict.pop("source")
    line = event_dict.pop("line", None)
    event_dict["location"] = f"{source}:{line}" if line is not None else str(source)
    return event_dict


def configure_logging(level: str | None = None, *, settings: Settings | None = None) -> None:
    """Configure structlog for turnmsg.

    Args:
        level: Level name overriding the configured one (e.g. from --log-level)
        settings: Settings instance (will be created if None and no level is given)
    """
    if level is None:
        if settings is None:
            from turnmsg.settings import Settings

            settings = Settings()
        level = settings.log_level

    log_level = getattr(logging, level.upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            render_rule_location,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)
