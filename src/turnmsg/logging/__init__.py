# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging layer for turnmsg."""

from __future__ import annotations

from turnmsg.logging.config import LOG_LEVELS, configure_logging, get_logger, render_rule_location

__all__ = ["LOG_LEVELS", "configure_logging", "get_logger", "render_rule_location"]
