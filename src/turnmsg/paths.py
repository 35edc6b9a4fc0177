# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Filesystem paths and rule-file lookup helpers."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir

ENV_RULES_FILE = "TURNMSG_RULES_FILE"
RULES_FILENAME = "msgparse.ini"


def bundled_rules_file() -> Path:
    """Get the rule file shipped with the package."""
    return Path(__file__).resolve().parent / "data" / RULES_FILENAME


def user_rules_file() -> Path:
    """Get the per-user rule file location (may not exist)."""
    return Path(user_config_dir("turnmsg", "turnmsg")) / RULES_FILENAME


def default_rules_file() -> Path:
    """Get the default rule definition file.

    Search order:
    1. TURNMSG_RULES_FILE environment variable
    2. msgparse.ini in the user config directory, if present
    3. The bundled msgparse.ini
    """
    env_file = os.getenv(ENV_RULES_FILE)
    if env_file:
        return Path(env_file)
    user_file = user_rules_file()
    if user_file.is_file():
        return user_file
    return bundled_rules_file()
