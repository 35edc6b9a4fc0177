# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from turnmsg.parser.keywords import KeywordMode
from turnmsg.paths import default_rules_file


class Settings(BaseSettings):
    log_level: str = "WARNING"
    rules_file: Path = Field(default_factory=default_rules_file)
    keyword_mode: KeywordMode = "abbrev"

    model_config = SettingsConfigDict(
        env_prefix="TURNMSG_",
        extra="ignore",
    )
