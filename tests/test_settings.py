"""Tests for settings and rule file lookup."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from turnmsg.paths import bundled_rules_file, default_rules_file
from turnmsg.settings import Settings


def test_env_var_override(tmp_path: Path) -> None:
    """Test that TURNMSG_RULES_FILE environment variable takes priority."""
    custom = tmp_path / "custom.ini"

    with patch.dict(os.environ, {"TURNMSG_RULES_FILE": str(custom)}):
        result = default_rules_file()

    assert result == custom


def test_user_rules_file_used_when_present(tmp_path: Path) -> None:
    """Test that a rule file in the user config directory beats the bundled one."""
    user_file = tmp_path / "msgparse.ini"
    user_file.write_text("; mine\n", encoding="utf-8")

    with patch.dict(os.environ, {}, clear=True):
        with patch("turnmsg.paths.user_rules_file", return_value=user_file):
            result = default_rules_file()

    assert result == user_file


def test_bundled_fallback(tmp_path: Path) -> None:
    """Test fallback to the bundled rule file."""
    with patch.dict(os.environ, {}, clear=True):
        with patch("turnmsg.paths.user_rules_file", return_value=tmp_path / "missing.ini"):
            result = default_rules_file()

    assert result == bundled_rules_file()
    assert result.is_file()


def test_settings_defaults(tmp_path: Path) -> None:
    """Test default settings values."""
    with patch.dict(os.environ, {}, clear=True):
        with patch("turnmsg.paths.user_rules_file", return_value=tmp_path / "missing.ini"):
            settings = Settings()

    assert settings.log_level == "WARNING"
    assert settings.keyword_mode == "abbrev"
    assert settings.rules_file == bundled_rules_file()


def test_settings_from_environment(tmp_path: Path) -> None:
    """Test that TURNMSG_ environment variables configure settings."""
    env = {
        "TURNMSG_LOG_LEVEL": "DEBUG",
        "TURNMSG_KEYWORD_MODE": "exact",
        "TURNMSG_RULES_FILE": str(tmp_path / "rules.ini"),
    }
    with patch.dict(os.environ, env, clear=True):
        settings = Settings()

    assert settings.log_level == "DEBUG"
    assert settings.keyword_mode == "exact"
    assert settings.rules_file == tmp_path / "rules.ini"
