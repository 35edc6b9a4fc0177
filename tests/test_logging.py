# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for logging configuration."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from turnmsg.cli import cli
from turnmsg.logging import configure_logging, get_logger, render_rule_location


class TestRenderRuleLocation:
    """Rendering where a rule-file diagnostic comes from."""

    def test_source_and_line(self):
        event = {"event": "rule_file_unknown_keyword", "source": "msgparse.ini", "line": 12, "keyword": "oops"}
        assert render_rule_location(None, "warning", event) == {
            "event": "rule_file_unknown_keyword",
            "keyword": "oops",
            "location": "msgparse.ini:12",
        }

    def test_source_without_line(self):
        event = {"event": "rule_file_loaded", "source": "<rules>"}
        assert render_rule_location(None, "info", event)["location"] == "<rules>"

    def test_other_events_untouched(self):
        event = {"event": "rule_missing_id", "rule": "Mine Hit", "line": 3}
        assert render_rule_location(None, "error", dict(event)) == event


class TestConfigureLogging:
    """Level selection and output stream."""

    def test_diagnostics_on_stderr(self, capsys):
        configure_logging("warning")
        get_logger("test").warning("rule_file_unknown_keyword", source="rules.ini", line=7, keyword="oops")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "rule_file_unknown_keyword" in captured.err
        assert "rules.ini:7" in captured.err

    def test_level_override_filters(self, capsys):
        configure_logging("error")
        get_logger("test").warning("rule_file_unknown_keyword", source="rules.ini", line=7)

        assert capsys.readouterr().err == ""

    def test_level_override_beats_settings(self, capsys):
        """Test that an explicit level wins over TURNMSG_LOG_LEVEL."""
        with patch.dict(os.environ, {"TURNMSG_LOG_LEVEL": "ERROR"}):
            configure_logging("debug")
        get_logger("test").debug("rule_loaded")

        assert "rule_loaded" in capsys.readouterr().err

    def test_level_from_environment(self, capsys):
        """Test that TURNMSG_LOG_LEVEL is used without an override."""
        with patch.dict(os.environ, {"TURNMSG_LOG_LEVEL": "ERROR"}):
            configure_logging()
        get_logger("test").warning("rule_file_unknown_keyword")

        assert capsys.readouterr().err == ""


class TestCliLogLevel:
    """The --log-level option."""

    @pytest.fixture
    def rules(self, tmp_path):
        path = tmp_path / "rules.ini"
        path.write_text("marker,Odd\n  bogus = 1\n  check = x\n", encoding="utf-8")
        return path

    def test_warning_names_file_and_line(self, rules):
        result = CliRunner().invoke(cli, ["check", str(rules)])

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == f"1 rules loaded from {rules}"
        assert "rule_file_unknown_keyword" in result.stderr
        assert f"{rules}:2" in result.stderr

    def test_option_silences_warning(self, rules):
        result = CliRunner().invoke(cli, ["--log-level", "error", "check", str(rules)])

        assert result.exit_code == 0, result.output
        assert result.stderr == ""

    def test_unknown_level_rejected(self, rules):
        result = CliRunner().invoke(cli, ["--log-level", "loud", "check", str(rules)])
        assert result.exit_code == 2
