# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import pytest
import structlog

from turnmsg.parser import NameKind, PlayerNames, PlayerNameTable, RuleCatalog

if TYPE_CHECKING:
    from pathlib import Path

_NAME_PREFIXES = {
    NameKind.SHORT_RACE: "s",
    NameKind.LONG_RACE: "f",
    NameKind.ADJECTIVE_RACE: "a",
    NameKind.HULL: "h",
}


class MockResolver:
    """Resolver where names are a kind prefix plus a number.

    Short race names are "s1".."s11", long names "f1".., adjectives "a1"..
    and hulls "h1".. ; placeholders expand to the short and adjective names.
    """

    def __init__(self, player: int = 0) -> None:
        self.player = player
        self.table = PlayerNameTable(
            players={nr: PlayerNames(short=f"s{nr}", long=f"f{nr}", adjective=f"a{nr}") for nr in range(1, 12)}
        )

    def get_player_number(self) -> int:
        return self.player

    def parse_name(self, kind: NameKind, name: str) -> int:
        found = re.fullmatch(_NAME_PREFIXES[kind] + r"([0-9]+)", name)
        return int(found.group(1)) if found else 0

    def expand_race_names(self, text: str) -> str:
        return self.table.expand_race_names(text)


class NullResolver:
    """Resolver that knows no names."""

    def get_player_number(self) -> int:
        return 0

    def parse_name(self, kind: NameKind, name: str) -> int:
        return 0

    def expand_race_names(self, text: str) -> str:
        return text


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def resolver() -> MockResolver:
    """Prefix-number resolver, viewing player 7."""
    return MockResolver(player=7)


@pytest.fixture
def null_resolver() -> NullResolver:
    """Resolver without any names."""
    return NullResolver()


@pytest.fixture
def name_table() -> PlayerNameTable:
    """Small name table for three races."""
    return PlayerNameTable(
        player=2,
        players={
            1: PlayerNames(short="The Feds", long="The Solar Federation", adjective="Fed"),
            2: PlayerNames(short="The Lizards", long="The Lizard Alliance", adjective="Lizard"),
            11: PlayerNames(short="The Colonies", long="The Missing Colonies of Man", adjective="Colonial"),
        },
        hulls={15: "SMALL DEEP SPACE FREIGHTER", 104: "MERLIN CLASS ALCHEMY SHIP"},
    )


@pytest.fixture
def load_catalog():
    """Build a catalog from rule file text."""

    def _load(text: str, **kwargs) -> RuleCatalog:
        catalog = RuleCatalog(**kwargs)
        catalog.load(text.splitlines())
        return catalog

    return _load


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    """Small rule file on disk."""
    path = tmp_path / "msgparse.ini"
    path.write_text(
        "; test rules\n"
        "explosion,Long Range Sensors\n"
        "  kind   = x\n"
        "  parse  = ($,$)\n"
        "  assign = X, Y\n"
        "  check  = The name of the ship\n"
        "  parse  = +1,$\n"
        "  assign = Name\n",
        encoding="utf-8",
    )
    return path
