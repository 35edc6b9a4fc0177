# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Name resolution used while matching messages.

The parser never knows the game's race or hull names itself. It asks a
``NameResolver`` to turn names found in message text into numbers and to
expand race-name placeholders in rule literals. ``PlayerNameTable`` is a
simple table-backed implementation, loadable from JSON.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

from turnmsg.errors import NameTableError
from turnmsg.parser.lines import parse_player_character


class NameKind(Enum):
    """Kinds of names the resolver can look up."""

    SHORT_RACE = "short_race"
    LONG_RACE = "long_race"
    ADJECTIVE_RACE = "adjective_race"
    HULL = "hull"


class NameResolver(Protocol):
    """Collaborator interface consumed by the matching engine."""

    def get_player_number(self) -> int:
        ...

    def parse_name(self, kind: NameKind, name: str) -> int:
        """Return the id for a name, 0 if it is not known."""
        ...

    def expand_race_names(self, text: str) -> str:
        ...


class PlayerNames(BaseModel):
    short: str = ""
    long: str = ""
    adjective: str = ""


class PlayerNameTable(BaseModel):
    """Table-backed name resolver.

    Placeholders in rule literals use player characters: ``%3`` expands to the
    short name of player 3, ``%-b`` to the adjective of player 11 and ``%%``
    to a literal percent sign.
    """

    player: int = 0
    players: dict[int, PlayerNames] = Field(default_factory=dict)
    hulls: dict[int, str] = Field(default_factory=dict)

    def get_player_number(self) -> int:
        return self.player

    def parse_name(self, kind: NameKind, name: str) -> int:
        wanted = name.strip().casefold()
        if not wanted:
            return 0
        if kind is NameKind.HULL:
            candidates = self.hulls.items()
        else:
            attr = {
                NameKind.SHORT_RACE: "short",
                NameKind.LONG_RACE: "long",
                NameKind.ADJECTIVE_RACE: "adjective",
            }[kind]
            candidates = ((nr, getattr(names, attr)) for nr, names in self.players.items())
        for number, candidate in candidates:
            if candidate.strip().casefold() == wanted:
                return number
        return 0

    def expand_race_names(self, text: str) -> str:
        if "%" not in text:
            return text

        out: list[str] = []
        i = 0
        while i < len(text):
            ch = text[i]
            if ch != "%" or i + 1 >= len(text):
                out.append(ch)
                i += 1
                continue

            nxt = text[i + 1]
            if nxt == "%":
                out.append("%")
                i += 2
                continue

            adjective = nxt == "-"
            code_at = i + 2 if adjective else i + 1
            number = parse_player_character(text[code_at]) if code_at < len(text) else None
            names = self.players.get(number) if number is not None else None
            if names is None:
                out.append(ch)
                i += 1
                continue

            out.append(names.adjective if adjective else names.short)
            i = code_at + 1
        return "".join(out)

    @classmethod
    def from_json_file(cls, path: Path) -> PlayerNameTable:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return cls.model_validate(data)
        except OSError as e:
            raise NameTableError(f"Cannot read name table {path}: {e}") from e
        except (ValueError, ValidationError) as e:
            raise NameTableError(f"Malformed name table {path}: {e}") from e
