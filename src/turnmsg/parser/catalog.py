# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Rule catalog: loads rule definitions and dispatches messages to them.

Rule files are line-oriented::

    ; comment
    ionstorm,Ion storm warning
      kind      = i
      check     = Centered at:
      parse     = +1,( $ , $ )
      assign    = X, Y
      values    = id
      assign    = Id

A line with a comma starts a new rule (``<kind>,<name>``), a line with an
equals sign adds to the current one. Keywords may be abbreviated down to
their upper-case part.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from turnmsg.errors import RuleFileError, RuleFileNotFoundError
from turnmsg.logging import get_logger
from turnmsg.parser.assembler import assemble
from turnmsg.parser.facts import Fact, ObjectKind
from turnmsg.parser.keywords import KeywordMode, keyword_match
from turnmsg.parser.lines import HeaderField, decode_header, split_message
from turnmsg.parser.matcher import match_rule
from turnmsg.parser.resolver import NameResolver
from turnmsg.parser.rule import PatternRule, RuleBuilder

logger = get_logger(__name__)

# Checked in this order; the first matching keyword wins.
KIND_KEYWORDS: tuple[tuple[str, ObjectKind], ...] = (
    ("Minefield", ObjectKind.MINEFIELD),
    ("Planet", ObjectKind.PLANET),
    ("Base", ObjectKind.STARBASE),
    ("PLAYerscore", ObjectKind.PLAYER_SCORE),
    ("Ship", ObjectKind.SHIP),
    ("Ionstorm", ObjectKind.ION_STORM),
    ("Configuration", ObjectKind.CONFIGURATION),
    ("Explosion", ObjectKind.EXPLOSION),
    ("Alliance", ObjectKind.ALLIANCE),
    ("Wormhole", ObjectKind.WORMHOLE),
    ("Ufo", ObjectKind.UFO),
    ("MArker", ObjectKind.MARKER),
    ("Line", ObjectKind.LINE),
    ("Rectangle", ObjectKind.RECTANGLE),
    ("CIrcle", ObjectKind.CIRCLE),
    ("EXTRAShip", ObjectKind.EXTRA_SHIP),
    ("EXTRAPlanet", ObjectKind.EXTRA_PLANET),
    ("EXTRAMinefield", ObjectKind.EXTRA_MINEFIELD),
)

_LINE_INSTRUCTIONS = (
    ("CHeck", "check"),
    ("FAil", "fail"),
    ("FInd", "find"),
    ("PArse", "parse"),
    ("ARray", "array"),
)

_MAX_BIG_ID = 0xFFFF


class RuleCatalog:
    """Ordered collection of pattern rules."""

    def __init__(self, keyword_mode: KeywordMode = "abbrev") -> None:
        self.keyword_mode = keyword_mode
        self._rules: list[PatternRule] = []

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def num_templates(self) -> int:
        return len(self._rules)

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return tuple(self._rules)

    def _keyword(self, keyword: str, text: str) -> bool:
        return keyword_match(keyword, text, self.keyword_mode)

    def _kind(self, text: str) -> ObjectKind | None:
        for keyword, kind in KIND_KEYWORDS:
            if self._keyword(keyword, text):
                return kind
        return None

    def load(self, lines: Iterable[str], *, source: str = "<rules>", log: Any = None) -> None:
        """Read rule definitions and append them to the catalog.

        Structural problems are logged and skipped; loading never fails.

        Args:
            lines: Rule file content, one definition line per item
            source: Name used in diagnostics
            log: structlog logger receiving diagnostics (module logger if None)
        """
        log = (log or logger).bind(source=source)
        current: RuleBuilder | None = None
        current_line = 0

        for line_number, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith(";"):
                continue

            delimiter = next((i for i, ch in enumerate(line) if ch in "=,"), None)
            if delimiter is None:
                log.error("rule_file_missing_delimiter", line=line_number)
                continue

            if line[delimiter] == ",":
                self._finish(current, current_line, log)
                kind = self._kind(line[:delimiter].strip())
                if kind is None:
                    log.error("rule_file_unknown_kind", line=line_number, kind=line[:delimiter].strip())
                    current = None
                else:
                    current = RuleBuilder(kind=kind, name=line[delimiter + 1 :].strip())
                    current_line = line_number
                continue

            if current is None:
                continue
            self._assign(
                current,
                line[:delimiter].strip(),
                line[delimiter + 1 :].strip(),
                log.bind(line=line_number),
            )

        self._finish(current, current_line, log)

    def _assign(self, rule: RuleBuilder, key: str, value: str, log: Any) -> None:
        if self._keyword("KInd", key):
            if value:
                rule.add_kind(value[0])
            return
        if self._keyword("SUbid", key):
            if value:
                rule.add_sub_id(value[0])
            return
        if self._keyword("BIgid", key):
            if value.isascii() and value.isdigit() and int(value) <= _MAX_BIG_ID:
                rule.add_big_id(int(value))
            else:
                log.error("rule_file_invalid_number", value=value)
            return
        for keyword, op in _LINE_INSTRUCTIONS:
            if self._keyword(keyword, key):
                rule.add_line_instruction(op, value)
                return
        if self._keyword("VAlues", key):
            rule.add_values(value)
        elif self._keyword("ASsign", key):
            rule.add_variables(value)
        elif self._keyword("COntinue", key):
            rule.continue_flag = keyword_match("Yes", value)
        else:
            log.warning("rule_file_unknown_keyword", keyword=key)

    def _finish(self, builder: RuleBuilder | None, line_number: int, log: Any) -> None:
        if builder is None:
            return
        rule = builder.build()
        if rule.num_variables != rule.num_wildcards:
            log.error(
                "rule_variable_count_mismatch",
                line=line_number,
                rule=rule.name,
                variables=rule.num_variables,
                values=rule.num_wildcards,
            )
        if rule.num_restrictions == 0:
            log.error("rule_matches_everything", line=line_number, rule=rule.name)
        self._rules.append(rule)

    def load_file(self, path: Path, *, log: Any = None) -> None:
        """Load rule definitions from a file.

        Raises:
            RuleFileNotFoundError: If the file does not exist
            RuleFileError: If the file cannot be read
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError as e:
            raise RuleFileNotFoundError(f"Rule file not found: {path}") from e
        except OSError as e:
            raise RuleFileError(f"Cannot read rule file {path}: {e}") from e
        self.load(text.splitlines(), source=str(path), log=log)

    def parse_message(
        self,
        text: str,
        resolver: NameResolver,
        turn: int,
        *,
        log: Any = None,
    ) -> list[Fact]:
        """Extract facts from one message.

        Rules are tried in load order. Evaluation stops after the first
        matching rule that does not have its continue flag set.

        Args:
            text: Message text
            resolver: Name lookup for race and hull names
            turn: Turn the message was received; messages marked as old
                describe the previous turn
            log: structlog logger receiving diagnostics (module logger if None)

        Returns:
            Facts in the order they were produced; empty if no rule matched
        """
        lines = split_message(text)
        fact_turn = turn - decode_header(lines, HeaderField.AGE)
        facts: list[Fact] = []
        for rule in self._rules:
            values = match_rule(rule, lines, resolver)
            if values is None:
                continue
            assemble(values, rule, resolver, fact_turn, facts, log=log)
            if not rule.continue_flag:
                break
        return facts
