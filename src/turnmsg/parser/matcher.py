# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Rule matching engine.

Evaluates one ``PatternRule`` against the lines of a message. Matching keeps
an anchor line (the last line found by a scanning instruction) which
relative scopes are addressed from, and a buffer of captured strings that
is handed to output assembly on success.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from turnmsg.parser.coercion import coerce_value, parse_integer_value
from turnmsg.parser.lines import HeaderField, MessageLines, decode_header, fold_case, parse_player_character
from turnmsg.parser.rule import (
    NUM_PLAYERS,
    Array,
    Check,
    Fail,
    Find,
    MatchBigId,
    MatchKind,
    MatchSubId,
    Parse,
    PatternRule,
    Value,
)

if TYPE_CHECKING:
    from turnmsg.parser.resolver import NameResolver
    from turnmsg.parser.rule import Scope, VariableDecl


class _Match:
    """State of one rule evaluation."""

    def __init__(self, rule: PatternRule, lines: MessageLines, resolver: NameResolver) -> None:
        self.rule = rule
        self.lines = lines
        self.upper = [fold_case(line) for line in lines]
        self.resolver = resolver
        self.anchor = 0
        self.values: list[str] = []

    def needle(self, text: str) -> str:
        return fold_case(self.resolver.expand_race_names(text))

    def address(self, scope: Scope, offset: int) -> int:
        if scope == "relative":
            return self.anchor + offset
        return offset - 1

    def check(self, scope: Scope, offset: int, text: str) -> bool:
        """Look for a literal; a hit moves the anchor."""
        needle = self.needle(text)
        if scope == "any":
            for index, line in enumerate(self.upper):
                if needle in line:
                    self.anchor = index
                    return True
            return False

        index = self.address(scope, offset)
        if 0 <= index < len(self.lines) and needle in self.upper[index]:
            self.anchor = index
            return True
        return False

    def produce(self, item: str) -> str:
        match item.lower():
            case "player":
                return str(self.resolver.get_player_number())
            case "id":
                return str(decode_header(self.lines, HeaderField.ID))
            case "bigid":
                return str(decode_header(self.lines, HeaderField.BIG_ID))
            case "subid":
                number = parse_player_character(chr(decode_header(self.lines, HeaderField.SUB_ID)))
                return str(number or 0)
            case _:
                return item

    def parse(self, insn: Parse | Array) -> bool:
        needles = [self.needle(part) for part in insn.parts]
        decls = self.rule.variables[len(self.values) : len(self.values) + insn.wildcards]

        if insn.scope == "any":
            for index in range(len(self.lines)):
                row = match_line(self.lines[index], self.upper[index], needles, decls, self.resolver)
                if row is not None:
                    self.anchor = index
                    break
            else:
                return False
        else:
            self.anchor = self.address(insn.scope, insn.offset)
            if not 0 <= self.anchor < len(self.lines):
                return False
            row = match_line(self.lines[self.anchor], self.upper[self.anchor], needles, decls, self.resolver)
            if row is None:
                return False

        if isinstance(insn, Parse):
            self.values.extend(row)
            return True

        rows = [row]
        while len(rows) < NUM_PLAYERS and self.anchor + 1 < len(self.lines):
            nxt = self.anchor + 1
            row = match_line(self.lines[nxt], self.upper[nxt], needles, decls, self.resolver)
            if row is None:
                break
            rows.append(row)
            self.anchor = nxt
        self.values.extend(consolidate_array(rows, [decl.name for decl in decls]))
        return True


def _header_matches(rule: PatternRule, lines: MessageLines) -> bool:
    for insn in rule.instructions:
        match insn:
            case MatchKind(kind=kind):
                if decode_header(lines, HeaderField.KIND) != ord(kind):
                    return False
            case MatchSubId(sub_id=sub_id):
                if decode_header(lines, HeaderField.SUB_ID) != ord(sub_id):
                    return False
            case MatchBigId(big_id=big_id):
                if decode_header(lines, HeaderField.BIG_ID) != big_id:
                    return False
    return True


def match_rule(rule: PatternRule, lines: MessageLines, resolver: NameResolver) -> list[str] | None:
    """Match a rule against a message.

    Args:
        rule: Rule to evaluate
        lines: Message, split into lines
        resolver: Name lookup for race names and placeholders

    Returns:
        Captured values in variable order, or None if the rule does not match
    """
    if not _header_matches(rule, lines):
        return None

    state = _Match(rule, lines, resolver)
    for insn in rule.instructions:
        match insn:
            case MatchKind() | MatchSubId() | MatchBigId():
                pass
            case Value(items=items):
                state.values.extend(state.produce(item) for item in items)
            case Check(scope=scope, offset=offset, text=text):
                if not state.check(scope, offset, text):
                    return None
            case Fail(scope=scope, offset=offset, text=text):
                if state.check(scope, offset, text):
                    return None
            case Find(scope=scope, offset=offset, text=text):
                state.values.append("1" if state.check(scope, offset, text) else "0")
            case Parse() | Array():
                if not state.parse(insn):
                    return None
    return state.values


def match_line(
    line: str,
    upper: str,
    needles: list[str],
    decls: tuple[VariableDecl, ...],
    resolver: NameResolver,
) -> list[str] | None:
    """Match one line against a pattern's literal segments.

    The first literal is located by its first occurrence, an empty one
    matches at the start of the line. Captures are coerced using ``decls``;
    captures without a declaration are kept verbatim.
    """
    head = needles[0]
    start = upper.find(head) if head else 0
    if start < 0:
        return None

    captured = _match_part(line, upper, start + len(head), needles[1:])
    if captured is None:
        return None
    return [
        coerce_value(value, decls[i], resolver) if i < len(decls) else value
        for i, value in enumerate(captured)
    ]


def _match_part(line: str, upper: str, start: int, needles: list[str]) -> list[str] | None:
    # Each literal is tried at its last occurrence first, then at earlier
    # ones while the capture is blank or the rest of the line does not match.
    if not needles:
        return []
    if len(needles) == 1 and not needles[0]:
        return [line[start:]]

    needle = needles[0]
    pos = upper.rfind(needle)
    while pos > start:
        value = line[start:pos]
        if value.strip(" "):
            rest = _match_part(line, upper, pos + len(needle), needles[1:])
            if rest is not None:
                return [value, *rest]
        pos = upper.rfind(needle, 0, pos - 1 + len(needle))
    return None


def consolidate_array(rows: list[list[str]], names: list[str]) -> list[str]:
    """Fold array rows into one comma-separated list per column.

    A column whose variable is named INDEX gives the 1-based slot of each
    row; without one, rows fill the slots in order. The INDEX column itself
    yields an empty value.
    """
    columns = len(rows[0])
    index_column = next((i for i, name in enumerate(names[:columns]) if name == "INDEX"), None)

    result: list[str] = []
    for column in range(columns):
        if column == index_column:
            result.append("")
            continue
        slots = [""] * NUM_PLAYERS
        for row_number, row in enumerate(rows):
            if index_column is None:
                slot = row_number
            else:
                slot = parse_integer_value(row[index_column]) - 1
            if 0 <= slot < NUM_PLAYERS:
                slots[slot] = row[column].strip()
        result.append(",".join(slots))
    return result
