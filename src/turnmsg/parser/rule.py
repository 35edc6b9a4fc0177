# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pattern rule model.

A ``PatternRule`` is an immutable, compiled rule: the kind of object it
produces, an ordered instruction sequence and the declarations of the
variables receiving the produced values. Rules are assembled by the catalog
through a ``RuleBuilder``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from turnmsg.parser.facts import ObjectKind

# Number of per-player slots in arrays and score tables.
NUM_PLAYERS = 11

# Largest offset accepted in a scope prefix.
MAX_SCOPE_OFFSET = 127

Scope = Literal["any", "relative", "fixed"]
ValueType = Literal["plain", "scaled", "enum", "race", "race.short", "race.adj", "hull"]

_NAME_TYPES: dict[str, ValueType] = {
    "RACE": "race",
    "RACE.SHORT": "race.short",
    "RACE.ADJ": "race.adj",
    "HULL": "hull",
}
_SCALE_TYPES = {"X10": 1, "X100": 2, "X1000": 3}
_ALLIES_SUFFIX = "+ALLIES"


class VariableDecl(BaseModel):
    """Declaration of one variable receiving a produced value."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ValueType = "plain"
    scale: int = 0
    alternatives: tuple[str, ...] = ()
    allies: bool = False

    @classmethod
    def parse(cls, text: str) -> VariableDecl:
        """Parse a ``name[:type]`` declaration.

        Types are RACE, RACE.SHORT, RACE.ADJ, HULL, X10/X100/X1000, or an enum
        written as ``alt1/alt2/...``. Any of them may carry a ``+ALLIES``
        suffix. Unknown types are treated as plain text.
        """
        name, _, type_text = text.partition(":")
        name = name.strip().upper()
        type_text = type_text.strip().upper()

        allies = len(type_text) > len(_ALLIES_SUFFIX) and type_text.endswith(_ALLIES_SUFFIX)
        if allies:
            type_text = type_text[: -len(_ALLIES_SUFFIX)]

        if type_text in _NAME_TYPES:
            return cls(name=name, type=_NAME_TYPES[type_text], allies=allies)
        if type_text in _SCALE_TYPES:
            return cls(name=name, type="scaled", scale=_SCALE_TYPES[type_text], allies=allies)
        if "/" in type_text:
            alternatives = tuple(alt.strip() for alt in type_text.split("/"))
            return cls(name=name, type="enum", alternatives=alternatives, allies=allies)
        return cls(name=name, allies=allies)


class _Instruction(BaseModel):
    model_config = ConfigDict(frozen=True)


class MatchKind(_Instruction):
    op: Literal["kind"] = "kind"
    kind: str


class MatchSubId(_Instruction):
    op: Literal["subid"] = "subid"
    sub_id: str


class MatchBigId(_Instruction):
    op: Literal["bigid"] = "bigid"
    big_id: int


class _LineInstruction(_Instruction):
    scope: Scope = "any"
    offset: int = 0


class Check(_LineInstruction):
    """Fail unless the text appears on the addressed line(s)."""

    op: Literal["check"] = "check"
    text: str


class Fail(_LineInstruction):
    """Fail if the text appears on the addressed line(s)."""

    op: Literal["fail"] = "fail"
    text: str


class Find(_LineInstruction):
    """Produce "1" or "0" depending on whether the text appears."""

    op: Literal["find"] = "find"
    text: str


class Parse(_LineInstruction):
    """Capture the text between literal segments.

    ``parts`` holds the literals around the ``$`` wildcards, so a pattern
    with N wildcards has N + 1 parts.
    """

    op: Literal["parse"] = "parse"
    parts: tuple[str, ...]

    @property
    def wildcards(self) -> int:
        return len(self.parts) - 1


class Array(_LineInstruction):
    """Like ``Parse``, repeated over consecutive lines into per-player lists."""

    op: Literal["array"] = "array"
    parts: tuple[str, ...]

    @property
    def wildcards(self) -> int:
        return len(self.parts) - 1


class Value(_Instruction):
    """Produce fixed values, one per item."""

    op: Literal["value"] = "value"
    items: tuple[str, ...]


Instruction = Annotated[
    Union[MatchKind, MatchSubId, MatchBigId, Check, Fail, Find, Parse, Array, Value],
    Field(discriminator="op"),
]


class PatternRule(BaseModel):
    """A compiled message rule."""

    model_config = ConfigDict(frozen=True)

    kind: ObjectKind
    name: str
    instructions: tuple[Instruction, ...] = ()
    variables: tuple[VariableDecl, ...] = ()
    continue_flag: bool = False

    @property
    def num_variables(self) -> int:
        return len(self.variables)

    @property
    def num_wildcards(self) -> int:
        """Number of values the instructions produce."""
        total = 0
        for insn in self.instructions:
            match insn:
                case Value():
                    total += len(insn.items)
                case Find():
                    total += 1
                case Parse() | Array():
                    total += insn.wildcards
        return total

    @property
    def num_restrictions(self) -> int:
        """Number of instructions that can reject a message."""
        return sum(1 for insn in self.instructions if not isinstance(insn, Value))

    def variable_slot(self, name: str) -> int | None:
        for slot, decl in enumerate(self.variables):
            if decl.name == name:
                return slot
        return None

    def variable_name(self, index: int) -> str:
        if 0 <= index < len(self.variables):
            return self.variables[index].name
        return ""


def parse_scoped_text(text: str) -> tuple[Scope, int, str]:
    """Split an optional scope prefix off an instruction argument.

    ``+N,text`` and ``-N,text`` address the line N below or above the
    anchor, ``=N,text`` addresses line N. Blanks after the comma are
    skipped. A malformed prefix (no comma, non-digits, N above 127) leaves
    the text unchanged with scope "any".

    Examples:
        >>> parse_scoped_text("+2, Mass: $")
        ('relative', 2, 'Mass: $')
        >>> parse_scoped_text("=1200,x")
        ('any', 0, '=1200,x')
    """
    scope: Scope
    match text[:1]:
        case "+" | "-":
            scope = "relative"
        case "=":
            scope = "fixed"
        case _:
            return "any", 0, text

    i = 1
    offset = 0
    while i < len(text) and "0" <= text[i] <= "9":
        offset = 10 * offset + int(text[i])
        if offset > MAX_SCOPE_OFFSET:
            return "any", 0, text
        i += 1
    if i >= len(text) or text[i] != ",":
        return "any", 0, text

    if text[0] == "-":
        offset = -offset
    return scope, offset, text[i + 1 :].lstrip(" ")


def split_pattern(text: str) -> tuple[str, ...]:
    """Split a Parse/Array pattern into literal segments around ``$``."""
    return tuple(text.split("$"))


@dataclass
class RuleBuilder:
    """Mutable accumulator for a rule while its definition is being read."""

    kind: ObjectKind
    name: str
    instructions: list[Instruction] = field(default_factory=list)
    variables: list[VariableDecl] = field(default_factory=list)
    continue_flag: bool = False

    def add_kind(self, kind: str) -> None:
        self.instructions.append(MatchKind(kind=kind))

    def add_sub_id(self, sub_id: str) -> None:
        self.instructions.append(MatchSubId(sub_id=sub_id))

    def add_big_id(self, big_id: int) -> None:
        self.instructions.append(MatchBigId(big_id=big_id))

    def add_line_instruction(self, op: str, text: str) -> None:
        """Add a Check/Fail/Find/Parse/Array instruction from its argument text.

        Empty arguments add nothing.
        """
        if not text:
            return
        scope, offset, text = parse_scoped_text(text)
        match op:
            case "check":
                insn = Check(scope=scope, offset=offset, text=text)
            case "fail":
                insn = Fail(scope=scope, offset=offset, text=text)
            case "find":
                insn = Find(scope=scope, offset=offset, text=text)
            case "parse":
                insn = Parse(scope=scope, offset=offset, parts=split_pattern(text))
            case "array":
                insn = Array(scope=scope, offset=offset, parts=split_pattern(text))
            case _:
                raise ValueError(f"Unknown line instruction: {op}")
        self.instructions.append(insn)

    def add_values(self, text: str) -> None:
        self.instructions.append(Value(items=tuple(item.strip() for item in text.split(","))))

    def add_variables(self, text: str) -> None:
        for decl in text.split(","):
            self.variables.append(VariableDecl.parse(decl))

    def build(self) -> PatternRule:
        return PatternRule(
            kind=self.kind,
            name=self.name,
            instructions=tuple(self.instructions),
            variables=tuple(self.variables),
            continue_flag=self.continue_flag,
        )
