# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Conversion of captured text into typed values.

Captured values stay strings until output assembly. Coercion only
normalizes them: scaled numbers lose their decimal point, enums and names
become numbers, and anything that cannot be interpreted becomes "".
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from turnmsg.parser.resolver import NameKind

if TYPE_CHECKING:
    from turnmsg.parser.resolver import NameResolver
    from turnmsg.parser.rule import VariableDecl

_LEADING_INTEGER = re.compile(r"[+-]?[0-9]+")

# Markers host appends to race names in alliance-aware tables.
#   !  this race has offered something to us
#   +  we have offered something
#   :  host sometimes drops the colon, so rules include it in the name
ALLIANCE_MARKERS = "+!: "

_NAME_KINDS: dict[str, NameKind] = {
    "race": NameKind.LONG_RACE,
    "race.short": NameKind.SHORT_RACE,
    "race.adj": NameKind.ADJECTIVE_RACE,
    "hull": NameKind.HULL,
}


def parse_integer_value(value: str) -> int:
    """Parse the leading integer of a value.

    Trailing text is ignored ("99 kt" is 99, "3.5" is 3). Values without a
    leading number yield -1.
    """
    match = _LEADING_INTEGER.match(value.strip())
    if match is None:
        return -1
    return int(match.group(0))


def scale_decimal(value: str, digits: int) -> str:
    """Shift the decimal point of a number ``digits`` places to the right.

    Excess decimals are truncated, missing ones padded with zeros, and
    trailing non-numeric text (such as "%") is dropped.

    Examples:
        >>> scale_decimal("3.14", 2)
        '314'
        >>> scale_decimal("-123.456%", 2)
        '-12345'
    """
    start = 1 if value[:1] in ("+", "-") else 0
    end = start
    while end < len(value) and "0" <= value[end] <= "9":
        end += 1

    if end == len(value):
        return value + "0" * digits
    if value[end] != ".":
        return value[:end] + "0" * digits

    fraction_end = end + 1
    while fraction_end < len(value) and fraction_end - end - 1 < digits and "0" <= value[fraction_end] <= "9":
        fraction_end += 1
    fraction = value[end + 1 : fraction_end]
    return value[:end] + fraction + "0" * (digits - len(fraction))


def parse_fixed_point(value: str, digits: int = 2) -> int:
    """Parse a decimal number as an integer scaled by 10**digits."""
    return parse_integer_value(scale_decimal(value.strip(), digits))


def strip_alliance_markers(value: str) -> str:
    return value.rstrip(ALLIANCE_MARKERS)


def coerce_value(raw: str, decl: VariableDecl, resolver: NameResolver) -> str:
    """Convert a captured value according to its variable declaration."""
    value = raw
    if decl.allies:
        value = strip_alliance_markers(value)
    value = value.strip()

    match decl.type:
        case "plain":
            return value
        case "scaled":
            return scale_decimal(value, decl.scale)
        case "enum":
            wanted = value.casefold()
            for index, alternative in enumerate(decl.alternatives):
                if alternative.casefold() == wanted:
                    return str(index)
            return ""
        case "race" | "race.short" | "race.adj" | "hull":
            number = resolver.parse_name(_NAME_KINDS[decl.type], value)
            return str(number) if number else ""
