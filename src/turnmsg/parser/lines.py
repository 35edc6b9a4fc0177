# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Message line splitting and header decoding.

Host-generated messages start with a fixed header such as ``(-m1234)`` or
``(or3000)``:

- character 1 is ``-`` for a current message, ``o`` for one from last turn
- character 2 is the message kind
- character 3 is the sub-id (often a player character)
- everything up to ``)`` carries the numeric id
"""

from __future__ import annotations

import string
from enum import Enum

MessageLines = list[str]

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


class HeaderField(Enum):
    """Information that can be taken from a message header."""

    KIND = "kind"
    SUB_ID = "sub_id"
    ID = "id"
    BIG_ID = "big_id"
    AGE = "age"


def split_message(text: str) -> MessageLines:
    """Split message text into lines.

    Always returns at least one (possibly empty) line.
    """
    return text.split("\n")


def decode_header(lines: MessageLines, field: HeaderField) -> int:
    """Extract a header field from the first message line.

    KIND and SUB_ID are returned as character codes. ID and BIG_ID collect the
    digits following the sub-id (ID) or starting at it (BIG_ID) up to the
    closing parenthesis. Malformed or missing headers yield 0 for every field.
    """
    if not lines or len(lines[0]) < 5 or lines[0][0] != "(":
        return 0
    header = lines[0]

    match field:
        case HeaderField.AGE:
            return 1 if header[1] == "o" else 0
        case HeaderField.KIND:
            return ord(header[2])
        case HeaderField.SUB_ID:
            return ord(header[3])
        case HeaderField.ID | HeaderField.BIG_ID:
            start = 3 if field is HeaderField.BIG_ID else 4
            result = 0
            for ch in header[start:]:
                if ch == ")":
                    break
                if "0" <= ch <= "9":
                    result = 10 * result + int(ch)
            return result


def parse_player_character(ch: str) -> int | None:
    """Convert a player character to a number.

    ``0``-``9`` are taken literally, letters continue the sequence
    (``a`` = 10, ``b`` = 11, ``c`` = 12 for colonists).
    """
    if len(ch) != 1:
        return None
    if "0" <= ch <= "9":
        return int(ch)
    lower = ch.lower()
    if "a" <= lower <= "z":
        return 10 + ord(lower) - ord("a")
    return None


def fold_case(text: str) -> str:
    """Upper-case ASCII letters only.

    The result has the same length as ``text``, so positions found in it can
    be used to slice the original.
    """
    return text.translate(_ASCII_UPPER)
