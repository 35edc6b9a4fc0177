# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Keyword matching for the rule definition vocabulary.

Keywords are written with their mandatory abbreviation in upper case, e.g.
``PLAYerscore`` accepts ``play``, ``player`` and ``PlayerScore`` but not
``pl``.
"""

from __future__ import annotations

from typing import Literal

KeywordMode = Literal["abbrev", "exact"]


def keyword_match(keyword: str, text: str, mode: KeywordMode = "abbrev") -> bool:
    """Check whether ``text`` names ``keyword``.

    Args:
        keyword: Vocabulary entry with the mandatory prefix in upper case
        text: User-supplied word
        mode: "abbrev" accepts any case-insensitive prefix that covers the
            upper-case part of the keyword; "exact" requires the full word

    Returns:
        True if the word matches the keyword
    """
    if mode == "exact":
        return text.casefold() == keyword.casefold()

    if len(text) > len(keyword):
        return False
    if text.upper() != keyword[: len(text)].upper():
        return False
    return not any(ch.isupper() for ch in keyword[len(text) :])
