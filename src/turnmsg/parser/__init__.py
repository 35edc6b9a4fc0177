# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Turn-report message parser.

Converts host-generated messages into ``Fact`` records using pattern rules
loaded from a rule definition file.
"""

from __future__ import annotations

from turnmsg.parser.assembler import assemble
from turnmsg.parser.catalog import RuleCatalog
from turnmsg.parser.coercion import coerce_value, parse_integer_value, scale_decimal
from turnmsg.parser.facts import (
    AllianceOffer,
    AllianceValue,
    ConfigValue,
    Fact,
    IntegerIndex,
    IntegerValue,
    ObjectKind,
    ScoreValue,
    StringIndex,
    StringValue,
)
from turnmsg.parser.keywords import KeywordMode, keyword_match
from turnmsg.parser.lines import HeaderField, decode_header, parse_player_character, split_message
from turnmsg.parser.matcher import match_rule
from turnmsg.parser.resolver import NameKind, NameResolver, PlayerNames, PlayerNameTable
from turnmsg.parser.rule import PatternRule, RuleBuilder, VariableDecl

__all__ = [
    "AllianceOffer",
    "AllianceValue",
    "ConfigValue",
    "Fact",
    "HeaderField",
    "IntegerIndex",
    "IntegerValue",
    "KeywordMode",
    "NameKind",
    "NameResolver",
    "ObjectKind",
    "PatternRule",
    "PlayerNameTable",
    "PlayerNames",
    "RuleBuilder",
    "RuleCatalog",
    "ScoreValue",
    "StringIndex",
    "StringValue",
    "VariableDecl",
    "assemble",
    "coerce_value",
    "decode_header",
    "keyword_match",
    "match_rule",
    "parse_integer_value",
    "parse_player_character",
    "scale_decimal",
    "split_message",
]
