# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for fact records."""

from __future__ import annotations

import pytest

from turnmsg.parser.facts import (
    AllianceOffer,
    ConfigValue,
    Fact,
    IntegerIndex,
    IntegerValue,
    ObjectKind,
    StringIndex,
    StringValue,
)


@pytest.mark.parametrize(
    ("keyword", "expected"),
    [
        ("X", IntegerIndex.X),
        ("SPEED", IntegerIndex.WARP_FACTOR),
        ("TOTAL.N", IntegerIndex.PLANET_TOTAL_N),
        ("MONEY", IntegerIndex.PLANET_CASH),
        ("SHAPE", IntegerIndex.DRAWING_SHAPE),
        ("NAME", None),
        ("total.n", None),
    ],
)
def test_integer_index_from_keyword(keyword: str, expected: IntegerIndex | None) -> None:
    assert IntegerIndex.from_keyword(keyword) is expected


def test_string_index_from_keyword() -> None:
    assert StringIndex.from_keyword("NAME") is StringIndex.NAME
    assert StringIndex.from_keyword("FCODE") is StringIndex.FRIENDLY_CODE
    assert StringIndex.from_keyword("X") is None


def test_keywords_do_not_overlap() -> None:
    assert not {i.value for i in StringIndex} & {i.value for i in IntegerIndex}


class TestFact:
    """Adding and reading values."""

    def test_defaults(self):
        fact = Fact(kind=ObjectKind.SHIP)
        assert fact.object_id == 0
        assert fact.turn == 0
        assert fact.values == []

    def test_add_keeps_order(self):
        fact = Fact(kind=ObjectKind.SHIP, object_id=3)
        fact.add_integer(IntegerIndex.Y, 2)
        fact.add_string(StringIndex.NAME, "Bob")
        fact.add_integer(IntegerIndex.X, 1)

        assert fact.values == [
            IntegerValue(index=IntegerIndex.Y, value=2),
            StringValue(index=StringIndex.NAME, value="Bob"),
            IntegerValue(index=IntegerIndex.X, value=1),
        ]

    def test_replace_in_place(self):
        fact = Fact(kind=ObjectKind.SHIP, object_id=3)
        fact.add_integer(IntegerIndex.X, 1)
        fact.add_integer(IntegerIndex.Y, 2)
        fact.add_integer(IntegerIndex.X, 10)

        assert [v.index for v in fact.values] == [IntegerIndex.X, IntegerIndex.Y]
        assert fact.get_integer(IntegerIndex.X) == 10

    def test_kinds_do_not_collide(self):
        fact = Fact(kind=ObjectKind.CONFIGURATION)
        fact.add_config("X", "5")
        fact.add_score(1, 5)
        assert fact.get_config("X") == "5"
        assert fact.get_integer(IntegerIndex.X) is None
        assert len(fact.values) == 2

    def test_missing_values(self):
        fact = Fact(kind=ObjectKind.SHIP)
        assert fact.get_integer(IntegerIndex.X) is None
        assert fact.find_integer(IntegerIndex.X) is None
        assert fact.get_string(StringIndex.NAME) is None
        assert fact.get_config("X") is None
        assert fact.get_score(1) is None
        assert fact.get_alliance("x") is None

    def test_find_integer_is_live(self):
        fact = Fact(kind=ObjectKind.SHIP)
        fact.add_integer(IntegerIndex.SHIP_FUEL, 10)
        fact.find_integer(IntegerIndex.SHIP_FUEL).value += 5
        assert fact.get_integer(IntegerIndex.SHIP_FUEL) == 15

    def test_alliance(self):
        fact = Fact(kind=ObjectKind.ALLIANCE)
        fact.add_alliance("thost.ally", AllianceOffer(their_offer={3: "yes"}))
        fact.add_alliance("thost.ally", AllianceOffer(old_offer={4: "conditional"}))

        offer = fact.get_alliance("thost.ally")
        assert offer.their_offer == {}
        assert offer.old_offer == {4: "conditional"}


def test_json_dump_and_validate() -> None:
    fact = Fact(kind=ObjectKind.PLAYER_SCORE, object_id=2, turn=30)
    fact.add_score(1, 16)
    fact.add_integer(IntegerIndex.SCORE_WIN_LIMIT, 1000)
    fact.add_config("HOSTTYPE", "PHost")
    fact.add_alliance("pact", AllianceOffer(their_offer={2: "no"}))

    data = fact.model_dump(mode="json")

    assert data["kind"] == "player_score"
    assert data["values"][0] == {"type": "score", "player": 1, "value": 16}
    assert data["values"][1] == {"type": "integer", "index": "WINLIMIT", "value": 1000}
    assert data["values"][3]["offer"]["their_offer"] == {"2": "no"}

    restored = Fact.model_validate_json(fact.model_dump_json())
    assert restored == fact
    assert isinstance(restored.values[2], ConfigValue)
