# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Turn captured values into facts.

Each successful rule match goes through ``assemble``, which decides the
object id, whether the match extends the previous fact of the same message,
and how each named value is stored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from turnmsg.logging import get_logger
from turnmsg.parser.coercion import parse_integer_value
from turnmsg.parser.facts import AllianceOffer, Fact, IntegerIndex, ObjectKind, OfferType, StringIndex
from turnmsg.parser.keywords import keyword_match
from turnmsg.parser.resolver import NameKind

if TYPE_CHECKING:
    from turnmsg.parser.resolver import NameResolver
    from turnmsg.parser.rule import PatternRule

logger = get_logger(__name__)

_MANDATORY_ID = frozenset(
    {
        ObjectKind.SHIP,
        ObjectKind.MINEFIELD,
        ObjectKind.PLANET,
        ObjectKind.STARBASE,
        ObjectKind.ION_STORM,
        ObjectKind.UFO,
        ObjectKind.WORMHOLE,
        ObjectKind.EXTRA_SHIP,
        ObjectKind.EXTRA_MINEFIELD,
        ObjectKind.EXTRA_PLANET,
    }
)
_OPTIONAL_ID = frozenset({ObjectKind.PLAYER_SCORE, ObjectKind.EXPLOSION})

_SIMPLE_OFFERS: tuple[tuple[str, OfferType], ...] = (
    ("Yes", "yes"),
    ("No", "no"),
    ("Conditional", "conditional"),
)


def assemble(
    values: list[str],
    rule: PatternRule,
    resolver: NameResolver,
    turn: int,
    facts: list[Fact],
    *,
    log: Any = None,
) -> None:
    """Store the values produced by one rule match.

    Args:
        values: Captured values, in variable order
        rule: The rule that matched
        resolver: Name lookup for alliance flag lists
        turn: Turn the message describes
        facts: Facts of the current message; extended or appended to
        log: structlog logger receiving diagnostics (module logger if None)
    """
    log = log or logger
    limit = min(len(values), rule.num_variables)
    kind = rule.kind

    object_id = 0
    mergeable = False
    id_slot = rule.variable_slot("ID")
    if kind in _MANDATORY_ID:
        if id_slot is not None and id_slot < limit:
            object_id = parse_integer_value(values[id_slot])
        if object_id == 0:
            # Rules that only produce an Id just associate the message with an object.
            produced_only_id = id_slot is not None and id_slot < len(values)
            if len(values) > (1 if produced_only_id else 0):
                log.error("rule_missing_id", rule=rule.name)
            return
        if object_id < 0:
            log.error("rule_id_out_of_range", rule=rule.name, object_id=object_id)
            return
        mergeable = True
    elif kind in _OPTIONAL_ID:
        if id_slot is not None and id_slot < limit:
            object_id = parse_integer_value(values[id_slot])
        mergeable = object_id != 0
    elif kind is ObjectKind.CONFIGURATION:
        mergeable = True

    if kind is ObjectKind.ALLIANCE:
        _assemble_alliance(values[:limit], rule, resolver, turn, facts, log)
        return

    if (
        mergeable
        and facts
        and facts[-1].kind is kind
        and facts[-1].object_id == object_id
        and facts[-1].turn == turn
    ):
        fact = facts[-1]
    else:
        fact = Fact(kind=kind, object_id=object_id, turn=turn)
        facts.append(fact)

    for slot in range(limit):
        name = rule.variable_name(slot)
        value = values[slot]
        if not value or slot == id_slot or name in ("_", ""):
            continue
        _store_value(fact, rule, name, value, log)


def _store_value(fact: Fact, rule: PatternRule, name: str, value: str, log: Any) -> None:
    if fact.kind is ObjectKind.CONFIGURATION:
        fact.add_config(name, value)
        return

    if fact.kind is ObjectKind.PLAYER_SCORE and name == "SCORE":
        for player, item in enumerate(value.split(","), start=1):
            if item:
                fact.add_score(player, parse_integer_value(item))
        return

    if (string_index := StringIndex.from_keyword(name)) is not None:
        fact.add_string(string_index, value)
        return

    if (integer_index := IntegerIndex.from_keyword(name)) is not None:
        fact.add_integer(integer_index, parse_integer_value(value))
        return

    if name[0] in "+-" and (integer_index := IntegerIndex.from_keyword(name[1:])) is not None:
        target = fact.find_integer(integer_index)
        if target is None:
            log.error("rule_delta_target_missing", rule=rule.name, variable=name[1:])
            return
        delta = parse_integer_value(value)
        target.value += -delta if name[0] == "-" else delta
        return

    log.error("rule_unknown_value", rule=rule.name, variable=name)


def _assemble_alliance(
    values: list[str],
    rule: PatternRule,
    resolver: NameResolver,
    turn: int,
    facts: list[Fact],
    log: Any,
) -> None:
    offer = AllianceOffer()
    name = ""
    for slot, value in enumerate(values):
        variable = rule.variable_name(slot)
        if not value or variable in ("_", ""):
            continue
        match variable:
            case "NAME":
                name = value
            case "FROM":
                _simple_offers(offer.their_offer, value)
            case "TO":
                _simple_offers(offer.old_offer, value)
            case "FROMFF":
                _ff_offers(offer.their_offer, value)
            case "TOFF":
                _ff_offers(offer.old_offer, value)
            case "FLAGS":
                _flag_offers(offer, value, resolver)
            case _:
                log.error("rule_unknown_value", rule=rule.name, variable=variable)

    if not name:
        log.error("alliance_missing_name", rule=rule.name)
        return

    fact = Fact(kind=ObjectKind.ALLIANCE, turn=turn)
    fact.add_alliance(name, offer)
    facts.append(fact)


def _simple_offers(out: dict[int, OfferType], value: str) -> None:
    for player, item in enumerate(value.split(","), start=1):
        item = item.strip()
        for keyword, level in _SIMPLE_OFFERS:
            if keyword_match(keyword, item):
                out[player] = level
                break


def _ff_offers(out: dict[int, OfferType], value: str) -> None:
    for player, item in enumerate(value.split(","), start=1):
        item = item.strip()
        if item == "YES":
            out[player] = "yes"
        elif item:
            out[player] = "no"


def _flag_offers(offer: AllianceOffer, value: str, resolver: NameResolver) -> None:
    """Read a list of race adjectives with alliance markers.

    ``!`` means the race offered something to us, ``+`` that we offered
    something to them.
    """
    for item in value.split(","):
        race = item.rstrip("+! :")
        markers = item[len(race) :]
        player = resolver.parse_name(NameKind.ADJECTIVE_RACE, race)
        if player:
            offer.their_offer[player] = "yes" if "!" in markers else "no"
            offer.old_offer[player] = "yes" if "+" in markers else "no"
