# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Structured facts produced from messages.

A ``Fact`` describes one game object (or a configuration block, score
table, alliance record, drawing) as seen in one message. Its values are
keyed by attribute keywords, which are the variable names rule files use.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class ObjectKind(str, Enum):
    """Kind of object a pattern rule produces."""

    SHIP = "ship"
    PLANET = "planet"
    STARBASE = "starbase"
    MINEFIELD = "minefield"
    ION_STORM = "ion_storm"
    UFO = "ufo"
    WORMHOLE = "wormhole"
    EXPLOSION = "explosion"
    CONFIGURATION = "configuration"
    PLAYER_SCORE = "player_score"
    ALLIANCE = "alliance"
    MARKER = "marker"
    LINE = "line"
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    EXTRA_SHIP = "extra_ship"
    EXTRA_PLANET = "extra_planet"
    EXTRA_MINEFIELD = "extra_minefield"
    NO_OBJECT = "no_object"


class StringIndex(str, Enum):
    """String attributes, by rule-file keyword."""

    NAME = "NAME"
    FRIENDLY_CODE = "FCODE"
    DRAWING_COMMENT = "COMMENT"
    UFO_INFO1 = "INFO1"
    UFO_INFO2 = "INFO2"

    @classmethod
    def from_keyword(cls, keyword: str) -> StringIndex | None:
        try:
            return cls(keyword)
        except ValueError:
            return None


class IntegerIndex(str, Enum):
    """Integer attributes, by rule-file keyword."""

    # Location and common properties
    X = "X"
    Y = "Y"
    OWNER = "OWNER"
    RADIUS = "RADIUS"
    COLOR = "COLOR"
    HEADING = "HEADING"
    WARP_FACTOR = "SPEED"
    MASS = "MASS"
    DAMAGE = "DAMAGE"
    TYPE = "TYPE"

    # Ships
    SHIP_HULL = "HULL"
    SHIP_ENGINE_TYPE = "ENGINE"
    SHIP_BEAM_TYPE = "BEAM"
    SHIP_NUM_BEAMS = "BEAM.COUNT"
    SHIP_TORPEDO_TYPE = "TORP"
    SHIP_NUM_LAUNCHERS = "TORP.COUNT"
    SHIP_NUM_BAYS = "BAY.COUNT"
    SHIP_AMMO = "AMMO"
    SHIP_CREW = "CREW"
    SHIP_FUEL = "FUEL"
    SHIP_CARGO_T = "CARGO.T"
    SHIP_CARGO_D = "CARGO.D"
    SHIP_CARGO_M = "CARGO.M"
    SHIP_COLONISTS = "CARGO.COLONISTS"
    SHIP_SUPPLIES = "CARGO.SUPPLIES"
    SHIP_MONEY = "CARGO.MONEY"
    SHIP_MISSION = "MISSION"
    SHIP_INTERCEPT = "INTERCEPT"
    SHIP_TOW = "TOW"
    SHIP_ENEMY = "ENEMY"
    SHIP_REMOTE_FLAG = "REMOTE"
    SHIP_WAYPOINT_DX = "WAYPOINT.DX"
    SHIP_WAYPOINT_DY = "WAYPOINT.DY"

    # Planets
    PLANET_TEMPERATURE = "TEMP"
    PLANET_HAS_BASE = "BASE"
    PLANET_CASH = "MONEY"
    PLANET_SUPPLIES = "SUPPLIES"
    PLANET_MINES = "MINES"
    PLANET_FACTORIES = "FACTORIES"
    PLANET_DEFENSE = "DEFENSE"
    PLANET_COLONISTS = "COLONISTS"
    PLANET_COLONIST_TAX = "COLONISTS.TAX"
    PLANET_COLONIST_HAPPINESS = "COLONISTS.HAPPY"
    PLANET_HAS_NATIVES = "HASNATIVES"
    PLANET_NATIVES = "NATIVES"
    PLANET_NATIVE_RACE = "NATIVES.RACE"
    PLANET_NATIVE_GOV = "NATIVES.GOV"
    PLANET_NATIVE_TAX = "NATIVES.TAX"
    PLANET_NATIVE_HAPPINESS = "NATIVES.HAPPY"
    PLANET_TOTAL_N = "TOTAL.N"
    PLANET_TOTAL_T = "TOTAL.T"
    PLANET_TOTAL_D = "TOTAL.D"
    PLANET_TOTAL_M = "TOTAL.M"
    PLANET_MINED_N = "MINED.N"
    PLANET_MINED_T = "MINED.T"
    PLANET_MINED_D = "MINED.D"
    PLANET_MINED_M = "MINED.M"
    PLANET_DENSITY_N = "DENSITY.N"
    PLANET_DENSITY_T = "DENSITY.T"
    PLANET_DENSITY_D = "DENSITY.D"
    PLANET_DENSITY_M = "DENSITY.M"
    PLANET_ADDED_N = "ADDED.N"
    PLANET_ADDED_T = "ADDED.T"
    PLANET_ADDED_D = "ADDED.D"
    PLANET_ADDED_M = "ADDED.M"
    PLANET_ACTIVITY = "ACTIVITY"

    # Starbases
    BASE_QUEUE_POS = "QUEUE.POS"
    BASE_QUEUE_PRIORITY = "QUEUE.PRIORITY"

    # Minefields
    MINE_UNITS = "UNITS"
    MINE_UNITS_REMOVED = "UNITS.REMOVED"
    MINE_SCAN_REASON = "SCANNED"

    # Ion storms
    ION_VOLTAGE = "VOLTAGE"
    ION_STATUS = "STATUS"

    # Ufos and wormholes
    UFO_REAL_ID = "REALID"
    UFO_SPEED_X = "SPEED.X"
    UFO_SPEED_Y = "SPEED.Y"
    UFO_PLANET_RANGE = "PLANET.RANGE"
    UFO_SHIP_RANGE = "SHIP.RANGE"
    WORMHOLE_STABILITY_CODE = "STABILITY"
    WORMHOLE_BIDIR_FLAG = "BIDIR"

    # Drawings
    DRAWING_SHAPE = "SHAPE"
    DRAWING_END_X = "END.X"
    DRAWING_END_Y = "END.Y"
    DRAWING_EXPIRE = "EXPIRE"

    # Score tables
    SCORE_TURN_LIMIT = "TURNLIMIT"
    SCORE_WIN_LIMIT = "WINLIMIT"

    @classmethod
    def from_keyword(cls, keyword: str) -> IntegerIndex | None:
        try:
            return cls(keyword)
        except ValueError:
            return None


OfferType = Literal["yes", "no", "conditional"]


class AllianceOffer(BaseModel):
    """Alliance levels offered between us and other players.

    ``their_offer`` is what each player has offered to us, ``old_offer`` what
    we have offered to them. Players absent from a map are unknown.
    """

    their_offer: dict[int, OfferType] = Field(default_factory=dict)
    old_offer: dict[int, OfferType] = Field(default_factory=dict)


class StringValue(BaseModel):
    type: Literal["string"] = "string"
    index: StringIndex
    value: str


class IntegerValue(BaseModel):
    type: Literal["integer"] = "integer"
    index: IntegerIndex
    value: int


class ConfigValue(BaseModel):
    type: Literal["config"] = "config"
    key: str
    value: str


class ScoreValue(BaseModel):
    type: Literal["score"] = "score"
    player: int
    value: int


class AllianceValue(BaseModel):
    type: Literal["alliance"] = "alliance"
    name: str
    offer: AllianceOffer


FactValue = Annotated[
    Union[StringValue, IntegerValue, ConfigValue, ScoreValue, AllianceValue],
    Field(discriminator="type"),
]


class Fact(BaseModel):
    """Information about one object, taken from one message."""

    kind: ObjectKind
    object_id: int = 0
    turn: int = 0
    values: list[FactValue] = Field(default_factory=list)

    def _put(self, new: FactValue, same) -> None:
        # Replace in place so merged facts keep first-seen order.
        for i, old in enumerate(self.values):
            if same(old):
                self.values[i] = new
                return
        self.values.append(new)

    def add_string(self, index: StringIndex, value: str) -> None:
        self._put(
            StringValue(index=index, value=value),
            lambda v: isinstance(v, StringValue) and v.index is index,
        )

    def add_integer(self, index: IntegerIndex, value: int) -> None:
        self._put(
            IntegerValue(index=index, value=value),
            lambda v: isinstance(v, IntegerValue) and v.index is index,
        )

    def add_config(self, key: str, value: str) -> None:
        self._put(
            ConfigValue(key=key, value=value),
            lambda v: isinstance(v, ConfigValue) and v.key == key,
        )

    def add_score(self, player: int, value: int) -> None:
        self._put(
            ScoreValue(player=player, value=value),
            lambda v: isinstance(v, ScoreValue) and v.player == player,
        )

    def add_alliance(self, name: str, offer: AllianceOffer) -> None:
        self._put(
            AllianceValue(name=name, offer=offer),
            lambda v: isinstance(v, AllianceValue) and v.name == name,
        )

    def find_integer(self, index: IntegerIndex) -> IntegerValue | None:
        for v in self.values:
            if isinstance(v, IntegerValue) and v.index is index:
                return v
        return None

    def get_integer(self, index: IntegerIndex) -> int | None:
        found = self.find_integer(index)
        return found.value if found else None

    def get_string(self, index: StringIndex) -> str | None:
        for v in self.values:
            if isinstance(v, StringValue) and v.index is index:
                return v.value
        return None

    def get_config(self, key: str) -> str | None:
        for v in self.values:
            if isinstance(v, ConfigValue) and v.key == key:
                return v.value
        return None

    def get_score(self, player: int) -> int | None:
        for v in self.values:
            if isinstance(v, ScoreValue) and v.player == player:
                return v.value
        return None

    def get_alliance(self, name: str) -> AllianceOffer | None:
        for v in self.values:
            if isinstance(v, AllianceValue) and v.name == name:
                return v.offer
        return None
