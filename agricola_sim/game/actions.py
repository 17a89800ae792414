from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from agricola_sim.domain.board import ActionSpace
from agricola_sim.domain.cards import MajorImprovement, Occupation
from agricola_sim.domain.fencing import PastureConfig
from agricola_sim.domain.quantities import Resource, ResourceExchange


@dataclass(frozen=True)
class GameAction:
    kind: str
    data: dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        if not self.data:
            return self.kind
        details = ", ".join(f"{key}={_format_value(value)}" for key, value in self.data.items())
        return f"{self.kind}({details})"


@dataclass(frozen=True)
class TurnContext:
    """What the current worker placement has done so far this turn."""

    space: ActionSpace | None = None
    sowed: bool = False
    baked: bool = False
    plowed: bool = False
    built: bool = False
    renovated: bool = False

    def key(self) -> tuple:
        return (
            self.space.value if self.space is not None else None,
            self.sowed,
            self.baked,
            self.plowed,
            self.built,
            self.renovated,
        )


def _format_value(value: Any) -> str:
    if isinstance(value, (ActionSpace, MajorImprovement, Occupation)):
        return value.value
    if isinstance(value, Resource):
        return value.label
    if isinstance(value, ResourceExchange):
        return value.describe()
    if isinstance(value, PastureConfig):
        return value.describe()
    return str(value)


def make_action(kind: str, **data: Any) -> GameAction:
    return GameAction(kind=kind, data=dict(data))


ACTION_START_ROUND = "start_round"
ACTION_PLACE_WORKER = "place_worker"
ACTION_CHILDLESS_BONUS = "childless_bonus"
ACTION_USE_SPACE = "use_space"
ACTION_PLOW = "plow"
ACTION_BUILD_ROOM = "build_room"
ACTION_BUILD_STABLE = "build_stable"
ACTION_FENCE = "fence"
ACTION_SOW = "sow"
ACTION_BAKE_BREAD = "bake_bread"
ACTION_BUILD_MAJOR = "build_major"
ACTION_BUILD_CARD = "build_card"
ACTION_RENOVATE = "renovate"
ACTION_GROW_FAMILY = "grow_family"
ACTION_PLAY_OCCUPATION = "play_occupation"
ACTION_CONVERT = "convert"
ACTION_END_TURN = "end_turn"
ACTION_HARVEST = "harvest"
ACTION_PRE_HARVEST = "pre_harvest"
ACTION_PAY_FOOD_OR_BEG = "pay_food_or_beg"
ACTION_END_GAME = "end_game"


def start_round() -> GameAction:
    return make_action(ACTION_START_ROUND)


def place_worker() -> GameAction:
    return make_action(ACTION_PLACE_WORKER)


def childless_bonus(crop: Resource) -> GameAction:
    return make_action(ACTION_CHILDLESS_BONUS, crop=crop)


def use_space(space: ActionSpace) -> GameAction:
    return make_action(ACTION_USE_SPACE, space=space)


def plow(idx: int) -> GameAction:
    return make_action(ACTION_PLOW, idx=int(idx))


def build_room(idx: int) -> GameAction:
    return make_action(ACTION_BUILD_ROOM, idx=int(idx))


def build_stable(idx: int) -> GameAction:
    return make_action(ACTION_BUILD_STABLE, idx=int(idx))


def fence(config: PastureConfig) -> GameAction:
    return make_action(ACTION_FENCE, config=config)


def sow(crop: Resource) -> GameAction:
    return make_action(ACTION_SOW, crop=crop)


def bake_bread(grain: int) -> GameAction:
    return make_action(ACTION_BAKE_BREAD, grain=int(grain))


def build_major() -> GameAction:
    return make_action(ACTION_BUILD_MAJOR)


def build_card(card: MajorImprovement, *, return_fireplace: MajorImprovement | None = None) -> GameAction:
    payload: dict[str, Any] = {"card": card}
    if return_fireplace is not None:
        payload["return_fireplace"] = return_fireplace
    return make_action(ACTION_BUILD_CARD, **payload)


def renovate() -> GameAction:
    return make_action(ACTION_RENOVATE)


def grow_family(*, with_room: bool) -> GameAction:
    return make_action(ACTION_GROW_FAMILY, with_room=bool(with_room))


def play_occupation(occupation: Occupation, food_cost: int) -> GameAction:
    return make_action(ACTION_PLAY_OCCUPATION, occupation=occupation, food_cost=int(food_cost))


def convert(exchange: ResourceExchange, *, card: MajorImprovement | None = None) -> GameAction:
    payload: dict[str, Any] = {"exchange": exchange}
    if card is not None:
        payload["card"] = card
    return make_action(ACTION_CONVERT, **payload)


def end_turn() -> GameAction:
    return make_action(ACTION_END_TURN)


def harvest() -> GameAction:
    return make_action(ACTION_HARVEST)


def pre_harvest() -> GameAction:
    return make_action(ACTION_PRE_HARVEST)


def pay_food_or_beg() -> GameAction:
    return make_action(ACTION_PAY_FOOD_OR_BEG)


def end_game() -> GameAction:
    return make_action(ACTION_END_GAME)
