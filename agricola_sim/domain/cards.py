from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from .board import ActionSpace
from .quantities import Quantities, Resource, ResourceExchange


class MajorImprovement(str, Enum):
    FIREPLACE_2 = "fireplace_2"
    FIREPLACE_3 = "fireplace_3"
    COOKING_HEARTH_4 = "cooking_hearth_4"
    COOKING_HEARTH_5 = "cooking_hearth_5"
    WELL = "well"
    CLAY_OVEN = "clay_oven"
    STONE_OVEN = "stone_oven"
    JOINERY = "joinery"
    POTTERY = "pottery"
    BASKETMAKERS_WORKSHOP = "basketmakers_workshop"


class Occupation(str, Enum):
    ASSISTANT_TILLER = "assistant_tiller"
    CHILDLESS = "childless"


@dataclass(frozen=True)
class MajorCard:
    name: str
    cost: Mapping[Resource, int]
    points: int
    bonus_resource: Resource | None = None
    bonus_thresholds: tuple[tuple[int, int], ...] = ()
    harvest_exchange: ResourceExchange | None = None
    exchanges: tuple[ResourceExchange, ...] = field(default_factory=tuple)


FIREPLACE_EXCHANGES: tuple[ResourceExchange, ...] = (
    ResourceExchange(Resource.SHEEP, Resource.FOOD, 1, 2),
    ResourceExchange(Resource.BOAR, Resource.FOOD, 1, 2),
    ResourceExchange(Resource.VEGETABLE, Resource.FOOD, 1, 2),
    ResourceExchange(Resource.CATTLE, Resource.FOOD, 1, 3),
)
COOKING_HEARTH_EXCHANGES: tuple[ResourceExchange, ...] = (
    ResourceExchange(Resource.SHEEP, Resource.FOOD, 1, 2),
    ResourceExchange(Resource.BOAR, Resource.FOOD, 1, 3),
    ResourceExchange(Resource.VEGETABLE, Resource.FOOD, 1, 3),
    ResourceExchange(Resource.CATTLE, Resource.FOOD, 1, 4),
)
RAW_EXCHANGES: tuple[ResourceExchange, ...] = (
    ResourceExchange(Resource.GRAIN, Resource.FOOD, 1, 1),
    ResourceExchange(Resource.VEGETABLE, Resource.FOOD, 1, 1),
)

MAJOR_CARDS: dict[MajorImprovement, MajorCard] = {
    MajorImprovement.FIREPLACE_2: MajorCard(
        name="Fireplace",
        cost={Resource.CLAY: 2},
        points=1,
        exchanges=FIREPLACE_EXCHANGES,
    ),
    MajorImprovement.FIREPLACE_3: MajorCard(
        name="Fireplace",
        cost={Resource.CLAY: 3},
        points=1,
        exchanges=FIREPLACE_EXCHANGES,
    ),
    MajorImprovement.COOKING_HEARTH_4: MajorCard(
        name="Cooking Hearth",
        cost={Resource.CLAY: 4},
        points=1,
        exchanges=COOKING_HEARTH_EXCHANGES,
    ),
    MajorImprovement.COOKING_HEARTH_5: MajorCard(
        name="Cooking Hearth",
        cost={Resource.CLAY: 5},
        points=1,
        exchanges=COOKING_HEARTH_EXCHANGES,
    ),
    MajorImprovement.WELL: MajorCard(
        name="Well",
        cost={Resource.WOOD: 1, Resource.STONE: 3},
        points=4,
    ),
    MajorImprovement.CLAY_OVEN: MajorCard(
        name="Clay Oven",
        cost={Resource.CLAY: 3, Resource.STONE: 1},
        points=2,
    ),
    MajorImprovement.STONE_OVEN: MajorCard(
        name="Stone Oven",
        cost={Resource.CLAY: 1, Resource.STONE: 3},
        points=3,
    ),
    MajorImprovement.JOINERY: MajorCard(
        name="Joinery",
        cost={Resource.WOOD: 2, Resource.STONE: 2},
        points=2,
        bonus_resource=Resource.WOOD,
        bonus_thresholds=((3, 1), (5, 2), (7, 3)),
        harvest_exchange=ResourceExchange(Resource.WOOD, Resource.FOOD, 1, 2),
    ),
    MajorImprovement.POTTERY: MajorCard(
        name="Pottery",
        cost={Resource.CLAY: 2, Resource.STONE: 2},
        points=2,
        bonus_resource=Resource.CLAY,
        bonus_thresholds=((3, 1), (5, 2), (7, 3)),
        harvest_exchange=ResourceExchange(Resource.CLAY, Resource.FOOD, 1, 2),
    ),
    MajorImprovement.BASKETMAKERS_WORKSHOP: MajorCard(
        name="Basketmaker's Workshop",
        cost={Resource.REED: 2, Resource.STONE: 2},
        points=2,
        bonus_resource=Resource.REED,
        bonus_thresholds=((2, 1), (4, 2), (5, 3)),
        harvest_exchange=ResourceExchange(Resource.REED, Resource.FOOD, 1, 3),
    ),
}

FIREPLACES: tuple[MajorImprovement, ...] = (
    MajorImprovement.FIREPLACE_2,
    MajorImprovement.FIREPLACE_3,
)
COOKING_HEARTHS: tuple[MajorImprovement, ...] = (
    MajorImprovement.COOKING_HEARTH_4,
    MajorImprovement.COOKING_HEARTH_5,
)
COOKING_IMPROVEMENTS: tuple[MajorImprovement, ...] = FIREPLACES + COOKING_HEARTHS

WELL_FOOD_ROUNDS = 5

# Ovens have a per-round grain cap; hearths and fireplaces do not.
OVEN_RATES: tuple[tuple[MajorImprovement, int, int], ...] = (
    (MajorImprovement.CLAY_OVEN, 5, 1),
    (MajorImprovement.STONE_OVEN, 4, 2),
)
COOKING_HEARTH_BAKE_RATE = 3
FIREPLACE_BAKE_RATE = 2

OCCUPATION_DESCRIPTIONS: dict[Occupation, str] = {
    Occupation.ASSISTANT_TILLER: "Day Laborer also lets you plow one field.",
    Occupation.CHILDLESS: "With 2 people and 3+ rooms, take 1 food and 1 crop each round.",
}


def major_cost(card: MajorImprovement) -> Mapping[Resource, int]:
    return MAJOR_CARDS[card].cost


def major_points(card: MajorImprovement, resources: Quantities) -> int:
    info = MAJOR_CARDS[card]
    points = info.points
    if info.bonus_resource is not None:
        held = resources[info.bonus_resource]
        bonus = 0
        for threshold, value in info.bonus_thresholds:
            if held >= threshold:
                bonus = value
        points += bonus
    return points


def anytime_exchanges(majors: Iterable[MajorImprovement]) -> list[ResourceExchange]:
    """Best conversion per source resource, given the cooking improvements held."""
    options = list(RAW_EXCHANGES)
    for card in set(majors):
        options.extend(MAJOR_CARDS[card].exchanges)

    best: dict[Resource, ResourceExchange] = {}
    for exchange in options:
        current = best.get(exchange.source)
        if current is None or exchange.num_to > current.num_to:
            best[exchange.source] = exchange
    return [best[source] for source in sorted(best)]


def cooking_rate(majors: Iterable[MajorImprovement], animal: Resource) -> int:
    for exchange in anytime_exchanges(majors):
        if exchange.source is animal and exchange.target is Resource.FOOD:
            return exchange.num_to
    return 0


def harvest_exchanges(majors: Iterable[MajorImprovement]) -> list[tuple[MajorImprovement, ResourceExchange]]:
    owned = set(majors)
    result = []
    for card in MajorImprovement:
        if card not in owned:
            continue
        exchange = MAJOR_CARDS[card].harvest_exchange
        if exchange is not None:
            result.append((card, exchange))
    return result


def can_bake(majors: Iterable[MajorImprovement]) -> bool:
    owned = set(majors)
    return bool(owned & set(COOKING_IMPROVEMENTS)) or any(card in owned for card, _, _ in OVEN_RATES)


def bake_rates(
    majors: Iterable[MajorImprovement],
    oven_uses: Mapping[MajorImprovement, int],
    grain: int,
) -> list[tuple[MajorImprovement, int]]:
    """Food per grain, best first, for up to ``grain`` grain."""
    owned = set(majors)
    rates: list[tuple[MajorImprovement, int]] = []
    for card, rate, cap in OVEN_RATES:
        if card not in owned:
            continue
        remaining = cap - oven_uses.get(card, 0)
        rates.extend([(card, rate)] * max(0, remaining))

    fallback: tuple[MajorImprovement, int] | None = None
    hearths = [card for card in COOKING_HEARTHS if card in owned]
    fireplaces = [card for card in FIREPLACES if card in owned]
    if hearths:
        fallback = (hearths[0], COOKING_HEARTH_BAKE_RATE)
    elif fireplaces:
        fallback = (fireplaces[0], FIREPLACE_BAKE_RATE)

    rates.sort(key=lambda item: -item[1])
    if fallback is not None:
        rates = [item for item in rates if item[1] > fallback[1]]
        rates.extend([fallback] * max(0, grain - len(rates)))
    return rates[:grain]


def occupation_cost(space: ActionSpace, occupations_held: int) -> int:
    if space is ActionSpace.LESSONS_1:
        return 0 if occupations_held == 0 else 1
    if space is ActionSpace.LESSONS_2:
        return 1 if occupations_held < 2 else 2
    raise ValueError(f"{space.value} does not offer occupations.")
