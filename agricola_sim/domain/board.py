from __future__ import annotations

from enum import Enum

from .quantities import Resource


class ActionSpace(str, Enum):
    COPSE = "copse"
    GROVE = "grove"
    FOREST = "forest"
    RESOURCE_MARKET = "resource_market"
    HOLLOW = "hollow"
    CLAY_PIT = "clay_pit"
    REED_BANK = "reed_bank"
    TRAVELING_PLAYERS = "traveling_players"
    FISHING = "fishing"
    DAY_LABORER = "day_laborer"
    GRAIN_SEEDS = "grain_seeds"
    MEETING_PLACE = "meeting_place"
    FARMLAND = "farmland"
    FARM_EXPANSION = "farm_expansion"
    LESSONS_1 = "lessons_1"
    LESSONS_2 = "lessons_2"
    SHEEP_MARKET = "sheep_market"
    GRAIN_UTILIZATION = "grain_utilization"
    FENCING = "fencing"
    IMPROVEMENTS = "improvements"
    WISH_FOR_CHILDREN = "wish_for_children"
    WESTERN_QUARRY = "western_quarry"
    HOUSE_REDEVELOPMENT = "house_redevelopment"
    PIG_MARKET = "pig_market"
    VEGETABLE_SEEDS = "vegetable_seeds"
    EASTERN_QUARRY = "eastern_quarry"
    CATTLE_MARKET = "cattle_market"
    CULTIVATION = "cultivation"
    URGENT_WISH_FOR_CHILDREN = "urgent_wish_for_children"
    FARM_REDEVELOPMENT = "farm_redevelopment"


ALL_SPACES: tuple[ActionSpace, ...] = tuple(ActionSpace)
NUM_ACTION_SPACES = len(ALL_SPACES)
OPEN_SPACES = 16

INITIAL_OPEN_SPACES: tuple[ActionSpace, ...] = ALL_SPACES[:OPEN_SPACES]

# Round cards grouped by stage; a harvest follows the last round of each stage.
HIDDEN_STAGES: tuple[tuple[ActionSpace, ...], ...] = (
    (
        ActionSpace.SHEEP_MARKET,
        ActionSpace.GRAIN_UTILIZATION,
        ActionSpace.FENCING,
        ActionSpace.IMPROVEMENTS,
    ),
    (
        ActionSpace.WISH_FOR_CHILDREN,
        ActionSpace.WESTERN_QUARRY,
        ActionSpace.HOUSE_REDEVELOPMENT,
    ),
    (ActionSpace.PIG_MARKET, ActionSpace.VEGETABLE_SEEDS),
    (ActionSpace.EASTERN_QUARRY, ActionSpace.CATTLE_MARKET),
    (ActionSpace.CULTIVATION, ActionSpace.URGENT_WISH_FOR_CHILDREN),
    (ActionSpace.FARM_REDEVELOPMENT,),
)
NUM_ROUNDS = sum(len(stage) for stage in HIDDEN_STAGES)

ACCUMULATION_YIELDS: dict[ActionSpace, dict[Resource, int]] = {
    ActionSpace.COPSE: {Resource.WOOD: 1},
    ActionSpace.GROVE: {Resource.WOOD: 2},
    ActionSpace.FOREST: {Resource.WOOD: 3},
    ActionSpace.HOLLOW: {Resource.CLAY: 2},
    ActionSpace.CLAY_PIT: {Resource.CLAY: 1},
    ActionSpace.REED_BANK: {Resource.REED: 1},
    ActionSpace.TRAVELING_PLAYERS: {Resource.FOOD: 1},
    ActionSpace.FISHING: {Resource.FOOD: 1},
    ActionSpace.SHEEP_MARKET: {Resource.SHEEP: 1},
    ActionSpace.WESTERN_QUARRY: {Resource.STONE: 1},
    ActionSpace.PIG_MARKET: {Resource.BOAR: 1},
    ActionSpace.EASTERN_QUARRY: {Resource.STONE: 1},
    ActionSpace.CATTLE_MARKET: {Resource.CATTLE: 1},
}

FIXED_YIELDS: dict[ActionSpace, dict[Resource, int]] = {
    ActionSpace.RESOURCE_MARKET: {Resource.FOOD: 1, Resource.STONE: 1, Resource.REED: 1},
    ActionSpace.DAY_LABORER: {Resource.FOOD: 2},
    ActionSpace.GRAIN_SEEDS: {Resource.GRAIN: 1},
    ActionSpace.MEETING_PLACE: {Resource.FOOD: 1},
    ActionSpace.VEGETABLE_SEEDS: {Resource.VEGETABLE: 1},
}

RESOURCE_SPACES: tuple[ActionSpace, ...] = tuple(ACCUMULATION_YIELDS) + tuple(FIXED_YIELDS)
LESSONS_SPACES: tuple[ActionSpace, ...] = (ActionSpace.LESSONS_1, ActionSpace.LESSONS_2)


def is_accumulation_space(space: ActionSpace) -> bool:
    return space in ACCUMULATION_YIELDS
