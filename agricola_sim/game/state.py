from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from agricola_sim.domain.board import (
    ACCUMULATION_YIELDS,
    HIDDEN_STAGES,
    INITIAL_OPEN_SPACES,
    ActionSpace,
)
from agricola_sim.domain.cards import MajorImprovement, Occupation
from agricola_sim.domain.farm import DEFAULT_REORG_STRATEGY, Farm, ReorgStrategy
from agricola_sim.domain.quantities import Quantities, Resource

from .actions import GameAction, TurnContext


class GamePhase(str, Enum):
    START_GAME = "start_game"
    WORKER_TURN = "worker_turn"
    PLACE_WORKER = "place_worker"
    FARMLAND = "farmland"
    FARM_EXPANSION = "farm_expansion"
    FENCING = "fencing"
    GRAIN_UTILIZATION = "grain_utilization"
    IMPROVEMENTS = "improvements"
    MAJOR_SELECTION = "major_selection"
    BAKING = "baking"
    RENOVATION = "renovation"
    FAMILY_GROWTH = "family_growth"
    CULTIVATION = "cultivation"
    LESSONS = "lessons"
    DAY_LABORER = "day_laborer"
    TURN_END = "turn_end"
    ROUND_END = "round_end"
    HARVEST = "harvest"
    HARVEST_STEP = "harvest_step"
    FEEDING = "feeding"
    GAME_OVER = "game_over"


class HouseMaterial(str, Enum):
    WOOD = "wood"
    CLAY = "clay"
    STONE = "stone"


HOUSE_RESOURCES: dict[HouseMaterial, Resource] = {
    HouseMaterial.WOOD: Resource.WOOD,
    HouseMaterial.CLAY: Resource.CLAY,
    HouseMaterial.STONE: Resource.STONE,
}
RENOVATION_TARGET: dict[HouseMaterial, HouseMaterial] = {
    HouseMaterial.WOOD: HouseMaterial.CLAY,
    HouseMaterial.CLAY: HouseMaterial.STONE,
}

MIN_PLAYERS = 1
MAX_PLAYERS = 4
MAX_FAMILY_SIZE = 5
STARTING_ADULTS = 2
STARTING_PLAYER_FOOD = 2
OTHER_PLAYER_FOOD = 3
EVENT_LOG_LIMIT = 120


@dataclass(frozen=True)
class GameConfig:
    player_count: int = 2
    seed: int | None = None
    reorg_strategy: ReorgStrategy = field(default=DEFAULT_REORG_STRATEGY, compare=False)


@dataclass
class PlayerState:
    player_id: int
    farm: Farm = field(default_factory=Farm)
    resources: Quantities = field(default_factory=Quantities)
    adults: int = STARTING_ADULTS
    children: int = 0
    people_placed: int = 0
    begging_tokens: int = 0
    house: HouseMaterial = HouseMaterial.WOOD
    majors: set[MajorImprovement] = field(default_factory=set)
    occupations: set[Occupation] = field(default_factory=set)
    harvest_paid: bool = False
    before_round_start: bool = True
    oven_uses: Dict[MajorImprovement, int] = field(default_factory=dict)
    harvest_exchanges_used: set[MajorImprovement] = field(default_factory=set)

    def clone(self) -> "PlayerState":
        return PlayerState(
            player_id=self.player_id,
            farm=self.farm.clone(),
            resources=self.resources.copy(),
            adults=int(self.adults),
            children=int(self.children),
            people_placed=int(self.people_placed),
            begging_tokens=int(self.begging_tokens),
            house=self.house,
            majors=set(self.majors),
            occupations=set(self.occupations),
            harvest_paid=bool(self.harvest_paid),
            before_round_start=bool(self.before_round_start),
            oven_uses=dict(self.oven_uses),
            harvest_exchanges_used=set(self.harvest_exchanges_used),
        )

    @property
    def family_size(self) -> int:
        return self.adults + self.children

    def food_required(self) -> int:
        return 2 * self.adults + self.children

    def all_people_placed(self) -> bool:
        return self.people_placed >= self.adults

    def animal_count(self, animal: Resource) -> int:
        return self.resources[animal] + self.farm.animal_totals()[animal]

    def reset_for_round(self) -> None:
        self.adults += self.children
        self.children = 0
        self.people_placed = 0
        self.harvest_paid = False
        self.before_round_start = True
        self.oven_uses.clear()
        self.harvest_exchanges_used.clear()


@dataclass
class GameState:
    player_count: int
    players: list[PlayerState]
    phase: GamePhase
    current_player: int
    starting_player: int
    open_spaces: list[ActionSpace]
    hidden_stages: list[list[ActionSpace]]
    accumulated: Dict[ActionSpace, Quantities]
    round_number: int = 0
    occupied: set[ActionSpace] = field(default_factory=set)
    workers_placed: int = 0
    harvest_pending: bool = False
    context: TurnContext | None = None
    last_action: GameAction | None = None
    # (round, player) pairs; the Well pays one food at the start of each round.
    scheduled_food: list[tuple[int, int]] = field(default_factory=list)
    reorg_strategy: ReorgStrategy = field(default=DEFAULT_REORG_STRATEGY, repr=False, compare=False)
    event_log: list[str] = field(default_factory=list)
    _rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def clone(self) -> "GameState":
        cloned = GameState(
            player_count=self.player_count,
            players=[player.clone() for player in self.players],
            phase=self.phase,
            current_player=self.current_player,
            starting_player=self.starting_player,
            open_spaces=list(self.open_spaces),
            hidden_stages=[list(stage) for stage in self.hidden_stages],
            accumulated={space: amount.copy() for space, amount in self.accumulated.items()},
            round_number=self.round_number,
            occupied=set(self.occupied),
            workers_placed=self.workers_placed,
            harvest_pending=self.harvest_pending,
            context=self.context,
            last_action=self.last_action,
            scheduled_food=list(self.scheduled_food),
            reorg_strategy=self.reorg_strategy,
            event_log=list(self.event_log),
            _rng=random.Random(),
        )
        cloned._rng.setstate(self._rng.getstate())
        return cloned

    @property
    def rng(self) -> random.Random:
        return self._rng

    @property
    def current(self) -> PlayerState:
        return self.players[self.current_player]

    def is_game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    def available_majors(self) -> list[MajorImprovement]:
        owned: set[MajorImprovement] = set()
        for player in self.players:
            owned.update(player.majors)
        return [card for card in MajorImprovement if card not in owned]

    def all_people_placed(self) -> bool:
        return all(player.all_people_placed() for player in self.players)

    def all_harvest_paid(self) -> bool:
        return all(player.harvest_paid for player in self.players)


def next_player_index(current: int, player_count: int) -> int:
    return (current + 1) % player_count


def initialize_game_state(
    *,
    player_count: int = 2,
    seed: int | None = None,
    config: GameConfig | None = None,
) -> GameState:
    if config is None:
        config = GameConfig(player_count=player_count, seed=seed)
    if config.player_count < MIN_PLAYERS or config.player_count > MAX_PLAYERS:
        raise ValueError(f"player_count must be between {MIN_PLAYERS} and {MAX_PLAYERS}.")

    rng = random.Random(config.seed)
    starting_player = rng.randrange(config.player_count)
    players = []
    for player_id in range(config.player_count):
        food = STARTING_PLAYER_FOOD if player_id == starting_player else OTHER_PLAYER_FOOD
        players.append(PlayerState(player_id=player_id, resources=Quantities({Resource.FOOD: food})))

    hidden_stages = []
    for stage in HIDDEN_STAGES:
        shuffled = list(stage)
        rng.shuffle(shuffled)
        hidden_stages.append(shuffled)

    return GameState(
        player_count=config.player_count,
        players=players,
        phase=GamePhase.START_GAME,
        current_player=starting_player,
        starting_player=starting_player,
        open_spaces=list(INITIAL_OPEN_SPACES),
        hidden_stages=hidden_stages,
        accumulated={space: Quantities() for space in ACCUMULATION_YIELDS},
        reorg_strategy=config.reorg_strategy,
        event_log=[f"New game: {config.player_count} players, P{starting_player} starts."],
        _rng=rng,
    )
