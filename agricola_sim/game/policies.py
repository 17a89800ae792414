from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from agricola_sim.domain.quantities import Resource

from .actions import (
    ACTION_BUILD_CARD,
    ACTION_BUILD_ROOM,
    ACTION_FENCE,
    ACTION_GROW_FAMILY,
    ACTION_PLOW,
    ACTION_RENOVATE,
    ACTION_SOW,
    GameAction,
)
from .rules import apply_action
from .scoring import player_score
from .state import GameState


class RandomPolicy:
    def __init__(self, *, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def decide(self, state: GameState, legal_actions: Sequence[GameAction]) -> GameAction:
        if not legal_actions:
            raise ValueError("No legal actions available.")
        return self._rng.choice(list(legal_actions))


@dataclass
class WeightedRandomPolicy:
    """
    Weighted random policy:
    prefer actions that grow the farm while keeping exploration.
    """

    weights_by_kind: Mapping[str, int] = field(
        default_factory=lambda: {
            ACTION_GROW_FAMILY: 1_000,
            ACTION_BUILD_ROOM: 500,
            ACTION_BUILD_CARD: 200,
            ACTION_RENOVATE: 100,
            ACTION_FENCE: 50,
            ACTION_SOW: 50,
            ACTION_PLOW: 20,
        }
    )
    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def decide(self, state: GameState, legal_actions: Sequence[GameAction]) -> GameAction:
        if not legal_actions:
            raise ValueError("No legal actions available.")
        weights = [
            max(1, int(self.weights_by_kind.get(action.kind, 1)))
            for action in legal_actions
        ]
        return self._rng.choices(list(legal_actions), weights=weights, k=1)[0]


@dataclass
class GreedyScorePolicy:
    """
    One-ply greedy policy:
    choose the action that maximizes the acting player's current score.
    Ties keep the earliest legal action.
    """

    food_weight: float = 0.25

    def decide(self, state: GameState, legal_actions: Sequence[GameAction]) -> GameAction:
        if not legal_actions:
            raise ValueError("No legal actions available.")

        player_id = state.current_player
        best_action = legal_actions[0]
        best_value = float("-inf")
        for action in legal_actions:
            next_state = apply_action(state, action)
            player = next_state.players[player_id]
            value = float(player_score(player)) + self.food_weight * float(player.resources[Resource.FOOD])
            if value > best_value:
                best_value = value
                best_action = action
        return best_action
