from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from .actions import ACTION_START_ROUND, GameAction
from .rules import apply_action, next_choices
from .scoring import scores
from .state import GamePhase, GameState

DEFAULT_TICK_LIMIT = 20_000


@dataclass(frozen=True)
class ActionOutcome:
    state: GameState
    probability: float


class EnginePolicy(Protocol):
    def decide(self, state: GameState, legal_actions: Sequence[GameAction]) -> GameAction:
        ...


class GameAccumulator(Protocol):
    def before(self, engine: "GameEngine") -> None:
        ...

    def step(self, engine_before_action: "GameEngine", action: GameAction) -> None:
        ...

    def after(self, engine: "GameEngine") -> None:
        ...


class FirstLegalPolicy:
    """Deterministic fallback policy used when no policy is provided."""

    def decide(self, state: GameState, legal_actions: Sequence[GameAction]) -> GameAction:
        if not legal_actions:
            raise ValueError("No legal actions available.")
        return legal_actions[0]


class GameEngine:
    """
    Thin game-loop wrapper around GameState + legal/apply functions.

    - cached legal actions per state
    - per-tick policy decision for the current player
    - optional accumulator hooks
    """

    def __init__(
        self,
        state: GameState,
        *,
        policies: Mapping[int, EnginePolicy] | None = None,
        tick_limit: int = DEFAULT_TICK_LIMIT,
    ) -> None:
        self.state = state
        self.policies = dict(policies or {})
        self.tick_limit = max(1, int(tick_limit))
        self.ticks = 0
        self._default_policy: EnginePolicy = FirstLegalPolicy()
        self._legal_cache: tuple[int, list[GameAction]] | None = None

    def copy(self) -> "GameEngine":
        engine = GameEngine(
            self.state.clone(),
            policies=self.policies,
            tick_limit=self.tick_limit,
        )
        engine.ticks = self.ticks
        return engine

    @property
    def legal_actions(self) -> list[GameAction]:
        cached = self._legal_cache
        if cached is not None and cached[0] == id(self.state):
            return cached[1]
        actions = next_choices(self.state)
        self._legal_cache = (id(self.state), actions)
        return actions

    @property
    def winning_player_ids(self) -> list[int]:
        if not self.state.is_game_over():
            return []
        totals = scores(self.state)
        best = max(totals)
        return [player_id for player_id, total in enumerate(totals) if total == best]

    def is_finished(self) -> bool:
        return self.state.phase is GamePhase.GAME_OVER or self.ticks >= self.tick_limit

    def execute(self, action: GameAction, *, validate_action: bool = True) -> GameState:
        if validate_action and action not in self.legal_actions:
            raise ValueError(f"{action.describe()} is not legal in phase {self.state.phase.value}.")
        self.state = apply_action(self.state, action)
        self.ticks += 1
        return self.state

    def play_tick(self, *, accumulators: Sequence[GameAccumulator] = ()) -> GameAction | None:
        if self.is_finished():
            return None
        legal_actions = self.legal_actions
        if not legal_actions:
            return None

        current_player = self.state.current_player
        policy = self.policies.get(current_player, self._default_policy)
        action = policy.decide(self.state, legal_actions)
        if action not in legal_actions:
            raise ValueError(
                f"Policy for player {current_player} returned illegal action: {action.describe()}."
            )

        if accumulators:
            before = self.copy()
            for accumulator in accumulators:
                accumulator.step(before, action)
        self.execute(action, validate_action=False)
        return action

    def play(self, *, accumulators: Sequence[GameAccumulator] = ()) -> list[int]:
        for accumulator in accumulators:
            accumulator.before(self)

        while not self.is_finished():
            if self.play_tick(accumulators=accumulators) is None:
                break

        for accumulator in accumulators:
            accumulator.after(self)
        return self.winning_player_ids


def action_outcome_spectrum(state: GameState, action: GameAction) -> list[ActionOutcome]:
    """
    Expand one legal action into its possible outcomes.

    Starting a round reveals a card that is hidden from the players, so search
    code sees one outcome per card still in the current stage.
    """
    if action.kind == ACTION_START_ROUND and state.hidden_stages:
        return _reveal_outcomes(state, action)
    return [ActionOutcome(state=apply_action(state, action), probability=1.0)]


def expand_action_spectrum(
    state: GameState,
    actions: Sequence[GameAction],
) -> list[tuple[GameAction, list[ActionOutcome]]]:
    return [(action, action_outcome_spectrum(state, action)) for action in actions]


def _reveal_outcomes(state: GameState, action: GameAction) -> list[ActionOutcome]:
    stage = state.hidden_stages[0]
    probability = 1.0 / float(len(stage))
    outcomes: list[ActionOutcome] = []
    for card_index in range(len(stage)):
        forced_state = state.clone()
        forced_stage = forced_state.hidden_stages[0]
        forced_stage.insert(0, forced_stage.pop(card_index))
        outcomes.append(ActionOutcome(state=apply_action(forced_state, action), probability=probability))
    return outcomes
