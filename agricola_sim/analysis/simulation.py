from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

from agricola_sim.game.engine import DEFAULT_TICK_LIMIT, EnginePolicy, GameEngine
from agricola_sim.game.policies import GreedyScorePolicy, RandomPolicy, WeightedRandomPolicy
from agricola_sim.game.scoring import fitness, scores
from agricola_sim.game.state import GameConfig, initialize_game_state

from .seeding import derive_seed

POLICY_NAMES = ("random", "weighted", "greedy")


@dataclass(frozen=True)
class GameSummary:
    seed: int
    scores: tuple[int, ...]
    fitness: tuple[int, ...]
    winners: tuple[int, ...]
    ticks: int
    finished: bool
    begging_tokens: tuple[int, ...]


@dataclass
class SimulationStats:
    player_count: int
    games: int = 0
    score_sums: list[float] = field(default_factory=list)
    fitness_sums: list[float] = field(default_factory=list)
    wins: list[float] = field(default_factory=list)
    tick_sum: float = 0.0

    def __post_init__(self) -> None:
        if not self.score_sums:
            self.score_sums = [0.0] * self.player_count
        if not self.fitness_sums:
            self.fitness_sums = [0.0] * self.player_count
        if not self.wins:
            self.wins = [0.0] * self.player_count

    def record(self, summary: GameSummary) -> None:
        self.games += 1
        self.tick_sum += float(summary.ticks)
        for player_id, score in enumerate(summary.scores):
            self.score_sums[player_id] += float(score)
        for player_id, margin in enumerate(summary.fitness):
            self.fitness_sums[player_id] += float(margin)
        # Shared wins are split between the tied players.
        if summary.winners:
            share = 1.0 / len(summary.winners)
            for player_id in summary.winners:
                self.wins[player_id] += share

    def average_score(self, player_id: int) -> float:
        if self.games <= 0:
            return 0.0
        return self.score_sums[player_id] / self.games

    def average_fitness(self, player_id: int) -> float:
        if self.games <= 0:
            return 0.0
        return self.fitness_sums[player_id] / self.games

    def win_rate(self, player_id: int) -> float:
        if self.games <= 0:
            return 0.0
        return self.wins[player_id] / self.games

    @property
    def average_ticks(self) -> float:
        if self.games <= 0:
            return 0.0
        return self.tick_sum / self.games


def build_policy(name: str, seed: int) -> EnginePolicy:
    if name == "random":
        return RandomPolicy(seed=seed)
    if name == "weighted":
        return WeightedRandomPolicy(seed=seed)
    if name == "greedy":
        return GreedyScorePolicy()
    raise ValueError(f"Unknown policy: {name}")


def play_single_game(
    *,
    player_count: int,
    seed: int,
    policy_names: Sequence[str],
    tick_limit: int = DEFAULT_TICK_LIMIT,
) -> GameSummary:
    if len(policy_names) != player_count:
        raise ValueError("Exactly one policy per player is required.")
    state = initialize_game_state(config=GameConfig(player_count=player_count, seed=seed))
    policies = {
        player_id: build_policy(name, derive_seed(seed, "policy", player_id))
        for player_id, name in enumerate(policy_names)
    }
    engine = GameEngine(state, policies=policies, tick_limit=tick_limit)
    winners = engine.play()
    final_state = engine.state
    return GameSummary(
        seed=seed,
        scores=tuple(scores(final_state)),
        fitness=tuple(fitness(final_state)),
        winners=tuple(winners),
        ticks=engine.ticks,
        finished=final_state.is_game_over(),
        begging_tokens=tuple(player.begging_tokens for player in final_state.players),
    )


def simulate_games(
    *,
    player_count: int,
    games: int,
    base_seed: int | None = None,
    policy_names: Sequence[str] | None = None,
    tick_limit: int = DEFAULT_TICK_LIMIT,
    on_game: Callable[[GameSummary], None] | None = None,
) -> tuple[SimulationStats, list[GameSummary]]:
    if games < 0:
        raise ValueError("games must be non-negative.")
    if base_seed is None:
        base_seed = random.SystemRandom().randrange(2**32)
    names = list(policy_names) if policy_names is not None else ["random"] * player_count

    stats = SimulationStats(player_count=player_count)
    summaries: list[GameSummary] = []
    for game_index in range(games):
        summary = play_single_game(
            player_count=player_count,
            seed=derive_seed(base_seed, "game", game_index),
            policy_names=names,
            tick_limit=tick_limit,
        )
        stats.record(summary)
        summaries.append(summary)
        if on_game is not None:
            on_game(summary)
    return stats, summaries
