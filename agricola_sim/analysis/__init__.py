"""Batch simulation and seeding helpers."""

from .seeding import derive_seed
from .simulation import (
    POLICY_NAMES,
    GameSummary,
    SimulationStats,
    build_policy,
    play_single_game,
    simulate_games,
)

__all__ = [
    "POLICY_NAMES",
    "GameSummary",
    "SimulationStats",
    "build_policy",
    "derive_seed",
    "play_single_game",
    "simulate_games",
]
