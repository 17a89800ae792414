"""Game state, rules, and engine wrapper for full-game simulation."""

from .actions import (
    ACTION_BAKE_BREAD,
    ACTION_BUILD_CARD,
    ACTION_BUILD_MAJOR,
    ACTION_BUILD_ROOM,
    ACTION_BUILD_STABLE,
    ACTION_CHILDLESS_BONUS,
    ACTION_CONVERT,
    ACTION_END_GAME,
    ACTION_END_TURN,
    ACTION_FENCE,
    ACTION_GROW_FAMILY,
    ACTION_HARVEST,
    ACTION_PAY_FOOD_OR_BEG,
    ACTION_PLACE_WORKER,
    ACTION_PLAY_OCCUPATION,
    ACTION_PLOW,
    ACTION_PRE_HARVEST,
    ACTION_RENOVATE,
    ACTION_SOW,
    ACTION_START_ROUND,
    ACTION_USE_SPACE,
    GameAction,
    TurnContext,
    bake_bread,
    build_card,
    build_major,
    build_room,
    build_stable,
    childless_bonus,
    convert,
    end_game,
    end_turn,
    fence,
    grow_family,
    harvest,
    make_action,
    pay_food_or_beg,
    place_worker,
    play_occupation,
    plow,
    pre_harvest,
    renovate,
    sow,
    start_round,
    use_space,
)
from .engine import (
    ActionOutcome,
    EnginePolicy,
    FirstLegalPolicy,
    GameAccumulator,
    GameEngine,
    action_outcome_spectrum,
    expand_action_spectrum,
)
from .hashing import get_hash, state_key
from .policies import GreedyScorePolicy, RandomPolicy, WeightedRandomPolicy
from .rules import (
    PHASE_TRANSITIONS,
    IllegalActionError,
    apply_action,
    apply_choice,
    list_legal_actions,
    next_choices,
    run_forced_action,
    space_available,
)
from .scoring import ScoreBreakdown, fitness, player_score, score_breakdown, scores
from .state import (
    GameConfig,
    GamePhase,
    GameState,
    HouseMaterial,
    PlayerState,
    initialize_game_state,
)

__all__ = [
    "ACTION_BAKE_BREAD",
    "ACTION_BUILD_CARD",
    "ACTION_BUILD_MAJOR",
    "ACTION_BUILD_ROOM",
    "ACTION_BUILD_STABLE",
    "ACTION_CHILDLESS_BONUS",
    "ACTION_CONVERT",
    "ACTION_END_GAME",
    "ACTION_END_TURN",
    "ACTION_FENCE",
    "ACTION_GROW_FAMILY",
    "ACTION_HARVEST",
    "ACTION_PAY_FOOD_OR_BEG",
    "ACTION_PLACE_WORKER",
    "ACTION_PLAY_OCCUPATION",
    "ACTION_PLOW",
    "ACTION_PRE_HARVEST",
    "ACTION_RENOVATE",
    "ACTION_SOW",
    "ACTION_START_ROUND",
    "ACTION_USE_SPACE",
    "ActionOutcome",
    "EnginePolicy",
    "FirstLegalPolicy",
    "GameAccumulator",
    "GameAction",
    "GameConfig",
    "GameEngine",
    "GamePhase",
    "GameState",
    "GreedyScorePolicy",
    "HouseMaterial",
    "IllegalActionError",
    "PHASE_TRANSITIONS",
    "PlayerState",
    "RandomPolicy",
    "ScoreBreakdown",
    "TurnContext",
    "WeightedRandomPolicy",
    "action_outcome_spectrum",
    "apply_action",
    "apply_choice",
    "bake_bread",
    "build_card",
    "build_major",
    "build_room",
    "build_stable",
    "childless_bonus",
    "convert",
    "end_game",
    "end_turn",
    "expand_action_spectrum",
    "fence",
    "fitness",
    "get_hash",
    "grow_family",
    "harvest",
    "initialize_game_state",
    "list_legal_actions",
    "make_action",
    "next_choices",
    "pay_food_or_beg",
    "place_worker",
    "play_occupation",
    "player_score",
    "plow",
    "pre_harvest",
    "renovate",
    "run_forced_action",
    "score_breakdown",
    "scores",
    "sow",
    "space_available",
    "start_round",
    "state_key",
    "use_space",
]
