"""Board, farmyard, and card models."""

from .board import (
    ACCUMULATION_YIELDS,
    FIXED_YIELDS,
    HIDDEN_STAGES,
    INITIAL_OPEN_SPACES,
    NUM_ACTION_SPACES,
    NUM_ROUNDS,
    ActionSpace,
)
from .cards import MAJOR_CARDS, MajorImprovement, Occupation
from .farm import (
    MAX_FENCES,
    MAX_STABLES,
    NUM_CELLS,
    Farm,
    FarmError,
    FarmyardSpace,
    GreedyReorgStrategy,
    ReorgStrategy,
    SpaceKind,
)
from .fencing import (
    MAX_PASTURES,
    PastureConfig,
    fencing_options,
    get_all_pasture_configs,
    get_best_fence_options,
    pasture_config_hash,
    pasture_sizes_from_hash,
)
from .quantities import ANIMALS, CROPS, Quantities, Resource, ResourceExchange

__all__ = [
    "ACCUMULATION_YIELDS",
    "ANIMALS",
    "ActionSpace",
    "CROPS",
    "FIXED_YIELDS",
    "Farm",
    "FarmError",
    "FarmyardSpace",
    "GreedyReorgStrategy",
    "HIDDEN_STAGES",
    "INITIAL_OPEN_SPACES",
    "MAJOR_CARDS",
    "MAX_FENCES",
    "MAX_PASTURES",
    "MAX_STABLES",
    "MajorImprovement",
    "NUM_ACTION_SPACES",
    "NUM_CELLS",
    "NUM_ROUNDS",
    "Occupation",
    "PastureConfig",
    "Quantities",
    "ReorgStrategy",
    "Resource",
    "ResourceExchange",
    "SpaceKind",
    "fencing_options",
    "get_all_pasture_configs",
    "get_best_fence_options",
    "pasture_config_hash",
    "pasture_sizes_from_hash",
]
