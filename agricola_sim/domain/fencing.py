"""Pasture enumeration for the 3x5 farmyard.

Pastures are handled as bitmasks over the 15 farmyard cells while enumerating;
results are exposed as sorted cell tuples inside :class:`PastureConfig`.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Sequence

from .farm import (
    INITIAL_ROOMS,
    MAX_FENCES,
    NUM_CELLS,
    Direction,
    Farm,
    neighbor,
    neighbors,
)

MAX_PASTURES = 4
PRIMES: tuple[int, ...] = (2, 3, 5, 7, 11)
FULL_MASK = (1 << NUM_CELLS) - 1

_NEIGHBOR_MASKS: tuple[int, ...] = tuple(
    sum(1 << other for other in neighbors(idx)) for idx in range(NUM_CELLS)
)
_FORWARD_NEIGHBORS: tuple[tuple[int, ...], ...] = tuple(
    tuple(
        other
        for other in (neighbor(idx, Direction.EAST), neighbor(idx, Direction.SOUTH))
        if other is not None
    )
    for idx in range(NUM_CELLS)
)
_ROOM_MASK = sum(1 << idx for idx in INITIAL_ROOMS)


@dataclass(frozen=True)
class PastureConfig:
    pastures: tuple[tuple[int, ...], ...]
    wood: int
    size_hash: int
    extensions: int = 0

    @property
    def sizes(self) -> tuple[int, ...]:
        return tuple(sorted(len(cells) for cells in self.pastures))

    @property
    def cells(self) -> frozenset[int]:
        return frozenset(idx for cells in self.pastures for idx in cells)

    def describe(self) -> str:
        groups = " ".join("{" + ",".join(str(idx) for idx in cells) + "}" for cells in self.pastures)
        return f"{groups} wood={self.wood}"


def pasture_config_hash(sizes: Iterable[int]) -> int:
    ordered = sorted(sizes)
    if len(ordered) > len(PRIMES):
        raise ValueError(f"At most {len(PRIMES)} pastures can be hashed.")
    value = 1
    for prime, size in zip(PRIMES, ordered):
        value *= prime**size
    return value


def pasture_sizes_from_hash(value: int) -> list[int]:
    sizes: list[int] = []
    for prime in PRIMES:
        exponent = 0
        while value % prime == 0:
            value //= prime
            exponent += 1
        if exponent == 0:
            break
        sizes.append(exponent)
    return sizes


def _mask_of(cells: Iterable[int]) -> int:
    mask = 0
    for idx in cells:
        mask |= 1 << idx
    return mask


def _cells_of(mask: int) -> tuple[int, ...]:
    return tuple(idx for idx in range(NUM_CELLS) if mask >> idx & 1)


def _wood_required(mask: int) -> int:
    # Perimeter: every side of a cell not shared with another cell of the shape.
    wood = 0
    for idx in _cells_of(mask):
        wood += 4 - (_NEIGHBOR_MASKS[idx] & mask).bit_count()
    return wood


def _shared_boundary(mask: int, other: int) -> int:
    return sum((_NEIGHBOR_MASKS[idx] & other).bit_count() for idx in _cells_of(mask))


def _touch_mask(mask: int) -> int:
    touching = 0
    for idx in _cells_of(mask):
        touching |= _NEIGHBOR_MASKS[idx]
    return touching & ~mask


def _breaks_connectivity(pasture_mask: int, blocked_mask: int) -> bool:
    visited = pasture_mask | blocked_mask | _ROOM_MASK
    queue = deque(INITIAL_ROOMS)
    while queue:
        idx = queue.popleft()
        for other in neighbors(idx):
            bit = 1 << other
            if visited & bit:
                continue
            visited |= bit
            queue.append(other)
    return visited != FULL_MASK


def _single_pastures(blocked_mask: int) -> list[tuple[int, int]]:
    seen: set[int] = set()
    queue: deque[int] = deque()
    for idx in range(NUM_CELLS):
        bit = 1 << idx
        if blocked_mask & bit or bit in seen:
            continue
        seen.add(bit)
        queue.append(bit)

    while queue:
        mask = queue.popleft()
        for idx in _cells_of(mask):
            for other in _FORWARD_NEIGHBORS[idx]:
                bit = 1 << other
                if (blocked_mask | mask) & bit:
                    continue
                grown = mask | bit
                if grown not in seen:
                    seen.add(grown)
                    queue.append(grown)

    shapes = [(mask, _wood_required(mask)) for mask in seen]
    shapes = [(mask, wood) for mask, wood in shapes if wood <= MAX_FENCES]
    return _keep_min_wood(shapes, key=lambda item: item[0].bit_count())


def _keep_min_wood(items: Sequence, key) -> list:
    best: dict[int, int] = {}
    for item in items:
        group = key(item)
        wood = item[1]
        if group not in best or wood < best[group]:
            best[group] = wood
    return [item for item in items if item[1] == best[key(item)]]


def _is_future_extension(candidate: Sequence[int], existing: Sequence[int]) -> bool:
    """True if ``candidate`` only subdivides ``existing`` and/or adds pastures."""
    existing_mask = 0
    for group in existing:
        existing_mask |= group
    covered = 0
    for group in candidate:
        if group & existing_mask == 0:
            continue
        if not any(group & ~other == 0 for other in existing):
            return False
        covered |= group
    return covered == existing_mask


def is_future_extension(candidate: PastureConfig, existing: PastureConfig) -> bool:
    candidate_masks = [_mask_of(cells) for cells in candidate.pastures]
    existing_masks = [_mask_of(cells) for cells in existing.pastures]
    if sorted(candidate_masks) == sorted(existing_masks):
        return False
    return _is_future_extension(candidate_masks, existing_masks)


@lru_cache(maxsize=512)
def _enumerate_configs(blocked_mask: int) -> tuple[PastureConfig, ...]:
    singles = _single_pastures(blocked_mask)

    # (sorted pasture masks, union mask, wood)
    accepted: list[tuple[tuple[int, ...], int, int]] = []
    seen: set[tuple[int, ...]] = set()
    for mask, wood in singles:
        if _breaks_connectivity(mask, blocked_mask):
            continue
        seen.add((mask,))
        accepted.append(((mask,), mask, wood))

    frontier = list(accepted)
    for _ in range(MAX_PASTURES - 1):
        grown: list[tuple[tuple[int, ...], int, int]] = []
        for groups, union, wood in frontier:
            touching = _touch_mask(union)
            for mask, single_wood in singles:
                if mask & union or not mask & touching:
                    continue
                shared = _shared_boundary(mask, union)
                total = wood + single_wood - shared
                if total > MAX_FENCES:
                    continue
                combined = tuple(sorted(groups + (mask,)))
                if combined in seen:
                    continue
                seen.add(combined)
                if _breaks_connectivity(union | mask, blocked_mask):
                    continue
                grown.append((combined, union | mask, total))
        accepted.extend(grown)
        frontier = grown

    hashed = [
        (groups, wood, pasture_config_hash(group.bit_count() for group in groups))
        for groups, _, wood in accepted
    ]
    cheapest = _keep_min_wood(hashed, key=lambda item: item[2])

    configs: list[PastureConfig] = []
    for groups, wood, size_hash in cheapest:
        extensions = sum(
            1
            for other, _, _ in cheapest
            if other != groups and _is_future_extension(other, groups)
        )
        configs.append(
            PastureConfig(
                pastures=tuple(sorted(_cells_of(group) for group in groups)),
                wood=wood,
                size_hash=size_hash,
                extensions=extensions,
            )
        )
    configs.sort(key=lambda config: (config.wood, config.size_hash, config.pastures))
    return tuple(configs)


def get_all_pasture_configs(farm: Farm) -> list[PastureConfig]:
    blocked = _mask_of(farm.room_indices()) | _mask_of(farm.field_indices())
    configs = _enumerate_configs(blocked)
    existing = [_mask_of(cells) for cells in farm.existing_pastures()]
    if not existing:
        return list(configs)
    existing_sorted = sorted(existing)
    result = []
    for config in configs:
        masks = [_mask_of(cells) for cells in config.pastures]
        if sorted(masks) == existing_sorted:
            continue
        if _is_future_extension(masks, existing):
            result.append(config)
    return result


def get_best_fence_options(
    configs: Sequence[PastureConfig],
    fences_used: int,
    wood_available: int,
) -> list[PastureConfig]:
    affordable = [
        config
        for config in configs
        if 0 < config.wood - fences_used <= wood_available and config.wood <= MAX_FENCES
    ]
    cheapest: dict[int, int] = {}
    for config in affordable:
        if config.size_hash not in cheapest or config.wood < cheapest[config.size_hash]:
            cheapest[config.size_hash] = config.wood
    candidates = [config for config in affordable if config.wood == cheapest[config.size_hash]]

    most_extensions: dict[int, int] = {}
    for config in candidates:
        current = most_extensions.get(config.size_hash, -1)
        most_extensions[config.size_hash] = max(current, config.extensions)
    return [
        config
        for config in candidates
        if config.extensions == most_extensions[config.size_hash]
    ]


def fencing_options(farm: Farm, wood_available: int) -> list[PastureConfig]:
    return get_best_fence_options(get_all_pasture_configs(farm), farm.fences_used, wood_available)
