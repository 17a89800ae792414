from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Protocol, Sequence

from .quantities import ANIMALS, Quantities, Resource

if TYPE_CHECKING:
    from .fencing import PastureConfig

ROWS = 3
COLS = 5
NUM_CELLS = ROWS * COLS
INITIAL_ROOMS: tuple[int, ...] = (5, 10)
MAX_STABLES = 4
MAX_FENCES = 15

FENCE_GRID_ROWS = ROWS * 2 + 1
FENCE_GRID_COLS = COLS * 2 + 1
NUM_FENCE_SLOTS = FENCE_GRID_ROWS * FENCE_GRID_COLS

SOW_AMOUNTS: dict[Resource, int] = {
    Resource.GRAIN: 3,
    Resource.VEGETABLE: 2,
}

# Tie-break when choosing which animal to house first: larger animals win.
ANIMAL_PRIORITY: dict[Resource, int] = {
    Resource.CATTLE: 3,
    Resource.BOAR: 2,
    Resource.SHEEP: 1,
}


class Direction(str, Enum):
    NORTH = "north"
    EAST = "east"
    WEST = "west"
    SOUTH = "south"


_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (-1, 0),
    Direction.EAST: (0, 1),
    Direction.WEST: (0, -1),
    Direction.SOUTH: (1, 0),
}


def neighbor(idx: int, direction: Direction) -> int | None:
    row, col = divmod(idx, COLS)
    d_row, d_col = _OFFSETS[direction]
    row += d_row
    col += d_col
    if 0 <= row < ROWS and 0 <= col < COLS:
        return row * COLS + col
    return None


NEIGHBOR_SPACES: tuple[tuple[int | None, ...], ...] = tuple(
    tuple(neighbor(idx, direction) for direction in Direction) for idx in range(NUM_CELLS)
)


def neighbors(idx: int) -> list[int]:
    return [other for other in NEIGHBOR_SPACES[idx] if other is not None]


def fence_slot(idx: int, direction: Direction) -> int:
    """Index of the fence edge on one side of a cell in the doubled grid."""
    row, col = divmod(idx, COLS)
    center_row = row * 2 + 1
    center_col = col * 2 + 1
    d_row, d_col = _OFFSETS[direction]
    return (center_row + d_row) * FENCE_GRID_COLS + (center_col + d_col)


class SpaceKind(str, Enum):
    EMPTY = "empty"
    ROOM = "room"
    FIELD = "field"
    UNFENCED_STABLE = "unfenced_stable"
    FENCED_PASTURE = "fenced_pasture"


@dataclass(frozen=True)
class FarmyardSpace:
    kind: SpaceKind = SpaceKind.EMPTY
    crop: Resource | None = None
    animal: Resource | None = None
    amount: int = 0
    has_stable: bool = False

    @property
    def is_stabled(self) -> bool:
        return self.kind is SpaceKind.UNFENCED_STABLE or (
            self.kind is SpaceKind.FENCED_PASTURE and self.has_stable
        )

    def emptied(self) -> "FarmyardSpace":
        return replace(self, animal=None, amount=0)

    def key(self) -> tuple:
        return (
            self.kind.value,
            self.crop.label if self.crop is not None else None,
            self.animal.label if self.animal is not None else None,
            self.amount,
            self.has_stable,
        )


EMPTY_SPACE = FarmyardSpace()
ROOM_SPACE = FarmyardSpace(kind=SpaceKind.ROOM)

PastureGroup = tuple[list[int], int]


class FarmError(ValueError):
    """Raised when a farmyard placement violates its precondition."""


class ReorgStrategy(Protocol):
    def order_groups(self, groups: Sequence[PastureGroup]) -> list[PastureGroup]:
        ...

    def choose_animal(self, animals: Quantities) -> Resource | None:
        ...


class GreedyReorgStrategy:
    """Largest pasture first, stocked with the currently most numerous animal."""

    def order_groups(self, groups: Sequence[PastureGroup]) -> list[PastureGroup]:
        return sorted(groups, key=lambda group: (-group[1], group[0][0]))

    def choose_animal(self, animals: Quantities) -> Resource | None:
        candidates = [animal for animal in ANIMALS if animals[animal] > 0]
        if not candidates:
            return None
        return max(candidates, key=lambda animal: (animals[animal], ANIMAL_PRIORITY[animal]))


DEFAULT_REORG_STRATEGY = GreedyReorgStrategy()


def _initial_spaces() -> list[FarmyardSpace]:
    spaces = [EMPTY_SPACE] * NUM_CELLS
    for idx in INITIAL_ROOMS:
        spaces[idx] = ROOM_SPACE
    return spaces


def _check_index(idx: int) -> None:
    if not 0 <= idx < NUM_CELLS:
        raise FarmError(f"Farmyard index out of range: {idx}.")


@dataclass
class Farm:
    spaces: list[FarmyardSpace] = field(default_factory=_initial_spaces)
    fences: list[bool] = field(default_factory=lambda: [False] * NUM_FENCE_SLOTS)
    pet: Resource | None = None

    def clone(self) -> "Farm":
        return Farm(spaces=list(self.spaces), fences=list(self.fences), pet=self.pet)

    def key(self) -> tuple:
        return (
            tuple(space.key() for space in self.spaces),
            tuple(slot for slot, fenced in enumerate(self.fences) if fenced),
            self.pet.label if self.pet is not None else None,
        )

    def indices_of(self, kind: SpaceKind) -> list[int]:
        return [idx for idx, space in enumerate(self.spaces) if space.kind is kind]

    def room_indices(self) -> list[int]:
        return self.indices_of(SpaceKind.ROOM)

    def field_indices(self) -> list[int]:
        return self.indices_of(SpaceKind.FIELD)

    def empty_indices(self) -> list[int]:
        return self.indices_of(SpaceKind.EMPTY)

    @property
    def room_count(self) -> int:
        return len(self.room_indices())

    @property
    def fences_used(self) -> int:
        return sum(1 for fenced in self.fences if fenced)

    @property
    def stable_count(self) -> int:
        return sum(1 for space in self.spaces if space.is_stabled)

    @property
    def fenced_stable_count(self) -> int:
        return sum(1 for space in self.spaces if space.kind is SpaceKind.FENCED_PASTURE and space.has_stable)

    def can_build_stable(self) -> bool:
        if self.stable_count >= MAX_STABLES:
            return False
        return any(self._stable_eligible(space) for space in self.spaces)

    def can_sow(self) -> bool:
        return any(
            space.kind is SpaceKind.FIELD and space.crop is None for space in self.spaces
        )

    def crop_totals(self) -> dict[Resource, int]:
        totals = {Resource.GRAIN: 0, Resource.VEGETABLE: 0}
        for space in self.spaces:
            if space.kind is SpaceKind.FIELD and space.crop is not None:
                totals[space.crop] += space.amount
        return totals

    def animal_totals(self) -> dict[Resource, int]:
        totals = {animal: 0 for animal in ANIMALS}
        for space in self.spaces:
            if space.animal is not None:
                totals[space.animal] += space.amount
        if self.pet is not None:
            totals[self.pet] += 1
        return totals

    def existing_pastures(self) -> list[list[int]]:
        return [cells for cells, _ in self._fenced_groups()]

    def possible_room_positions(self) -> list[int]:
        rooms = set(self.room_indices())
        return [
            idx
            for idx in self.empty_indices()
            if any(other in rooms for other in neighbors(idx))
        ]

    def possible_field_positions(self) -> list[int]:
        fields = set(self.field_indices())
        empties = self.empty_indices()
        if not fields:
            return empties
        return [idx for idx in empties if any(other in fields for other in neighbors(idx))]

    def possible_stable_positions(self) -> list[int]:
        if self.stable_count >= MAX_STABLES:
            return []
        return [idx for idx, space in enumerate(self.spaces) if self._stable_eligible(space)]

    def best_room_positions(self) -> list[int]:
        return self._best_positions(self.possible_room_positions(), {SpaceKind.ROOM})

    def best_field_positions(self) -> list[int]:
        return self._best_positions(self.possible_field_positions(), {SpaceKind.FIELD})

    def best_stable_positions(self) -> list[int]:
        return self._best_positions(
            self.possible_stable_positions(),
            {SpaceKind.UNFENCED_STABLE, SpaceKind.FENCED_PASTURE},
        )

    def placement_score(self, idx: int, same_kinds: set[SpaceKind]) -> int:
        score = 0
        for other in NEIGHBOR_SPACES[idx]:
            if other is None:
                score += 2
                continue
            kind = self.spaces[other].kind
            if kind in same_kinds:
                score += 1
            elif kind is not SpaceKind.EMPTY:
                score -= 1
        return score

    def _best_positions(self, candidates: Iterable[int], same_kinds: set[SpaceKind]) -> list[int]:
        scored = [(self.placement_score(idx, same_kinds), idx) for idx in candidates]
        if not scored:
            return []
        best = max(score for score, _ in scored)
        return [idx for score, idx in scored if score == best]

    @staticmethod
    def _stable_eligible(space: FarmyardSpace) -> bool:
        if space.kind is SpaceKind.EMPTY:
            return True
        return space.kind is SpaceKind.FENCED_PASTURE and not space.has_stable

    def build_room(self, idx: int) -> None:
        _check_index(idx)
        if self.spaces[idx].kind is not SpaceKind.EMPTY:
            raise FarmError(f"Cannot build a room on {self.spaces[idx].kind.value} cell {idx}.")
        self.spaces[idx] = ROOM_SPACE

    def build_field(self, idx: int) -> None:
        _check_index(idx)
        if self.spaces[idx].kind is not SpaceKind.EMPTY:
            raise FarmError(f"Cannot plow {self.spaces[idx].kind.value} cell {idx}.")
        self.spaces[idx] = FarmyardSpace(kind=SpaceKind.FIELD)

    def build_stable(self, idx: int) -> None:
        _check_index(idx)
        space = self.spaces[idx]
        if not self._stable_eligible(space):
            raise FarmError(f"Cannot build a stable on {space.kind.value} cell {idx}.")
        if self.stable_count >= MAX_STABLES:
            raise FarmError("All stables are already built.")
        if space.kind is SpaceKind.EMPTY:
            self.spaces[idx] = FarmyardSpace(kind=SpaceKind.UNFENCED_STABLE)
        else:
            self.spaces[idx] = replace(space, has_stable=True)

    def fence_spaces(self, config: "PastureConfig") -> int:
        """Fence every pasture of ``config`` and return the number of new fences."""
        placed = 0
        for cells in config.pastures:
            members = set(cells)
            for idx in cells:
                _check_index(idx)
                space = self.spaces[idx]
                if space.kind in (SpaceKind.ROOM, SpaceKind.FIELD):
                    raise FarmError(f"Cannot fence {space.kind.value} cell {idx}.")
                for direction in Direction:
                    if neighbor(idx, direction) in members:
                        continue
                    slot = fence_slot(idx, direction)
                    if not self.fences[slot]:
                        self.fences[slot] = True
                        placed += 1
                if space.kind is not SpaceKind.FENCED_PASTURE:
                    self.spaces[idx] = FarmyardSpace(
                        kind=SpaceKind.FENCED_PASTURE,
                        animal=space.animal,
                        amount=space.amount,
                        has_stable=space.kind is SpaceKind.UNFENCED_STABLE,
                    )
        if self.fences_used > MAX_FENCES:
            raise FarmError(f"Fence limit exceeded: {self.fences_used} > {MAX_FENCES}.")
        return placed

    def sow_field(self, crop: Resource) -> int:
        if crop not in SOW_AMOUNTS:
            raise FarmError(f"Cannot sow {crop.label}.")
        for idx, space in enumerate(self.spaces):
            if space.kind is SpaceKind.FIELD and space.crop is None:
                self.spaces[idx] = replace(space, crop=crop, amount=SOW_AMOUNTS[crop])
                return idx
        raise FarmError("No empty field to sow.")

    def harvest_fields(self) -> list[Resource]:
        harvested: list[Resource] = []
        for idx, space in enumerate(self.spaces):
            if space.kind is not SpaceKind.FIELD or space.crop is None:
                continue
            harvested.append(space.crop)
            remaining = space.amount - 1
            if remaining <= 0:
                self.spaces[idx] = FarmyardSpace(kind=SpaceKind.FIELD)
            else:
                self.spaces[idx] = replace(space, amount=remaining)
        return harvested

    def _fenced_groups(self) -> list[PastureGroup]:
        pasture_cells = self.indices_of(SpaceKind.FENCED_PASTURE)
        labels = {idx: idx for idx in pasture_cells}
        changed = True
        while changed:
            changed = False
            for idx in pasture_cells:
                for direction in Direction:
                    other = neighbor(idx, direction)
                    if other not in labels or self.fences[fence_slot(idx, direction)]:
                        continue
                    smallest = min(labels[idx], labels[other])
                    if labels[idx] != smallest or labels[other] != smallest:
                        labels[idx] = labels[other] = smallest
                        changed = True

        groups: dict[int, list[int]] = {}
        for idx in pasture_cells:
            groups.setdefault(labels[idx], []).append(idx)

        result: list[PastureGroup] = []
        for label in sorted(groups):
            cells = groups[label]
            stables = sum(1 for idx in cells if self.spaces[idx].has_stable)
            capacity = 2 * len(cells) * (2 * stables if stables > 0 else 1)
            result.append((cells, capacity))
        return result

    def pastures_and_capacities(self) -> list[PastureGroup]:
        groups = self._fenced_groups()
        unfenced = self.indices_of(SpaceKind.UNFENCED_STABLE)
        if unfenced:
            groups.append((unfenced, len(unfenced)))
        return groups

    def total_capacity(self) -> int:
        return sum(capacity for _, capacity in self.pastures_and_capacities()) + 1

    def reorg_animals(
        self,
        animals: Quantities,
        breed: bool = False,
        strategy: ReorgStrategy | None = None,
    ) -> None:
        """Rehouse every animal; leftovers that fit nowhere stay in ``animals``."""
        strategy = strategy or DEFAULT_REORG_STRATEGY
        for idx, space in enumerate(self.spaces):
            if space.animal is not None:
                animals[space.animal] += space.amount
                self.spaces[idx] = space.emptied()
        if self.pet is not None:
            animals[self.pet] += 1
            self.pet = None

        if breed:
            for animal in ANIMALS:
                if animals[animal] > 1:
                    animals[animal] += 1

        for cells, capacity in strategy.order_groups(self.pastures_and_capacities()):
            animal = strategy.choose_animal(animals)
            if animal is None:
                break
            per_cell = capacity // len(cells)
            for idx in cells:
                placed = min(per_cell, animals[animal])
                if placed <= 0:
                    break
                self.spaces[idx] = replace(self.spaces[idx], animal=animal, amount=placed)
                animals[animal] -= placed

        pet = strategy.choose_animal(animals)
        if pet is not None:
            animals[pet] -= 1
            self.pet = pet

    def remove_animal(self, animal: Resource) -> bool:
        if self.pet is animal:
            self.pet = None
            return True
        for idx, space in enumerate(self.spaces):
            if space.animal is animal and space.amount > 0:
                remaining = space.amount - 1
                if remaining == 0:
                    self.spaces[idx] = space.emptied()
                else:
                    self.spaces[idx] = replace(space, amount=remaining)
                return True
        return False

    def layout_rows(self) -> list[str]:
        symbols = {
            SpaceKind.EMPTY: ".",
            SpaceKind.ROOM: "R",
            SpaceKind.FIELD: "F",
            SpaceKind.UNFENCED_STABLE: "S",
            SpaceKind.FENCED_PASTURE: "P",
        }
        rows: list[str] = []
        for row in range(ROWS):
            cells = []
            for col in range(COLS):
                space = self.spaces[row * COLS + col]
                symbol = symbols[space.kind]
                if space.kind is SpaceKind.FENCED_PASTURE and space.has_stable:
                    symbol = "Q"
                cells.append(symbol)
            rows.append(" ".join(cells))
        return rows
