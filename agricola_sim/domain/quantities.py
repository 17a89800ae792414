from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Mapping


class Resource(IntEnum):
    FOOD = 0
    WOOD = 1
    CLAY = 2
    STONE = 3
    REED = 4
    GRAIN = 5
    VEGETABLE = 6
    SHEEP = 7
    BOAR = 8
    CATTLE = 9

    @property
    def label(self) -> str:
        return self.name.lower()


ANIMALS: tuple[Resource, ...] = (Resource.SHEEP, Resource.BOAR, Resource.CATTLE)
CROPS: tuple[Resource, ...] = (Resource.GRAIN, Resource.VEGETABLE)
NUM_RESOURCES = len(Resource)

Cost = Mapping[Resource, int]


@dataclass(frozen=True)
class ResourceExchange:
    source: Resource
    target: Resource
    num_from: int
    num_to: int

    def describe(self) -> str:
        return f"{self.num_from} {self.source.label} -> {self.num_to} {self.target.label}"


class Quantities:
    """Fixed-length resource vector; slots never go negative."""

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[int] | Mapping[Resource, int] | None = None) -> None:
        self._values = [0] * NUM_RESOURCES
        if values is None:
            return
        if isinstance(values, Mapping):
            for resource, amount in values.items():
                self._values[Resource(resource)] += int(amount)
        else:
            raw = [int(value) for value in values]
            if len(raw) != NUM_RESOURCES:
                raise ValueError(f"Expected {NUM_RESOURCES} resource slots, got {len(raw)}.")
            self._values = raw
        if any(value < 0 for value in self._values):
            raise ValueError("Resource counts must be non-negative.")

    def __getitem__(self, resource: Resource) -> int:
        return self._values[resource]

    def __setitem__(self, resource: Resource, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot set {resource.label} to {amount}.")
        self._values[resource] = int(amount)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantities):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        held = ", ".join(
            f"{resource.label}={self._values[resource]}"
            for resource in Resource
            if self._values[resource]
        )
        return f"Quantities({held})"

    def copy(self) -> "Quantities":
        cloned = Quantities()
        cloned._values = list(self._values)
        return cloned

    def as_tuple(self) -> tuple[int, ...]:
        return tuple(self._values)

    def can_pay(self, cost: Cost) -> bool:
        return all(self._values[resource] >= amount for resource, amount in cost.items())

    def pay(self, cost: Cost) -> None:
        if not self.can_pay(cost):
            raise ValueError(f"Cannot pay {dict(cost)} from {self!r}.")
        for resource, amount in cost.items():
            self._values[resource] -= amount

    def take(self, bundle: Cost) -> None:
        for resource, amount in bundle.items():
            if amount < 0:
                raise ValueError(f"Cannot take a negative amount of {resource.label}.")
            self._values[resource] += amount

    def can_exchange(self, exchange: ResourceExchange) -> bool:
        return self._values[exchange.source] >= exchange.num_from

    def exchange(self, exchange: ResourceExchange) -> None:
        self.pay({exchange.source: exchange.num_from})
        self._values[exchange.target] += exchange.num_to

    def total_animals(self) -> int:
        return sum(self._values[animal] for animal in ANIMALS)
