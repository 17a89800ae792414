from __future__ import annotations

from dataclasses import dataclass

from agricola_sim.domain.cards import major_points
from agricola_sim.domain.farm import SpaceKind
from agricola_sim.domain.quantities import Resource

from .state import GameState, HouseMaterial, PlayerState

# Index = count held; counts past the end score the last entry.
FIELD_SCORE = (-1, -1, 1, 2, 3, 4)
PASTURE_SCORE = (-1, 1, 2, 3, 4)
GRAIN_SCORE = (-1, 1, 1, 1, 2, 2, 3, 3, 4)
VEGETABLE_SCORE = (-1, 1, 2, 3, 4)
SHEEP_SCORE = (-1, 1, 1, 1, 2, 2, 3, 3, 4)
BOAR_SCORE = (-1, 1, 1, 2, 2, 3, 3, 4)
CATTLE_SCORE = (-1, 1, 2, 2, 3, 3, 4)

ROOM_POINTS: dict[HouseMaterial, int] = {
    HouseMaterial.WOOD: 0,
    HouseMaterial.CLAY: 1,
    HouseMaterial.STONE: 2,
}
FAMILY_MEMBER_POINTS = 3
BEGGING_TOKEN_POINTS = -3
UNUSED_SPACE_POINTS = -1
STABLE_POINTS = 1


def table_score(table: tuple[int, ...], count: int) -> int:
    return table[min(max(count, 0), len(table) - 1)]


@dataclass(frozen=True)
class ScoreBreakdown:
    fields: int
    pastures: int
    grain: int
    vegetables: int
    sheep: int
    boar: int
    cattle: int
    unused_spaces: int
    stables: int
    rooms: int
    family: int
    begging: int
    majors: int

    @property
    def total(self) -> int:
        return (
            self.fields
            + self.pastures
            + self.grain
            + self.vegetables
            + self.sheep
            + self.boar
            + self.cattle
            + self.unused_spaces
            + self.stables
            + self.rooms
            + self.family
            + self.begging
            + self.majors
        )


def score_breakdown(player: PlayerState) -> ScoreBreakdown:
    farm = player.farm
    resources = player.resources
    crops = farm.crop_totals()
    animals = farm.animal_totals()
    return ScoreBreakdown(
        fields=table_score(FIELD_SCORE, len(farm.field_indices())),
        pastures=table_score(PASTURE_SCORE, len(farm.existing_pastures())),
        grain=table_score(GRAIN_SCORE, resources[Resource.GRAIN] + crops[Resource.GRAIN]),
        vegetables=table_score(VEGETABLE_SCORE, resources[Resource.VEGETABLE] + crops[Resource.VEGETABLE]),
        sheep=table_score(SHEEP_SCORE, resources[Resource.SHEEP] + animals[Resource.SHEEP]),
        boar=table_score(BOAR_SCORE, resources[Resource.BOAR] + animals[Resource.BOAR]),
        cattle=table_score(CATTLE_SCORE, resources[Resource.CATTLE] + animals[Resource.CATTLE]),
        unused_spaces=UNUSED_SPACE_POINTS * len(farm.indices_of(SpaceKind.EMPTY)),
        stables=STABLE_POINTS * farm.fenced_stable_count,
        rooms=ROOM_POINTS[player.house] * farm.room_count,
        family=FAMILY_MEMBER_POINTS * player.family_size,
        begging=BEGGING_TOKEN_POINTS * player.begging_tokens,
        majors=sum(major_points(card, resources) for card in player.majors),
    )


def player_score(player: PlayerState) -> int:
    return score_breakdown(player).total


def scores(state: GameState) -> list[int]:
    return [player_score(player) for player in state.players]


def fitness(state: GameState) -> list[int]:
    """Margin to the best opponent: the leader's lead, everyone else's deficit."""
    totals = scores(state)
    if len(totals) == 1:
        return list(totals)
    result = []
    for index, total in enumerate(totals):
        best_other = max(other for other_index, other in enumerate(totals) if other_index != index)
        result.append(total - best_other)
    return result
