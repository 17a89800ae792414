import unittest

from agricola_sim.domain.farm import (
    INITIAL_ROOMS,
    MAX_STABLES,
    NUM_FENCE_SLOTS,
    Farm,
    FarmError,
    SpaceKind,
)
from agricola_sim.domain.fencing import PastureConfig, pasture_config_hash
from agricola_sim.domain.quantities import Quantities, Resource


def _config(*pastures: tuple[int, ...], wood: int) -> PastureConfig:
    return PastureConfig(
        pastures=tuple(sorted(pastures)),
        wood=wood,
        size_hash=pasture_config_hash(len(cells) for cells in pastures),
    )


def _animal_sum(farm: Farm, store: Quantities, animal: Resource) -> int:
    return farm.animal_totals()[animal] + store[animal]


class FarmLayoutTests(unittest.TestCase):
    def test_initial_farm_has_two_rooms_and_no_fences(self) -> None:
        farm = Farm()
        self.assertEqual(farm.room_indices(), list(INITIAL_ROOMS))
        self.assertEqual(len(farm.fences), NUM_FENCE_SLOTS)
        self.assertEqual(farm.fences_used, 0)
        self.assertEqual(farm.layout_rows()[1], "R . . . .")

    def test_best_positions_on_initial_farm(self) -> None:
        farm = Farm()
        self.assertEqual(farm.best_room_positions(), [0])
        self.assertEqual(farm.best_field_positions(), [4, 14])
        self.assertEqual(farm.best_stable_positions(), [4, 14])

    def test_fields_must_grow_next_to_existing_fields(self) -> None:
        farm = Farm()
        farm.build_field(4)
        self.assertEqual(sorted(farm.possible_field_positions()), [3, 9])

    def test_build_on_occupied_cell_raises(self) -> None:
        farm = Farm()
        with self.assertRaises(FarmError):
            farm.build_room(5)
        farm.build_field(4)
        with self.assertRaises(FarmError):
            farm.build_stable(4)
        with self.assertRaises(FarmError):
            farm.build_field(15)

    def test_stable_limit(self) -> None:
        farm = Farm()
        for idx in range(MAX_STABLES):
            farm.build_stable(idx)
        self.assertFalse(farm.can_build_stable())
        self.assertEqual(farm.possible_stable_positions(), [])
        with self.assertRaises(FarmError):
            farm.build_stable(14)

    def test_sow_and_harvest_fields(self) -> None:
        farm = Farm()
        farm.build_field(4)
        farm.build_field(9)
        farm.sow_field(Resource.GRAIN)
        farm.sow_field(Resource.VEGETABLE)
        self.assertFalse(farm.can_sow())
        self.assertEqual(farm.crop_totals(), {Resource.GRAIN: 3, Resource.VEGETABLE: 2})

        self.assertEqual(sorted(farm.harvest_fields()), [Resource.GRAIN, Resource.VEGETABLE])
        self.assertEqual(sorted(farm.harvest_fields()), [Resource.GRAIN, Resource.VEGETABLE])
        # The vegetable field is empty again after two harvests.
        self.assertTrue(farm.can_sow())
        self.assertEqual(farm.harvest_fields(), [Resource.GRAIN])
        self.assertEqual(farm.harvest_fields(), [])


class FarmPastureTests(unittest.TestCase):
    def test_fencing_counts_shared_edges_once(self) -> None:
        farm = Farm()
        placed = farm.fence_spaces(_config((0,), (1,), wood=7))
        self.assertEqual(placed, 7)
        self.assertEqual(farm.existing_pastures(), [[0], [1]])

        other = Farm()
        self.assertEqual(other.fence_spaces(_config((0, 1), wood=6)), 6)
        self.assertEqual(other.existing_pastures(), [[0, 1]])

    def test_pasture_capacity_formula(self) -> None:
        farm = Farm()
        farm.fence_spaces(_config((3, 4), wood=6))
        self.assertEqual(farm.pastures_and_capacities(), [([3, 4], 4)])

        farm.build_stable(4)
        self.assertEqual(farm.pastures_and_capacities(), [([3, 4], 8)])
        farm.build_stable(3)
        self.assertEqual(farm.pastures_and_capacities(), [([3, 4], 16)])

    def test_unfenced_stables_hold_one_animal_each(self) -> None:
        farm = Farm()
        farm.build_stable(13)
        farm.build_stable(14)
        self.assertEqual(farm.pastures_and_capacities(), [([13, 14], 2)])
        self.assertEqual(farm.total_capacity(), 3)

    def test_fencing_an_unfenced_stable_keeps_the_stable(self) -> None:
        farm = Farm()
        farm.build_stable(14)
        farm.fence_spaces(_config((14,), wood=4))
        self.assertEqual(farm.spaces[14].kind, SpaceKind.FENCED_PASTURE)
        self.assertTrue(farm.spaces[14].has_stable)
        self.assertEqual(farm.pastures_and_capacities(), [([14], 4)])

    def test_reorg_conserves_animals(self) -> None:
        farm = Farm()
        farm.fence_spaces(_config((0, 1), wood=6))
        store = Quantities({Resource.SHEEP: 3, Resource.BOAR: 2})
        farm.reorg_animals(store)

        self.assertEqual(_animal_sum(farm, store, Resource.SHEEP), 3)
        self.assertEqual(_animal_sum(farm, store, Resource.BOAR), 2)
        self.assertEqual(farm.animal_totals()[Resource.SHEEP], 3)
        self.assertEqual(farm.pet, Resource.BOAR)
        self.assertEqual(store[Resource.BOAR], 1)

        # A second pass with nothing new changes nothing.
        before = farm.key()
        farm.reorg_animals(store)
        self.assertEqual(farm.key(), before)

    def test_breeding_adds_one_to_pairs_only(self) -> None:
        farm = Farm()
        farm.fence_spaces(_config((0, 1, 2), wood=8))
        farm.fence_spaces(_config((0, 1, 2), (3, 4), wood=13))
        store = Quantities({Resource.SHEEP: 3, Resource.BOAR: 2, Resource.CATTLE: 1})
        farm.reorg_animals(store, breed=True)

        self.assertEqual(_animal_sum(farm, store, Resource.SHEEP), 4)
        self.assertEqual(_animal_sum(farm, store, Resource.BOAR), 3)
        self.assertEqual(_animal_sum(farm, store, Resource.CATTLE), 1)

    def test_remove_animal_prefers_the_pet(self) -> None:
        farm = Farm()
        store = Quantities({Resource.CATTLE: 1})
        farm.reorg_animals(store)
        self.assertEqual(farm.pet, Resource.CATTLE)
        self.assertTrue(farm.remove_animal(Resource.CATTLE))
        self.assertIsNone(farm.pet)
        self.assertFalse(farm.remove_animal(Resource.CATTLE))

    def test_clone_does_not_share_cells(self) -> None:
        farm = Farm()
        copied = farm.clone()
        copied.build_field(4)
        self.assertEqual(farm.field_indices(), [])
        self.assertNotEqual(farm.key(), copied.key())


if __name__ == "__main__":
    unittest.main()
