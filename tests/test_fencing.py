import unittest

from agricola_sim.domain.farm import MAX_FENCES, Farm
from agricola_sim.domain.fencing import (
    MAX_PASTURES,
    PastureConfig,
    fencing_options,
    get_all_pasture_configs,
    get_best_fence_options,
    is_future_extension,
    pasture_config_hash,
    pasture_sizes_from_hash,
)


def _config(*pastures: tuple[int, ...], wood: int, extensions: int = 0) -> PastureConfig:
    return PastureConfig(
        pastures=tuple(sorted(pastures)),
        wood=wood,
        size_hash=pasture_config_hash(len(cells) for cells in pastures),
        extensions=extensions,
    )


class PastureHashTests(unittest.TestCase):
    def test_hash_ignores_pasture_order(self) -> None:
        self.assertEqual(pasture_config_hash([3, 1, 2]), pasture_config_hash([1, 2, 3]))
        self.assertEqual(pasture_config_hash([1, 2]), 2**1 * 3**2)

    def test_sizes_round_trip_through_hash(self) -> None:
        self.assertEqual(pasture_sizes_from_hash(pasture_config_hash([4, 1, 1])), [1, 1, 4])


class PastureEnumerationTests(unittest.TestCase):
    def test_every_config_respects_fence_and_pasture_limits(self) -> None:
        farm = Farm()
        configs = get_all_pasture_configs(farm)
        self.assertGreater(len(configs), 0)
        rooms = set(farm.room_indices())
        for config in configs:
            self.assertLessEqual(config.wood, MAX_FENCES)
            self.assertLessEqual(len(config.pastures), MAX_PASTURES)
            self.assertFalse(config.cells & rooms)
            self.assertEqual(sum(config.sizes), len(config.cells))

    def test_min_wood_representatives_per_size_multiset(self) -> None:
        configs = get_all_pasture_configs(Farm())
        cheapest: dict[int, int] = {}
        for config in configs:
            cheapest.setdefault(config.size_hash, config.wood)
            self.assertEqual(config.wood, cheapest[config.size_hash])

    def test_pastures_never_cut_cells_off_from_the_house(self) -> None:
        configs = get_all_pasture_configs(Farm())
        # Fencing the middle column would strand the right half of the farm.
        middle = ((2, 7, 12),)
        self.assertNotIn(middle, [config.pastures for config in configs])

    def test_fields_are_never_fenced(self) -> None:
        farm = Farm()
        farm.build_field(4)
        for config in get_all_pasture_configs(farm):
            self.assertNotIn(4, config.cells)

    def test_existing_pastures_only_allow_extensions(self) -> None:
        farm = Farm()
        farm.fence_spaces(_config((3, 4), wood=6))
        configs = get_all_pasture_configs(farm)
        self.assertGreater(len(configs), 0)
        for config in configs:
            groups = [set(cells) for cells in config.pastures]
            covering = [group for group in groups if group & {3, 4}]
            self.assertEqual(set().union(*covering), {3, 4})
            self.assertNotEqual(config.pastures, ((3, 4),))


class FenceOptionTests(unittest.TestCase):
    def test_small_budgets(self) -> None:
        farm = Farm()
        self.assertEqual(fencing_options(farm, 0), [])
        self.assertEqual(fencing_options(farm, 3), [])

        options = fencing_options(farm, 4)
        self.assertGreater(len(options), 0)
        for config in options:
            self.assertEqual(config.wood, 4)
            self.assertEqual(config.sizes, (1,))

    def test_option_counts_for_the_starting_farm(self) -> None:
        farm = Farm()
        self.assertEqual(len(get_all_pasture_configs(farm)), 943)
        expected = {3: 0, 4: 1, 6: 2, 8: 6, 10: 34, 12: 119, 15: 696}
        for wood, count in expected.items():
            self.assertEqual(len(fencing_options(farm, wood)), count, msg=f"wood={wood}")

    def test_more_wood_never_removes_layouts(self) -> None:
        farm = Farm()
        previous: set[int] = set()
        for wood in range(MAX_FENCES + 1):
            hashes = {config.size_hash for config in fencing_options(farm, wood)}
            self.assertTrue(previous <= hashes)
            previous = hashes

        every_hash = {config.size_hash for config in get_all_pasture_configs(farm)}
        self.assertEqual(previous, every_hash)

    def test_best_options_prefer_more_extensions(self) -> None:
        corner = _config((0,), wood=4, extensions=5)
        middle = _config((7,), wood=4, extensions=2)
        pair = _config((0, 1), wood=6, extensions=1)
        options = get_best_fence_options([corner, middle, pair], 0, 6)
        self.assertEqual(options, [corner, pair])

    def test_best_options_charge_only_new_fences(self) -> None:
        split = _config((3,), (4,), wood=7)
        self.assertEqual(get_best_fence_options([split], 6, 1), [split])
        self.assertEqual(get_best_fence_options([split], 7, 5), [])


class FutureExtensionTests(unittest.TestCase):
    def test_subdividing_and_adding_pastures_are_extensions(self) -> None:
        base = _config((3, 4), wood=6)
        self.assertTrue(is_future_extension(_config((3,), (4,), wood=7), base))
        self.assertTrue(is_future_extension(_config((3, 4), (9,), wood=9), base))

    def test_growing_a_pasture_is_not_an_extension(self) -> None:
        base = _config((3, 4), wood=6)
        self.assertFalse(is_future_extension(_config((2, 3, 4), wood=8), base))
        self.assertFalse(is_future_extension(_config((4,), wood=4), base))
        self.assertFalse(is_future_extension(base, base))


if __name__ == "__main__":
    unittest.main()
