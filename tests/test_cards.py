import unittest

from agricola_sim.domain.board import ActionSpace
from agricola_sim.domain.cards import (
    MAJOR_CARDS,
    MajorImprovement,
    anytime_exchanges,
    bake_rates,
    can_bake,
    cooking_rate,
    harvest_exchanges,
    major_points,
    occupation_cost,
)
from agricola_sim.domain.quantities import Quantities, Resource


class MajorCardTests(unittest.TestCase):
    def test_catalog_covers_every_card(self) -> None:
        self.assertEqual(set(MAJOR_CARDS), set(MajorImprovement))
        self.assertEqual(MAJOR_CARDS[MajorImprovement.WELL].points, 4)
        self.assertEqual(MAJOR_CARDS[MajorImprovement.STONE_OVEN].cost, {Resource.CLAY: 1, Resource.STONE: 3})

    def test_craft_bonus_points(self) -> None:
        card = MajorImprovement.BASKETMAKERS_WORKSHOP
        self.assertEqual(major_points(card, Quantities()), 2)
        self.assertEqual(major_points(card, Quantities({Resource.REED: 4})), 4)
        self.assertEqual(major_points(card, Quantities({Resource.REED: 9})), 5)

    def test_exchanges_take_the_best_rate_per_source(self) -> None:
        raw = {exchange.source: exchange.num_to for exchange in anytime_exchanges([])}
        self.assertEqual(raw, {Resource.GRAIN: 1, Resource.VEGETABLE: 1})

        hearth = {
            exchange.source: exchange.num_to
            for exchange in anytime_exchanges([MajorImprovement.FIREPLACE_2, MajorImprovement.COOKING_HEARTH_4])
        }
        self.assertEqual(hearth[Resource.VEGETABLE], 3)
        self.assertEqual(hearth[Resource.CATTLE], 4)
        self.assertEqual(cooking_rate([MajorImprovement.FIREPLACE_3], Resource.BOAR), 2)
        self.assertEqual(cooking_rate([], Resource.SHEEP), 0)

    def test_harvest_exchanges_belong_to_craft_cards(self) -> None:
        exchanges = harvest_exchanges([MajorImprovement.POTTERY, MajorImprovement.WELL])
        self.assertEqual(len(exchanges), 1)
        card, exchange = exchanges[0]
        self.assertIs(card, MajorImprovement.POTTERY)
        self.assertEqual((exchange.source, exchange.num_to), (Resource.CLAY, 2))


class BakingTests(unittest.TestCase):
    def test_no_improvement_means_no_baking(self) -> None:
        self.assertFalse(can_bake([MajorImprovement.WELL]))
        self.assertEqual(bake_rates([MajorImprovement.WELL], {}, 3), [])

    def test_ovens_are_used_first_then_the_hearth(self) -> None:
        majors = [MajorImprovement.CLAY_OVEN, MajorImprovement.STONE_OVEN, MajorImprovement.COOKING_HEARTH_5]
        rates = [rate for _, rate in bake_rates(majors, {}, 5)]
        self.assertEqual(rates, [5, 4, 4, 3, 3])

    def test_oven_caps_are_shared_within_a_round(self) -> None:
        majors = [MajorImprovement.CLAY_OVEN, MajorImprovement.FIREPLACE_2]
        rates = [rate for _, rate in bake_rates(majors, {MajorImprovement.CLAY_OVEN: 1}, 2)]
        self.assertEqual(rates, [2, 2])

        oven_only = bake_rates([MajorImprovement.STONE_OVEN], {}, 5)
        self.assertEqual(len(oven_only), 2)


class OccupationCostTests(unittest.TestCase):
    def test_lessons_costs(self) -> None:
        self.assertEqual(occupation_cost(ActionSpace.LESSONS_1, 0), 0)
        self.assertEqual(occupation_cost(ActionSpace.LESSONS_1, 1), 1)
        self.assertEqual(occupation_cost(ActionSpace.LESSONS_2, 1), 1)
        self.assertEqual(occupation_cost(ActionSpace.LESSONS_2, 2), 2)
        with self.assertRaises(ValueError):
            occupation_cost(ActionSpace.FOREST, 0)


if __name__ == "__main__":
    unittest.main()
