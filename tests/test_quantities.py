import unittest

from agricola_sim.domain.quantities import NUM_RESOURCES, Quantities, Resource, ResourceExchange


class QuantitiesTests(unittest.TestCase):
    def test_new_vector_is_all_zero(self) -> None:
        store = Quantities()
        self.assertEqual(store.as_tuple(), (0,) * NUM_RESOURCES)
        self.assertEqual(store.total_animals(), 0)

    def test_pay_and_take_move_resources(self) -> None:
        store = Quantities({Resource.WOOD: 5, Resource.REED: 2})
        store.pay({Resource.WOOD: 5, Resource.REED: 2})
        self.assertEqual(store[Resource.WOOD], 0)
        self.assertEqual(store[Resource.REED], 0)

        store.take({Resource.CLAY: 3, Resource.FOOD: 1})
        self.assertEqual(store[Resource.CLAY], 3)
        self.assertEqual(store[Resource.FOOD], 1)

    def test_pay_refuses_underflow_without_mutating(self) -> None:
        store = Quantities({Resource.WOOD: 1, Resource.STONE: 3})
        self.assertFalse(store.can_pay({Resource.WOOD: 2}))
        with self.assertRaises(ValueError):
            store.pay({Resource.WOOD: 2, Resource.STONE: 1})
        self.assertEqual(store[Resource.WOOD], 1)
        self.assertEqual(store[Resource.STONE], 3)

    def test_negative_slots_are_rejected(self) -> None:
        store = Quantities()
        with self.assertRaises(ValueError):
            store[Resource.GRAIN] = -1
        with self.assertRaises(ValueError):
            Quantities({Resource.FOOD: -2})
        with self.assertRaises(ValueError):
            Quantities([1, 2, 3])

    def test_exchange_converts_at_the_given_rate(self) -> None:
        store = Quantities({Resource.VEGETABLE: 2})
        exchange = ResourceExchange(Resource.VEGETABLE, Resource.FOOD, 1, 3)
        self.assertTrue(store.can_exchange(exchange))
        store.exchange(exchange)
        self.assertEqual(store[Resource.VEGETABLE], 1)
        self.assertEqual(store[Resource.FOOD], 3)
        self.assertEqual(exchange.describe(), "1 vegetable -> 3 food")

    def test_copy_is_independent(self) -> None:
        store = Quantities({Resource.SHEEP: 2, Resource.CATTLE: 1})
        copied = store.copy()
        copied[Resource.SHEEP] = 0
        self.assertEqual(store[Resource.SHEEP], 2)
        self.assertEqual(store.total_animals(), 3)
        self.assertNotEqual(store, copied)


if __name__ == "__main__":
    unittest.main()
