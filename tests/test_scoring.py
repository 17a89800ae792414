import unittest

from agricola_sim.domain.cards import MajorImprovement
from agricola_sim.domain.fencing import PastureConfig, pasture_config_hash
from agricola_sim.domain.quantities import Resource
from agricola_sim.game.scoring import (
    CATTLE_SCORE,
    fitness,
    player_score,
    score_breakdown,
    scores,
    table_score,
)
from agricola_sim.game.state import HouseMaterial, PlayerState, initialize_game_state


class ScoreTableTests(unittest.TestCase):
    def test_counts_past_the_table_use_the_last_entry(self) -> None:
        self.assertEqual(table_score(CATTLE_SCORE, 0), -1)
        self.assertEqual(table_score(CATTLE_SCORE, 1), 1)
        self.assertEqual(table_score(CATTLE_SCORE, 6), 4)
        self.assertEqual(table_score(CATTLE_SCORE, 40), 4)


class PlayerScoreTests(unittest.TestCase):
    def test_starting_farm_score(self) -> None:
        breakdown = score_breakdown(PlayerState(player_id=0))
        # Empty categories: fields, pastures, grain, vegetables, sheep, boar, cattle.
        self.assertEqual(breakdown.fields + breakdown.pastures, -2)
        self.assertEqual(breakdown.grain + breakdown.vegetables, -2)
        self.assertEqual(breakdown.sheep + breakdown.boar + breakdown.cattle, -3)
        self.assertEqual(breakdown.unused_spaces, -13)
        self.assertEqual(breakdown.family, 6)
        self.assertEqual(breakdown.rooms, 0)
        self.assertEqual(breakdown.total, -14)

    def test_each_animal_kind_scores_its_own_count(self) -> None:
        player = PlayerState(player_id=0)
        player.resources.take({Resource.SHEEP: 1, Resource.CATTLE: 6})
        breakdown = score_breakdown(player)
        self.assertEqual(breakdown.sheep, 1)
        self.assertEqual(breakdown.boar, -1)
        self.assertEqual(breakdown.cattle, 4)

    def test_house_material_begging_and_cards(self) -> None:
        player = PlayerState(player_id=0)
        baseline = player_score(player)

        player.house = HouseMaterial.STONE
        self.assertEqual(player_score(player), baseline + 4)

        player.begging_tokens = 2
        self.assertEqual(player_score(player), baseline + 4 - 6)

        player.majors.add(MajorImprovement.POTTERY)
        player.resources.take({Resource.CLAY: 5})
        self.assertEqual(score_breakdown(player).majors, 4)

    def test_crops_in_fields_count_toward_grain(self) -> None:
        player = PlayerState(player_id=0)
        player.farm.build_field(4)
        player.farm.sow_field(Resource.GRAIN)
        breakdown = score_breakdown(player)
        self.assertEqual(breakdown.grain, 1)
        self.assertEqual(breakdown.fields, -1)
        self.assertEqual(breakdown.unused_spaces, -12)

    def test_only_fenced_stables_score(self) -> None:
        player = PlayerState(player_id=0)
        before = score_breakdown(player)
        player.farm.build_stable(14)
        unfenced = score_breakdown(player)
        self.assertEqual(unfenced.stables, 0)
        self.assertEqual(unfenced.unused_spaces, before.unused_spaces + 1)

        player.farm.fence_spaces(PastureConfig(pastures=((14,),), wood=4, size_hash=pasture_config_hash([1])))
        self.assertEqual(player.farm.fenced_stable_count, 1)
        self.assertEqual(score_breakdown(player).stables, 1)


class FitnessTests(unittest.TestCase):
    def test_margins_against_the_best_opponent(self) -> None:
        state = initialize_game_state(player_count=3, seed=4)
        state.players[0].begging_tokens = 1
        state.players[2].house = HouseMaterial.CLAY
        totals = scores(state)
        self.assertEqual(totals[1] - totals[0], 3)
        self.assertEqual(totals[2] - totals[1], 2)
        self.assertEqual(fitness(state), [-5, -2, 2])

    def test_single_player_fitness_is_the_score(self) -> None:
        state = initialize_game_state(player_count=1, seed=4)
        self.assertEqual(fitness(state), scores(state))


if __name__ == "__main__":
    unittest.main()
