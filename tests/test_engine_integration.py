import unittest

from agricola_sim.analysis import derive_seed, simulate_games
from agricola_sim.game import (
    ACTION_BUILD_ROOM,
    ActionOutcome,
    FirstLegalPolicy,
    GameEngine,
    GamePhase,
    GreedyScorePolicy,
    RandomPolicy,
    WeightedRandomPolicy,
    action_outcome_spectrum,
    apply_action,
    build_room,
    end_turn,
    expand_action_spectrum,
    initialize_game_state,
    place_worker,
    start_round,
    use_space,
)
from agricola_sim.domain.board import ActionSpace
from agricola_sim.domain.quantities import Resource


class _CountingAccumulator:
    def __init__(self) -> None:
        self.started = False
        self.steps = 0
        self.finished = False

    def before(self, engine) -> None:
        self.started = True

    def step(self, engine_before_action, action) -> None:
        self.steps += 1

    def after(self, engine) -> None:
        self.finished = True


class EngineIntegrationTests(unittest.TestCase):
    def test_round_start_outcomes_cover_the_current_stage(self) -> None:
        state = initialize_game_state(player_count=2, seed=31)
        stage = list(state.hidden_stages[0])

        outcomes = action_outcome_spectrum(state, start_round())
        self.assertEqual(len(outcomes), len(stage))
        self.assertTrue(all(isinstance(outcome, ActionOutcome) for outcome in outcomes))
        self.assertAlmostEqual(sum(outcome.probability for outcome in outcomes), 1.0, places=6)
        revealed = sorted(outcome.state.open_spaces[-1].value for outcome in outcomes)
        self.assertEqual(revealed, sorted(space.value for space in stage))

    def test_deterministic_actions_have_one_outcome(self) -> None:
        state = apply_action(initialize_game_state(player_count=2, seed=32), start_round())
        outcomes = action_outcome_spectrum(state, place_worker())
        self.assertEqual(len(outcomes), 1)
        self.assertEqual(outcomes[0].probability, 1.0)
        self.assertEqual(outcomes[0].state.phase, GamePhase.PLACE_WORKER)

    def test_expanded_spectrum_pairs_each_action_with_its_outcomes(self) -> None:
        state = initialize_game_state(player_count=1, seed=30)
        expanded = expand_action_spectrum(state, [start_round()])
        self.assertEqual(len(expanded), 1)
        action, outcomes = expanded[0]
        self.assertEqual(action, start_round())
        self.assertEqual(len(outcomes), len(state.hidden_stages[0]))

    def test_engine_plays_to_the_end_with_hooks(self) -> None:
        state = initialize_game_state(player_count=2, seed=33)
        engine = GameEngine(state, policies={0: RandomPolicy(seed=1), 1: WeightedRandomPolicy(seed=2)})
        accumulator = _CountingAccumulator()
        winners = engine.play(accumulators=[accumulator])

        self.assertTrue(engine.state.is_game_over())
        self.assertTrue(accumulator.started)
        self.assertTrue(accumulator.finished)
        self.assertEqual(accumulator.steps, engine.ticks)
        self.assertGreater(len(winners), 0)
        self.assertIsNone(engine.play_tick())

    def test_engine_rejects_illegal_actions(self) -> None:
        engine = GameEngine(initialize_game_state(player_count=2, seed=34))
        with self.assertRaises(ValueError):
            engine.execute(end_turn())

    def test_tick_limit_stops_the_game(self) -> None:
        engine = GameEngine(initialize_game_state(player_count=2, seed=35), tick_limit=5)
        engine.play()
        self.assertEqual(engine.ticks, 5)
        self.assertFalse(engine.state.is_game_over())
        self.assertEqual(engine.winning_player_ids, [])

    def test_first_legal_policy(self) -> None:
        policy = FirstLegalPolicy()
        state = initialize_game_state(player_count=1, seed=36)
        self.assertEqual(policy.decide(state, [start_round(), end_turn()]), start_round())
        with self.assertRaises(ValueError):
            policy.decide(state, [])

    def test_greedy_policy_builds_a_room_when_it_can(self) -> None:
        state = initialize_game_state(player_count=1, seed=37)
        state = apply_action(state, start_round())
        state = apply_action(state, place_worker())
        state.current.resources.take({Resource.WOOD: 5, Resource.REED: 2})
        state = apply_action(state, use_space(ActionSpace.FARM_EXPANSION))

        legal = [build_room(0)]
        choice = GreedyScorePolicy().decide(state, legal)
        self.assertEqual(choice.kind, ACTION_BUILD_ROOM)
        after = apply_action(state, choice)
        self.assertEqual(after.current.farm.room_count, 3)


class BatchSimulationTests(unittest.TestCase):
    def test_derive_seed_is_stable(self) -> None:
        self.assertEqual(derive_seed(7, "game", 1), derive_seed(7, "game", 1))
        self.assertNotEqual(derive_seed(7, "game", 1), derive_seed(7, "game", 2))

    def test_simulation_is_reproducible(self) -> None:
        first_stats, first = simulate_games(player_count=2, games=2, base_seed=40)
        _, second = simulate_games(player_count=2, games=2, base_seed=40)
        self.assertEqual(first, second)
        self.assertEqual(first_stats.games, 2)
        self.assertTrue(all(summary.finished for summary in first))
        self.assertAlmostEqual(sum(first_stats.win_rate(player_id) for player_id in range(2)), 1.0, places=6)

    def test_single_player_fitness_matches_the_score(self) -> None:
        stats, summaries = simulate_games(player_count=1, games=1, base_seed=41, policy_names=["greedy"])
        self.assertEqual(summaries[0].fitness, summaries[0].scores)
        self.assertAlmostEqual(stats.average_fitness(0), stats.average_score(0))

    def test_policy_count_must_match_players(self) -> None:
        with self.assertRaises(ValueError):
            simulate_games(player_count=2, games=1, base_seed=1, policy_names=["random"])


if __name__ == "__main__":
    unittest.main()
