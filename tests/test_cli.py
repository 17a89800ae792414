from click.testing import CliRunner

from agricola_sim.cli import main


def test_fences_lists_single_cell_pastures_for_four_wood() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["fences", "--wood", "4"])
    assert result.exit_code == 0
    assert "Fencing Options - 4 wood" in result.output


def test_fences_reports_no_options_without_wood() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["fences", "--wood", "3"])
    assert result.exit_code == 0
    assert "0 option(s) for 3 wood" in result.output


def test_simulate_prints_summary_table() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["simulate", "--players", "2", "--games", "1", "--seed", "5"])
    assert result.exit_code == 0
    assert "Simulation Summary" in result.output
    assert "P1" in result.output


def test_simulate_rejects_mismatched_policies() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["simulate", "--players", "3", "--policies", "random,greedy"])
    assert result.exit_code != 0
    assert "Expected 1 or 3 policies" in result.output


def test_replay_shows_score_breakdown() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["replay", "--players", "1", "--seed", "3", "--policy", "random", "--events", "3"])
    assert result.exit_code == 0
    assert "Score Breakdown" in result.output
    assert "total" in result.output
