from __future__ import annotations

from dataclasses import fields

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TimeRemainingColumn
from rich.table import Table

from agricola_sim.analysis.seeding import derive_seed
from agricola_sim.analysis.simulation import POLICY_NAMES, build_policy, simulate_games
from agricola_sim.domain.farm import MAX_FENCES, Farm
from agricola_sim.domain.fencing import fencing_options, get_all_pasture_configs
from agricola_sim.game.engine import DEFAULT_TICK_LIMIT, GameEngine
from agricola_sim.game.scoring import score_breakdown
from agricola_sim.game.state import MAX_PLAYERS, MIN_PLAYERS, GameConfig, initialize_game_state


def _split_csv(value: str) -> list[str]:
    return [x.strip().lower() for x in value.split(",") if x.strip()]


def _resolve_policies(policies: str, players: int) -> list[str]:
    names = _split_csv(policies)
    if len(names) == 1:
        names = names * players
    if len(names) != players:
        raise click.BadParameter(
            f"Expected 1 or {players} policies, got {len(names)}.", param_hint="--policies"
        )
    unknown = [name for name in names if name not in POLICY_NAMES]
    if unknown:
        raise click.BadParameter(
            f"Unknown policy {unknown[0]!r}; choose from {', '.join(POLICY_NAMES)}.",
            param_hint="--policies",
        )
    return names


@click.group()
def main() -> None:
    """Farm game rules engine: simulations and fencing tables."""


@main.command()
@click.option(
    "--players",
    default=2,
    show_default=True,
    type=click.IntRange(MIN_PLAYERS, MAX_PLAYERS),
    help="Number of players per game.",
)
@click.option(
    "--games",
    default=10,
    show_default=True,
    type=click.IntRange(1, None),
    help="Games to simulate.",
)
@click.option(
    "--seed",
    default=1000,
    show_default=True,
    type=int,
    help="Base seed; every game derives its own seed from it.",
)
@click.option(
    "--policies",
    default="random",
    show_default=True,
    help=f"Comma-separated policy per seat, or one for every seat ({', '.join(POLICY_NAMES)}).",
)
@click.option(
    "--tick-limit",
    default=DEFAULT_TICK_LIMIT,
    show_default=True,
    type=click.IntRange(1, None),
    help="Abort a game after this many applied actions.",
)
def simulate(players: int, games: int, seed: int, policies: str, tick_limit: int) -> None:
    """Play GAMES seeded games and print average scores and win rates."""
    console = Console()
    names = _resolve_policies(policies, players)
    console.print(
        f"[green]Simulating[/green] games={games} players={players} "
        f"policies={','.join(names)} seed={seed}"
    )

    with Progress(
        "[progress.description]{task.description}",
        BarColumn(),
        "[progress.percentage]{task.percentage:>3.0f}%",
        TimeRemainingColumn(),
        console=console,
        transient=True,
    ) as progress:
        bar = progress.add_task("Simulating...", total=games)
        stats, summaries = simulate_games(
            player_count=players,
            games=games,
            base_seed=seed,
            policy_names=names,
            tick_limit=tick_limit,
            on_game=lambda _summary: progress.advance(bar),
        )

    table = Table(title=f"Simulation Summary - {games} games")
    table.add_column("Player")
    table.add_column("Policy")
    table.add_column("Avg Score", justify="right")
    table.add_column("Avg Fitness", justify="right")
    table.add_column("Win Rate", justify="right")
    for player_id, name in enumerate(names):
        table.add_row(
            f"P{player_id}",
            name,
            f"{stats.average_score(player_id):.2f}",
            f"{stats.average_fitness(player_id):+.2f}",
            f"{100.0 * stats.win_rate(player_id):.1f}%",
        )
    console.print(table)

    unfinished = sum(1 for summary in summaries if not summary.finished)
    console.print(f"Average actions per game: {stats.average_ticks:.1f}")
    if unfinished:
        console.print(f"[yellow]{unfinished} game(s) hit the tick limit.[/yellow]")


@main.command()
@click.option(
    "--players",
    default=2,
    show_default=True,
    type=click.IntRange(MIN_PLAYERS, MAX_PLAYERS),
)
@click.option("--seed", default=1000, show_default=True, type=int)
@click.option(
    "--policy",
    default="weighted",
    show_default=True,
    type=click.Choice(list(POLICY_NAMES), case_sensitive=False),
)
@click.option("--events", default=20, show_default=True, type=click.IntRange(0, None), help="Log lines to show.")
def replay(players: int, seed: int, policy: str, events: int) -> None:
    """Play one game and show the final farms, score breakdown and log tail."""
    console = Console()
    state = initialize_game_state(config=GameConfig(player_count=players, seed=seed))
    engine = GameEngine(
        state,
        policies={
            player_id: build_policy(policy.lower(), derive_seed(seed, "policy", player_id))
            for player_id in range(players)
        },
    )
    engine.play()
    final_state = engine.state

    for player in final_state.players:
        console.print(f"[bold]P{player.player_id}[/bold] ({player.house.value} house, family {player.family_size})")
        for row in player.farm.layout_rows():
            console.print(f"  {row}")

    table = Table(title="Score Breakdown")
    table.add_column("Category")
    for player in final_state.players:
        table.add_column(f"P{player.player_id}", justify="right")
    breakdowns = [score_breakdown(player) for player in final_state.players]
    for category in (item.name for item in fields(breakdowns[0])):
        table.add_row(category, *(str(getattr(item, category)) for item in breakdowns))
    table.add_row("total", *(str(item.total) for item in breakdowns))
    console.print(table)

    if events:
        for line in final_state.event_log[-events:]:
            console.print(line)
    if not final_state.is_game_over():
        console.print(f"[yellow]Stopped after {engine.ticks} actions without finishing.[/yellow]")


@main.command()
@click.option(
    "--wood",
    default=MAX_FENCES,
    show_default=True,
    type=click.IntRange(0, MAX_FENCES),
    help="Wood available for fences.",
)
@click.option("--limit", default=20, show_default=True, type=click.IntRange(1, None), help="Rows to show.")
def fences(wood: int, limit: int) -> None:
    """List the best fencing options for a starting farm."""
    console = Console()
    farm = Farm()
    options = fencing_options(farm, wood)
    console.print(
        f"{len(options)} option(s) for {wood} wood "
        f"({len(get_all_pasture_configs(farm))} distinct layouts in total)"
    )
    if not options:
        return

    table = Table(title=f"Fencing Options - {wood} wood")
    table.add_column("Pastures")
    table.add_column("Sizes", justify="right")
    table.add_column("Wood", justify="right")
    table.add_column("Extensions", justify="right")
    for config in options[:limit]:
        table.add_row(
            " ".join("{" + ",".join(str(idx) for idx in cells) + "}" for cells in config.pastures),
            "/".join(str(size) for size in config.sizes),
            str(config.wood),
            str(config.extensions),
        )
    console.print(table)


if __name__ == "__main__":
    main()
