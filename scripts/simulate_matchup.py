"""Simulate one species matchup many times and report win rates.

Usage:
    python scripts/simulate_matchup.py flamepup leaflet [--runs N] [--level L]
        [--weather rain] [--plot] [--verbose]
"""

from __future__ import annotations

import argparse
import logging
import time

import numpy as np

from monster_battle.ir.types import Weather
from monster_battle.sim.content.registry import CatalogRegistry
from monster_battle.sim.runner import BatchRunner, SimulationConfig
from monster_battle.sim.telemetry import BattleTelemetry, MatchupSummary


def run_matchup(args: argparse.Namespace) -> None:
    print("Loading catalog...")
    registry = CatalogRegistry()
    registry.load_all()

    config = SimulationConfig(
        seed=args.seed,
        level=args.level,
        max_turns=args.max_turns,
        weather=Weather(args.weather) if args.weather else None,
        random_weather_chance=args.random_weather,
    )

    print(f"\nRunning {args.runs} battles: {args.player} vs {args.opponent} (level {args.level})...")
    runner = BatchRunner(registry)
    t0 = time.time()
    battles = runner.run_batch(args.player, args.opponent, args.runs, config, parallel=args.parallel)
    elapsed = time.time() - t0

    summary = MatchupSummary.from_battles(battles)
    turns = np.array(summary.turn_counts)
    print(f"  Time: {elapsed:.1f}s ({elapsed/args.runs*1000:.1f}ms/battle)")
    print(f"  {args.player} wins: {summary.player_wins}/{summary.battles} ({summary.player_win_rate*100:.1f}%)")
    print(f"  {args.opponent} wins: {summary.opponent_wins}/{summary.battles}")
    print(f"  Draws: {summary.draws}  Timeouts: {summary.timeouts}")
    print(f"  Turns: mean {turns.mean():.1f}, median {np.median(turns):.0f}, max {turns.max()}")

    if args.plot:
        plot_turns(battles, summary, args.output)


def plot_turns(battles: list[BattleTelemetry], summary: MatchupSummary, out_path: str) -> None:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    colors = {"player": "#2ecc71", "opponent": "#e74c3c", "draw": "#95a5a6"}
    fig, ax = plt.subplots(figsize=(10, 6))
    max_turns = max(summary.turn_counts)
    bins = np.arange(0.5, max_turns + 1.5, 1)
    for winner, color in colors.items():
        counts = [b.turns for b in battles if b.winner == winner]
        if counts:
            ax.hist(counts, bins=bins, alpha=0.6, color=color, edgecolor="black", linewidth=0.3,
                    label=f"{winner} wins ({len(counts)})")
    ax.set_xlabel("Turns")
    ax.set_ylabel("Battles")
    ax.set_title(f"{summary.player_species} vs {summary.opponent_species} "
                 f"({summary.battles} battles, mean {summary.mean_turns:.1f} turns)")
    ax.legend()

    plt.tight_layout()
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    print(f"\nChart saved to {out_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate a species matchup")
    parser.add_argument("player", help="Player species id")
    parser.add_argument("opponent", help="Opponent species id")
    parser.add_argument("--runs", type=int, default=500, help="Number of battles")
    parser.add_argument("--level", type=int, default=20)
    parser.add_argument("--seed", type=int, default=42, help="Base seed")
    parser.add_argument("--max-turns", type=int, default=200)
    parser.add_argument("--weather", choices=[w.value for w in Weather], default=None)
    parser.add_argument("--random-weather", type=float, default=0.0,
                        help="Chance a battle opens in random weather")
    parser.add_argument("--parallel", action="store_true")
    parser.add_argument("--plot", action="store_true", help="Save a turn-count histogram")
    parser.add_argument("--output", default="matchup_turns.png")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    run_matchup(args)
