"""Play unattended Hong Kong Mahjong matches and print the final scores.

Every seat, the human one included, is played by the AI at the chosen
difficulty. Defaults come from HKMJ_SIM_* environment variables; command
line flags override them.

Usage:
    python bin/simulate.py
    python bin/simulate.py --games 20 --difficulty hard
    python bin/simulate.py --seed <64 hex chars> --log-dir logs
"""

from __future__ import annotations

import argparse
import statistics
import time

from hkmj.logic.enums import Difficulty
from hkmj.logic.rng import generate_seed
from hkmj.logic.settings import NUM_PLAYERS, GameSettings
from hkmj.shared.logging import setup_logging
from hkmj.simulation.autoplay import MatchSummary, run_matches
from hkmj.simulation.settings import SimulationSettings


def _print_summaries(summaries: list[MatchSummary], elapsed: float) -> None:
    """Print per-match results and per-seat averages."""
    print("=" * 60)
    print("RESULTS")
    print("=" * 60)
    for index, summary in enumerate(summaries):
        reason = summary.reason.value if summary.reason is not None else "-"
        scores = " ".join(f"{score:>7}" for score in summary.scores)
        print(f"#{index:<3} {scores}  rounds={summary.total_rounds:<3} end={reason}")

    print()
    for seat in range(NUM_PLAYERS):
        mean = statistics.mean(summary.scores[seat] for summary in summaries)
        print(f"Seat {seat} mean score: {mean:.1f}")
    print(f"Matches: {len(summaries)} in {elapsed:.2f}s")


def main() -> None:
    defaults = SimulationSettings()
    parser = argparse.ArgumentParser(description="Run unattended matches")
    parser.add_argument("--games", type=int, default=defaults.games, help="Number of matches")
    parser.add_argument("--seed", default=defaults.seed, help="Base seed (64 hex chars), random when omitted")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=defaults.difficulty.value,
        help="AI difficulty for every seat",
    )
    parser.add_argument("--minimum-fan", type=int, default=defaults.minimum_fan, help="Minimum fan to win")
    parser.add_argument("--max-rounds", type=int, default=defaults.max_rounds, help="Round cap per match")
    parser.add_argument("--log-dir", default=defaults.log_dir, help="Directory for the match log file")
    args = parser.parse_args()

    # re-validate the merged values
    sim = SimulationSettings(
        games=args.games,
        seed=args.seed,
        difficulty=args.difficulty,
        minimum_fan=args.minimum_fan,
        max_rounds=args.max_rounds,
        log_dir=args.log_dir,
        max_steps=defaults.max_steps,
    )
    log_file = setup_logging(log_dir=sim.log_dir)
    if log_file is not None:
        print(f"Logging to {log_file}")

    settings = GameSettings(difficulty=sim.difficulty, minimum_fan=sim.minimum_fan, max_rounds=sim.max_rounds)
    base_seed = sim.seed if sim.seed is not None else generate_seed()
    print(f"Base seed: {base_seed}")

    start = time.perf_counter()
    summaries = run_matches(settings, games=sim.games, base_seed=base_seed, max_steps=sim.max_steps)
    _print_summaries(summaries, time.perf_counter() - start)


if __name__ == "__main__":
    main()
