"""Run headless Spelling Snake games with the greedy autopilot and summarize them."""
from __future__ import annotations

import argparse
from collections import Counter
import logging
import random

try:
    from .game_logic import SpellingConfig
    from .utils import run_game, score_summary
except ImportError:
    from game_logic import SpellingConfig
    from utils import run_game, score_summary


def autoplay(num_games: int, config: SpellingConfig, seed: int | None = None, max_steps: int = 5000) -> dict:
    """Play num_games games and return score/word stats plus death causes."""
    if num_games <= 0:
        raise ValueError("num_games must be > 0")
    config.validate()

    rng = random.Random(seed)
    scores: list[float] = []
    words: list[float] = []
    causes: Counter[str] = Counter()

    print(f"Running {num_games} games on {config.grid_width}x{config.grid_height} "
          f"({'wrap' if config.wrap_walls else 'solid walls'})...")
    for game in range(1, num_games + 1):
        if game % 10 == 0 or game == num_games:
            print(f"Game {game}/{num_games}", end="\r", flush=True)
        score, completed, _, cause = run_game(config, rng, max_steps)
        scores.append(float(score))
        words.append(float(completed))
        causes[cause.value if cause is not None else "step_limit"] += 1
    print()

    return {
        "scores": score_summary(scores),
        "words": score_summary(words),
        "causes": dict(causes),
    }


def _print_report(report: dict) -> None:
    print("=" * 52)
    print("AUTOPLAY RESULTS")
    print("=" * 52)
    print(f"{'Metric':<12} {'Score':>18} {'Words':>18}")
    print("-" * 52)
    for key in ("mean", "median", "min", "max", "std", "p25", "p75"):
        print(f"{key:<12} {report['scores'][key]:>18.2f} {report['words'][key]:>18.2f}")
    print("=" * 52)
    for cause, count in sorted(report["causes"].items()):
        print(f"Ended by {cause:<16} {count:>6}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Autoplay Spelling Snake headlessly")
    parser.add_argument("--games", type=int, default=100, help="Number of games to play")
    parser.add_argument("--wrap", action="store_true", help="Wrap around edges instead of solid walls")
    parser.add_argument("--decoys", type=int, default=SpellingConfig.decoys, help="Decoy letters per board")
    parser.add_argument("--max-steps", type=int, default=5000, help="Step limit per game")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument("--verbose", action="store_true", help="Log game events")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    config = SpellingConfig(wrap_walls=args.wrap, decoys=args.decoys)
    _print_report(autoplay(args.games, config, args.seed, args.max_steps))


if __name__ == "__main__":
    main()
