"""Headless simulation of random games.

Plays games by always taking a random solving swap and reports how often
cascades chain, how deep they go and how often the board had to be
reshuffled. Optionally writes per-move records as JSON for ``plot.py``.

Run with: ``python simulate.py --games 50 --seed 7 --out runs.json``
"""
from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from collections import Counter
from pathlib import Path

# Ensure src/ is on the import path when run from a checkout.
SRC_PATH = Path(__file__).parent / "src"
if SRC_PATH.exists() and str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from ghostmatch.config import EngineConfig, load_config  # noqa: E402
from ghostmatch.engine import MatchEngine  # noqa: E402
from ghostmatch.systems.board_ops import find_valid_swaps  # noqa: E402

logger = logging.getLogger("simulate")


def play_game(engine: MatchEngine, picker: random.Random) -> list[dict]:
    records: list[dict] = []
    while not engine.session.over:
        swaps = find_valid_swaps(engine.grid, match_min=engine.config.match_min)
        src, dst = picker.choice(swaps)
        outcome = engine.swap(src, dst)
        records.append(
            {
                "depth": outcome.depth,
                "cleared": sum(step.cleared_count for step in outcome.steps),
                "score_delta": outcome.score_delta,
                "reshuffled": outcome.reshuffled,
            }
        )
    return records


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--games", type=int, default=20)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="JSON engine configuration")
    parser.add_argument("--out", type=Path, default=None, help="write per-move records as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    config = load_config(args.config) if args.config else EngineConfig()
    master = random.Random(args.seed)

    games = []
    outcomes: Counter = Counter()
    depths: Counter = Counter()
    reshuffles = 0
    for index in range(args.games):
        engine = MatchEngine(config, seed=master.randrange(2**32))
        records = play_game(engine, random.Random(master.randrange(2**32)))
        outcomes[engine.session.outcome.name] += 1
        depths.update(record["depth"] for record in records)
        reshuffles += sum(record["reshuffled"] for record in records)
        games.append({"game": index, "score": engine.session.score, "moves": records})

    moves = sum(depths.values())
    logger.info("games=%d moves=%d outcomes=%s", args.games, moves, dict(outcomes))
    logger.info("cascade depth histogram: %s", dict(sorted(depths.items())))
    logger.info("reshuffles: %d (%.2f%% of moves)", reshuffles, 100.0 * reshuffles / max(moves, 1))
    if args.out:
        args.out.write_text(json.dumps(games, indent=2), encoding="utf-8")
        logger.info("wrote %s", args.out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
