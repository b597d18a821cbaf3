import json
import sys

import matplotlib.pyplot as plt
import numpy as np


def depth_distribution(games):
    """Fraction of moves per cascade depth across all simulated games."""
    depths = np.array([move["depth"] for game in games for move in game["moves"]], dtype=int)
    if depths.size == 0:
        return np.array([], dtype=int), np.array([])
    counts = np.bincount(depths)
    values = np.nonzero(counts)[0]
    return values, counts[values] / depths.size


def main(path):
    with open(path, encoding="utf-8") as handle:
        games = json.load(handle)
    values, fractions = depth_distribution(games)
    scores = [game["score"] for game in games]

    fig, (left, right) = plt.subplots(1, 2, figsize=(10, 4))
    left.bar(values, fractions, color="slateblue")
    left.set_xlabel("Cascade depth (resolution steps per move)")
    left.set_ylabel("Fraction of moves")
    left.set_title("Cascade depth distribution")
    left.grid(True, axis="y")

    right.hist(scores, bins=15, color="darkorange")
    right.set_xlabel("Final score")
    right.set_ylabel("Games")
    right.set_title("Score distribution")
    right.grid(True, axis="y")
    fig.tight_layout()
    plt.show()


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "runs.json")
