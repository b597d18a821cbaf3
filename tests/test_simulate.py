import json
import random

import plot
import simulate
from ghostmatch import EngineConfig, MatchEngine


def test_play_game_uses_every_move():
    engine = MatchEngine(EngineConfig(initial_moves=3, target_score=10**6), seed=1)
    records = simulate.play_game(engine, random.Random(2))
    assert len(records) == 3
    assert all(record["depth"] >= 1 for record in records)
    assert engine.session.moves_left == 0


def test_simulation_writes_records_for_plotting(tmp_path):
    out = tmp_path / "runs.json"
    assert simulate.main(["--games", "2", "--seed", "5", "--out", str(out)]) == 0

    games = json.loads(out.read_text(encoding="utf-8"))
    assert [game["game"] for game in games] == [0, 1]
    values, fractions = plot.depth_distribution(games)
    assert values.min() >= 1
    assert abs(fractions.sum() - 1.0) < 1e-9


def test_depth_distribution_of_no_games():
    values, fractions = plot.depth_distribution([])
    assert values.size == 0 and fractions.size == 0
