import pytest

from ghostmatch.components.game_session import GameSession, Outcome
from ghostmatch.components.resolution_step import ClearedCell, ResolutionStep
from ghostmatch.components.scoring import ScoringConfig
from ghostmatch.config import EngineConfig
from ghostmatch.events.bus import (
    EVENT_CASCADE_STEP,
    EVENT_GAME_LOST,
    EVENT_GAME_WON,
    EVENT_MOVES_CHANGED,
    EVENT_NEW_GAME,
    EVENT_SCORE_CHANGED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
)
from ghostmatch.systems.game_flow_system import GameFlowSystem
from ghostmatch.systems.match import MatchSystem
from ghostmatch.systems.match_resolution import MatchResolutionSystem
from ghostmatch.systems.score_system import ScoreSystem
from ghostmatch.systems.world_queries import get_session
from tests.helpers import build_world, grid_with


def make_step(positions, depth=1):
    group = frozenset(positions)
    return ResolutionStep(
        depth=depth,
        cleared=tuple(ClearedCell(pos, 'X') for pos in sorted(positions)),
        groups=(group,),
        gravity_moves=(),
        new_tiles=tuple(sorted(positions)),
        grid=(),
    )


def test_three_cells_score_base_points():
    assert ScoringConfig().score_for(make_step([(0, 0), (0, 1), (0, 2)])) == 30


def test_line_of_four_is_doubled():
    step = make_step([(0, 0), (0, 1), (0, 2), (0, 3)])
    assert step.is_large_match
    assert ScoringConfig().score_for(step) == 80


def test_l_shape_counts_as_large():
    step = make_step([(0, 0), (0, 1), (0, 2), (1, 0), (2, 0)])
    assert step.longest_run == 3
    assert step.is_large_match
    assert ScoringConfig().score_for(step) == 100


def test_two_separate_runs_in_one_step_are_large():
    step = ResolutionStep(
        depth=1,
        cleared=tuple(ClearedCell(pos, 'X') for pos in [(0, 0), (0, 1), (0, 2), (4, 3), (4, 4), (4, 5)]),
        groups=(frozenset({(0, 0), (0, 1), (0, 2)}), frozenset({(4, 3), (4, 4), (4, 5)})),
        gravity_moves=(),
        new_tiles=(),
        grid=(),
    )
    assert ScoringConfig().score_for(step) == 120


def test_line_rule_needs_one_long_run():
    scoring = ScoringConfig(large_match_rule="line")
    assert scoring.score_for(make_step([(0, 0), (0, 1), (0, 2), (1, 0), (2, 0)])) == 50
    assert scoring.score_for(make_step([(0, 0), (0, 1), (0, 2), (0, 3)])) == 80


def test_size_points_override():
    scoring = ScoringConfig.from_dict({"size_points": {"3": 7}, "points_per_cell": 1})
    assert scoring.score_for(make_step([(0, 0), (1, 0), (2, 0)])) == 7
    assert scoring.score_for(make_step([(0, 0), (1, 0), (2, 0), (3, 0)])) == 8


def test_session_reset():
    session = GameSession(initial_moves=3, target=50, score=40, moves_left=0, outcome=Outcome.LOST)
    session.reset()
    assert (session.score, session.moves_left, session.outcome) == (0, 3, None)
    assert not session.over


def near_triple_rows():
    grid = grid_with({(2, 0): 'X', (2, 1): 'X', (2, 3): 'X'})
    return [list(row) for row in grid.snapshot()]


def flow_world(config):
    bus, world, board = build_world(near_triple_rows(), config=config)
    MatchSystem(world, bus)
    MatchResolutionSystem(world, bus)
    ScoreSystem(world, bus)
    flow = GameFlowSystem(world, bus)
    received = []
    for name in (EVENT_GAME_WON, EVENT_GAME_LOST, EVENT_SCORE_CHANGED, EVENT_MOVES_CHANGED, EVENT_TILE_SWAP_INVALID):
        bus.subscribe(name, lambda sender, _name=name, **k: received.append((_name, k)))
    return bus, world, flow, received


def names(received):
    return [name for name, _ in received]


def test_reaching_target_wins_and_blocks_further_swaps():
    bus, world, flow, received = flow_world(EngineConfig(target_score=1))
    bus.emit(EVENT_TILE_SWAP_REQUEST, src=(2, 2), dst=(2, 3))

    session = get_session(world)
    assert session.outcome is Outcome.WON
    assert session.score >= 30
    assert session.moves_left == EngineConfig().initial_moves - 1
    assert names(received).count(EVENT_GAME_WON) == 1
    assert names(received).index(EVENT_MOVES_CHANGED) < names(received).index(EVENT_SCORE_CHANGED)

    received.clear()
    bus.emit(EVENT_TILE_SWAP_REQUEST, src=(0, 0), dst=(0, 1))
    assert received == [(EVENT_TILE_SWAP_INVALID, {"src": (0, 0), "dst": (0, 1), "reason": "game_over"})]


def test_running_out_of_moves_loses():
    bus, world, flow, received = flow_world(EngineConfig(initial_moves=1, target_score=10_000))
    bus.emit(EVENT_TILE_SWAP_REQUEST, src=(2, 2), dst=(2, 3))

    session = get_session(world)
    assert session.moves_left == 0
    assert session.outcome is Outcome.LOST
    assert EVENT_GAME_LOST in names(received)
    assert EVENT_GAME_WON not in names(received)


def test_invalid_swap_costs_no_move():
    bus, world, flow, received = flow_world(EngineConfig())
    bus.emit(EVENT_TILE_SWAP_REQUEST, src=(0, 0), dst=(0, 1))
    assert get_session(world).moves_left == EngineConfig().initial_moves
    assert names(received) == [EVENT_TILE_SWAP_INVALID]


def test_new_game_resets_session_and_board():
    bus, world, flow, received = flow_world(EngineConfig(target_score=1))
    bus.emit(EVENT_TILE_SWAP_REQUEST, src=(2, 2), dst=(2, 3))
    assert get_session(world).over

    received.clear()
    bus.emit(EVENT_NEW_GAME)
    session = get_session(world)
    assert (session.score, session.moves_left, session.outcome) == (0, EngineConfig().initial_moves, None)
    assert (EVENT_SCORE_CHANGED, {"score": 0, "delta": 0, "depth": 0}) in received


def test_check_game_over_is_idempotent():
    bus, world, flow, received = flow_world(EngineConfig(target_score=1))
    get_session(world).score = 5
    assert flow.check_game_over() is Outcome.WON
    assert flow.check_game_over() is Outcome.WON
    assert names(received).count(EVENT_GAME_WON) == 1


@pytest.mark.parametrize("delta_steps", [1, 2, 3])
def test_score_system_adds_every_step(delta_steps):
    bus, world, board = build_world()
    ScoreSystem(world, bus)
    for depth in range(1, delta_steps + 1):
        bus.emit(EVENT_CASCADE_STEP, depth=depth, step=make_step([(0, 0), (0, 1), (0, 2)], depth=depth))
    assert get_session(world).score == 30 * delta_steps
