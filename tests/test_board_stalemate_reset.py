from gemmatch.components.rules import Rules
from gemmatch.events.bus import EVENT_BOARD_RESHUFFLED, EVENT_BOARD_UNSOLVABLE
from gemmatch.systems.board_ops import board_is_consistent, color_grid, deal_layout
from gemmatch.systems.match import find_matches
from gemmatch.systems.match_resolution import ReshuffleStep, SettleStep
from gemmatch.systems.solvability import (
    find_hint_move,
    find_valid_swaps,
    has_any_move,
    predict_swap_creates_match,
)
from gemmatch.systems.token_pool_system import pool_is_consistent
from tests.helpers import Engine, cascade_layout, record, stalemate_layout

THREE_COLORS = ("ruby", "sapphire", "emerald")


def test_hint_follows_row_major_right_then_down_order():
    grid = [
        ["a", "a", "b"],
        ["c", "d", "a"],
        ["e", "f", "g"],
    ]
    assert find_hint_move(grid) == ((0, 2), (1, 2))
    assert find_valid_swaps(grid) == [((0, 2), (1, 2))]
    assert has_any_move(grid)
    assert predict_swap_creates_match(grid, (0, 2), (1, 2))
    assert not predict_swap_creates_match(grid, (0, 0), (1, 0))
    # Prediction never mutates the grid it was given.
    assert grid[0] == ["a", "a", "b"]


def test_diagonal_three_color_pattern_has_no_moves():
    grid = stalemate_layout(THREE_COLORS)
    assert not find_matches(grid)
    assert not has_any_move(grid)
    assert find_hint_move(grid) is None


def test_two_color_checkerboard_still_has_moves():
    grid = [["a" if (r + c) % 2 == 0 else "b" for c in range(8)] for r in range(8)]
    assert has_any_move(grid)


def test_stalemate_triggers_board_reshuffle():
    engine = Engine(rules=Rules(colors=THREE_COLORS), seed=99)
    reshuffles = record(engine.bus, EVENT_BOARD_RESHUFFLED)
    deal_layout(engine.world, engine.pool, stalemate_layout(THREE_COLORS))
    assert not engine.solvability.has_any_move()

    steps = []
    reshuffle = engine.solvability.iter_reshuffle()
    while True:
        try:
            steps.append(next(reshuffle))
        except StopIteration as stop:
            result = stop.value
            break

    assert isinstance(steps[0], ReshuffleStep)
    assert len(steps[0].cleared) == 64
    assert isinstance(steps[1], SettleStep) and len(steps[1].spawned) == 64
    assert 1 <= result.attempts <= 5
    assert result.solvable
    assert len(reshuffles) == result.attempts
    assert engine.solvability.has_any_move()
    assert not find_matches(color_grid(engine.world))
    assert board_is_consistent(engine.world)
    assert pool_is_consistent(engine.world)


def test_playable_board_is_left_alone(engine):
    deal_layout(engine.world, engine.pool, cascade_layout())
    result = engine.solvability.reshuffle_until_solvable()
    assert result.attempts == 0 and result.solvable


def test_unsolvable_after_bounded_attempts_is_accepted():
    engine = Engine(rules=Rules(colors=THREE_COLORS, max_reshuffle_attempts=0), seed=5)
    unsolvable = record(engine.bus, EVENT_BOARD_UNSOLVABLE)
    deal_layout(engine.world, engine.pool, stalemate_layout(THREE_COLORS))

    result = engine.solvability.reshuffle_until_solvable()

    assert not result.solvable
    assert unsolvable == [{"attempts": 0}]
    assert color_grid(engine.world) == stalemate_layout(THREE_COLORS)
