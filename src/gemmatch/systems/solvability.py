from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generator, List, Optional, Tuple

from esper import World

from gemmatch.events.bus import (
    EventBus,
    EVENT_BOARD_RESHUFFLED,
    EVENT_BOARD_UNSOLVABLE,
    EVENT_REFILL_COMPLETED,
)
from gemmatch.systems.board_ops import Position, apply_gravity_and_refill, clear_board, color_grid
from gemmatch.systems.match import ColorGrid, find_matches
from gemmatch.systems.match_resolution import (
    CascadeStep,
    MatchResolutionSystem,
    ReshuffleStep,
    SettleStep,
    run_to_completion,
)
from gemmatch.systems.token_pool_system import TokenPoolSystem
from gemmatch.utils.resources import get_rules

logger = logging.getLogger(__name__)

Swap = Tuple[Position, Position]


def _iter_swap_candidates(grid: ColorGrid):
    """Row-major, right neighbour before down neighbour; each adjacent pair once."""
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    for row in range(rows):
        for col in range(cols):
            if grid[row][col] is None:
                continue
            if col + 1 < cols and grid[row][col + 1] is not None:
                yield (row, col), (row, col + 1)
            if row + 1 < rows and grid[row + 1][col] is not None:
                yield (row, col), (row + 1, col)


def _swap(work: List[List[Optional[str]]], src: Position, dst: Position) -> None:
    (sr, sc), (dr, dc) = src, dst
    work[sr][sc], work[dr][dc] = work[dr][dc], work[sr][sc]


def _simulate(work: List[List[Optional[str]]], src: Position, dst: Position) -> bool:
    _swap(work, src, dst)
    try:
        return bool(find_matches(work))
    finally:
        _swap(work, src, dst)


def predict_swap_creates_match(grid: ColorGrid, src: Position, dst: Position) -> bool:
    """Return True if swapping src/dst on ``grid`` would produce any match."""
    return _simulate([list(row) for row in grid], src, dst)


def find_hint_move(grid: ColorGrid) -> Optional[Swap]:
    work = [list(row) for row in grid]
    for src, dst in _iter_swap_candidates(grid):
        if _simulate(work, src, dst):
            return src, dst
    return None


def has_any_move(grid: ColorGrid) -> bool:
    return find_hint_move(grid) is not None


def find_valid_swaps(grid: ColorGrid) -> List[Swap]:
    """Enumerate every adjacent swap that would produce a match, in scan order."""
    work = [list(row) for row in grid]
    return [(src, dst) for src, dst in _iter_swap_candidates(grid) if _simulate(work, src, dst)]


@dataclass(frozen=True, slots=True)
class ReshuffleResult:
    score: int = 0
    attempts: int = 0
    solvable: bool = True


class SolvabilitySystem:
    """Keeps a playable board available after each move.

    When no single swap can produce a match the board is cleared without
    scoring, refilled from the pool and resolved, up to
    ``Rules.max_reshuffle_attempts`` times. After that the board is accepted
    as it is.
    """
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        pool: TokenPoolSystem,
        resolution: MatchResolutionSystem,
    ):
        self.world = world
        self.event_bus = event_bus
        self.pool = pool
        self.resolution = resolution

    def has_any_move(self) -> bool:
        return has_any_move(color_grid(self.world))

    def find_hint_move(self) -> Optional[Swap]:
        return find_hint_move(color_grid(self.world))

    def iter_reshuffle(self) -> Generator[CascadeStep, None, ReshuffleResult]:
        if self.has_any_move():
            return ReshuffleResult()
        limit = get_rules(self.world).max_reshuffle_attempts
        total = 0
        attempts = 0
        for attempt in range(1, limit + 1):
            attempts = attempt
            cleared = clear_board(self.world, self.pool)
            self.event_bus.emit(
                EVENT_BOARD_RESHUFFLED,
                attempt=attempt,
                positions=[(row, col) for row, col, _ in cleared],
            )
            yield ReshuffleStep(attempt=attempt, cleared=tuple(cleared))

            _, spawned = apply_gravity_and_refill(self.world, self.pool)
            if spawned:
                self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=spawned)
            grid = color_grid(self.world)
            yield SettleStep(
                depth=0,
                falls=(),
                spawned=tuple((row, col, grid[row][col]) for row, col in spawned),
            )

            result = yield from self.resolution.iter_cascade(reason="reshuffle")
            total += result.score
            if self.has_any_move():
                logger.info("Board reshuffled after %d attempt(s)", attempts)
                return ReshuffleResult(score=total, attempts=attempts, solvable=True)
        logger.warning("Board still has no moves after %d reshuffle attempts", attempts)
        self.event_bus.emit(EVENT_BOARD_UNSOLVABLE, attempts=attempts)
        return ReshuffleResult(score=total, attempts=attempts, solvable=False)

    def reshuffle_until_solvable(self) -> ReshuffleResult:
        _, result = run_to_completion(self.iter_reshuffle())
        return result
