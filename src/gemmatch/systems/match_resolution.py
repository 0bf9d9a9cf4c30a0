from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generator, List, Tuple, Union

from esper import World

from gemmatch.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
)
from gemmatch.systems.board_ops import (
    ColorEntry,
    GravityMove,
    Position,
    apply_gravity_and_refill,
    clear_cells,
    color_at,
    color_grid,
)
from gemmatch.systems.match import find_match_groups, find_matches
from gemmatch.systems.scoring import score_clearance
from gemmatch.systems.token_pool_system import TokenPoolSystem
from gemmatch.utils.resources import (
    get_charm_inventory,
    get_level_state,
    get_rules,
    get_turn_state,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClearStep:
    """Cells removed by one clearance, scored at ``multiplier``."""
    depth: int
    multiplier: int
    cleared: Tuple[ColorEntry, ...]
    groups: Tuple[Tuple[Position, ...], ...]
    score: int
    reason: str = "swap"

    @property
    def positions(self) -> Tuple[Position, ...]:
        return tuple((row, col) for row, col, _ in self.cleared)


@dataclass(frozen=True, slots=True)
class SettleStep:
    """Gravity and refill that followed a clearance (depth 0 after a reshuffle)."""
    depth: int
    falls: Tuple[GravityMove, ...]
    spawned: Tuple[ColorEntry, ...]


@dataclass(frozen=True, slots=True)
class ReshuffleStep:
    """Whole board returned to the pool without scoring."""
    attempt: int
    cleared: Tuple[ColorEntry, ...]


CascadeStep = Union[ClearStep, SettleStep, ReshuffleStep]


@dataclass(frozen=True, slots=True)
class CascadeResult:
    score: int = 0
    any_match: bool = False
    depth: int = 0


class MatchResolutionSystem:
    """Runs the match -> score -> clear -> gravity/refill loop until the board is stable.

    The loop is exposed as a generator so a presentation layer can animate each
    step before asking for the next one; the board state has already advanced
    by the time a step is yielded.
    """
    def __init__(self, world: World, event_bus: EventBus, pool: TokenPoolSystem):
        self.world = world
        self.event_bus = event_bus
        self.pool = pool

    def iter_cascade(self, reason: str = "swap") -> Generator[CascadeStep, None, CascadeResult]:
        state = get_turn_state(self.world)
        level = get_level_state(self.world)
        rules = get_rules(self.world)
        multiplier = 1
        depth = 0
        total = 0
        state.cascade_active = True
        try:
            while True:
                grid = color_grid(self.world)
                matches = find_matches(grid)
                if not matches:
                    break
                depth += 1
                state.cascade_depth = depth
                level.chain_multiplier = multiplier
                positions = sorted(matches)
                groups = find_match_groups(grid)
                self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, positions=positions, reason=reason)
                self.event_bus.emit(
                    EVENT_MATCH_FOUND, positions=positions, groups=groups, size=len(positions), depth=depth
                )

                colors = [grid[row][col] for row, col in positions]
                charms = list(get_charm_inventory(self.world).charms)
                delta = score_clearance(colors, multiplier, charms, base=rules.base_cell_score)
                cleared = clear_cells(self.world, self.pool, positions)
                total += delta
                level.current_score += delta
                self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, types=cleared, depth=depth)
                self.event_bus.emit(
                    EVENT_SCORE_CHANGED, score=level.current_score, delta=delta, multiplier=multiplier
                )
                yield ClearStep(
                    depth=depth,
                    multiplier=multiplier,
                    cleared=tuple(cleared),
                    groups=tuple(tuple(group) for group in groups),
                    score=delta,
                    reason=reason,
                )

                moves, spawned = apply_gravity_and_refill(self.world, self.pool)
                self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves, columns=len({m.target[1] for m in moves}))
                if spawned:
                    self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=spawned)
                yield SettleStep(depth=depth, falls=tuple(moves), spawned=self._with_colors(spawned))
                multiplier += 1
        finally:
            state.cascade_active = False
            state.cascade_depth = 0
            level.chain_multiplier = 1
        if depth:
            logger.debug("Cascade (%s) settled after %d clearances for %d points", reason, depth, total)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth, score=total, reason=reason)
        return CascadeResult(score=total, any_match=depth > 0, depth=depth)

    def resolve(self, reason: str = "swap") -> Tuple[List[CascadeStep], CascadeResult]:
        """Drain the cascade synchronously."""
        return run_to_completion(self.iter_cascade(reason))

    def _with_colors(self, positions: List[Position]) -> Tuple[ColorEntry, ...]:
        entries = []
        for row, col in positions:
            color = color_at(self.world, row, col)
            if color is not None:
                entries.append((row, col, color))
        return tuple(entries)


def run_to_completion(steps: Generator[CascadeStep, None, CascadeResult]):
    """Exhaust a step generator, returning (steps, generator return value)."""
    collected: List[CascadeStep] = []
    while True:
        try:
            collected.append(next(steps))
        except StopIteration as stop:
            return collected, stop.value
