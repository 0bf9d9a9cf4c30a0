from __future__ import annotations

import random
from collections import deque
from typing import Dict, List, Sequence

from esper import World

from gemmatch.components.token import Token
from gemmatch.constants import COLORS
from gemmatch.events.bus import EventBus
from gemmatch.systems.match_resolution import MatchResolutionSystem
from gemmatch.systems.solvability import SolvabilitySystem
from gemmatch.systems.token_pool_system import TokenPoolSystem
from gemmatch.utils.resources import get_pool
from gemmatch.world import create_world


class Engine:
    """World plus the core systems, without a session on top."""

    def __init__(self, rules=None, seed=1234):
        self.bus = EventBus()
        self.world = create_world(rules=rules, rng=random.Random(seed))
        self.pool = TokenPoolSystem(self.world, self.bus)
        self.resolution = MatchResolutionSystem(self.world, self.bus, self.pool)
        self.solvability = SolvabilitySystem(self.world, self.bus, self.pool, self.resolution)
        self.pool.initialize()


def base_layout(rows: int = 8, cols: int = 8, colors: Sequence[str] = COLORS) -> List[List[str]]:
    """Diagonal pattern without two equal neighbours anywhere."""
    return [[colors[(3 * r + c) % len(colors)] for c in range(cols)] for r in range(rows)]


def with_overrides(layout: List[List[str]], overrides: Dict[tuple, str]) -> List[List[str]]:
    grid = [list(row) for row in layout]
    for (row, col), color in overrides.items():
        grid[row][col] = color
    return grid


# Swapping (5,0)/(5,1) completes a ruby column at col 1 (rows 5-7); the emerald
# that then falls to (7,1) completes an emerald row 7 cols 0-3.
CASCADE_OVERRIDES = {
    (4, 1): "emerald",
    (5, 0): "ruby",
    (5, 1): "topaz",
    (6, 1): "ruby",
    (7, 1): "ruby",
    (7, 0): "emerald",
    (7, 2): "emerald",
    (7, 3): "emerald",
    (1, 7): "citrine",
}

# Refill draws for the cascade layout: three for col 1, then one each for cols 0-3.
CASCADE_REFILL = ["topaz", "citrine", "amethyst", "sapphire", "aquamarine", "rose", "ruby"]


def cascade_layout() -> List[List[str]]:
    return with_overrides(base_layout(), CASCADE_OVERRIDES)


def stalemate_layout(colors: Sequence[str], rows: int = 8, cols: int = 8) -> List[List[str]]:
    """Three colors along diagonals: no run and no swap that makes one."""
    return [[colors[(r + c) % 3] for c in range(cols)] for r in range(rows)]


def stack_queue(world: World, colors: Sequence[str]) -> None:
    """Move the first waiting token of each color to the front of the queue, in order."""
    pool = get_pool(world)
    remaining = list(pool.queue)
    picked: List[int] = []
    for color in colors:
        for entity in remaining:
            if entity in picked:
                continue
            if world.component_for_entity(entity, Token).color == color:
                picked.append(entity)
                break
        else:
            raise AssertionError(f"No waiting '{color}' token to stack")
    pool.queue = deque(picked + [entity for entity in remaining if entity not in picked])


def record(bus, name: str) -> list:
    events: list = []
    bus.subscribe(name, lambda sender, **payload: events.append(payload))
    return events
