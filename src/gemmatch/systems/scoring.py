from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from gemmatch.components.charm import Charm, CharmKind
from gemmatch.constants import (
    BASE_CELL_SCORE,
    LEVEL_BASE_MOVES,
    LEVEL_BASE_TARGET,
    LEVEL_MIN_MOVES,
    LEVEL_MOVES_DECAY,
    LEVEL_TARGET_EXPONENT,
    LEVEL_TARGET_STEP,
)


@dataclass(frozen=True, slots=True)
class LevelConfig:
    target: int
    moves: int


def level_config(level: int) -> LevelConfig:
    """Score target and move budget for a level; depends on the level number only."""
    steps = max(0, level - 1)
    target = round(LEVEL_BASE_TARGET + steps ** LEVEL_TARGET_EXPONENT * LEVEL_TARGET_STEP)
    moves = max(LEVEL_MIN_MOVES, LEVEL_BASE_MOVES - math.floor(steps * LEVEL_MOVES_DECAY))
    return LevelConfig(target=target, moves=moves)


def score_clearance(
    colors: Iterable[str],
    multiplier: int,
    charms: Iterable[Charm] = (),
    *,
    base: int = BASE_CELL_SCORE,
) -> int:
    """Points for one clearance.

    colors: color of every matched cell (one entry per cell).
    Base points are scaled by the chain multiplier; charm bonuses are not.
    """
    counts = Counter(colors)
    total = base * sum(counts.values()) * multiplier
    for charm in charms:
        matched = counts.get(charm.color, 0)
        if not matched:
            continue
        if charm.kind is CharmKind.MULTIPLIER_PER_COLOR:
            total += base * matched * charm.magnitude
        elif charm.kind is CharmKind.FLAT_BONUS_PER_COLOR:
            total += charm.magnitude * matched
    return total
