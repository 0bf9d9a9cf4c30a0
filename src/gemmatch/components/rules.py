from dataclasses import dataclass, field
from typing import Tuple

from gemmatch.constants import (
    BASE_CELL_SCORE,
    BOARD_COLS,
    BOARD_ROWS,
    CHARM_FLAT_MAGNITUDE,
    CHARM_MULTIPLIER_MAGNITUDE,
    CHARM_PRICE,
    COLORS,
    HINT_IDLE_SECONDS,
    MAX_CHARMS,
    MAX_RESHUFFLE_ATTEMPTS,
    POOL_SIZE,
)


@dataclass(slots=True)
class Rules:
    """Game configuration stored on a single entity.

    Defaults come from ``gemmatch.constants``; tests and variants override
    individual fields (for example a three-color pool to build stalemates).
    random_return: insert returned tokens at a random queue position instead of the back.
    auto_advance: start the next level right after the level-end hook fires.
    """
    rows: int = BOARD_ROWS
    cols: int = BOARD_COLS
    colors: Tuple[str, ...] = field(default_factory=lambda: tuple(COLORS))
    pool_size: int = POOL_SIZE
    base_cell_score: int = BASE_CELL_SCORE
    max_reshuffle_attempts: int = MAX_RESHUFFLE_ATTEMPTS
    max_charms: int = MAX_CHARMS
    charm_price: int = CHARM_PRICE
    charm_multiplier_magnitude: int = CHARM_MULTIPLIER_MAGNITUDE
    charm_flat_magnitude: int = CHARM_FLAT_MAGNITUDE
    hint_idle_seconds: float = HINT_IDLE_SECONDS
    random_return: bool = True
    auto_advance: bool = True

    def __post_init__(self) -> None:
        self.colors = tuple(self.colors)
        if len(self.colors) < 2:
            raise ValueError(f"At least two colors are required, got {len(self.colors)}")
        if len(set(self.colors)) != len(self.colors):
            raise ValueError(f"Duplicate colors in {self.colors}")
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Invalid board size {self.rows}x{self.cols}")
        if self.pool_size < self.rows * self.cols:
            raise ValueError(
                f"Pool of {self.pool_size} tokens cannot fill a {self.rows}x{self.cols} board"
            )
        if self.pool_size < len(self.colors):
            raise ValueError(f"Pool of {self.pool_size} tokens cannot cover {len(self.colors)} colors")

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols
