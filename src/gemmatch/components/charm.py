from dataclasses import dataclass
from enum import Enum


class CharmKind(Enum):
    MULTIPLIER_PER_COLOR = "multiplier-per-color"
    FLAT_BONUS_PER_COLOR = "flat-bonus-per-color"


@dataclass(frozen=True, slots=True)
class Charm:
    """Persistent scoring modifier keyed by color.

    MULTIPLIER_PER_COLOR adds base * count * magnitude for matched cells of ``color``;
    FLAT_BONUS_PER_COLOR adds magnitude * count.
    """
    kind: CharmKind
    color: str
    magnitude: int

    @property
    def slug(self) -> str:
        return f"{self.kind.value}:{self.color}"
