from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class TurnState:
    """Tracks the resolution episode shared across systems.

    busy is held from the moment a swap is accepted until the board is stable
    again, including any forced reshuffle.
    """

    busy: bool = False
    action_source: Optional[str] = None
    cascade_active: bool = False
    cascade_depth: int = 0
