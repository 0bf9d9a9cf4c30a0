from dataclasses import dataclass
from typing import Optional, Tuple

Position = Tuple[int, int]

@dataclass(slots=True)
class HintState:
    idle_seconds: float = 0.0
    hint: Optional[Tuple[Position, Position]] = None
