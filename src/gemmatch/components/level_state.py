"""Per-level progress resource."""
from dataclasses import dataclass
from enum import Enum


class LevelOutcome(Enum):
    NONE = "none"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True)
class LevelState:
    level: int = 1
    score_target: int = 0
    moves_remaining: int = 0
    current_score: int = 0
    chain_multiplier: int = 1
    outcome: LevelOutcome = LevelOutcome.NONE
