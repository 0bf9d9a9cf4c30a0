from dataclasses import dataclass
from enum import Enum


class TokenLocation(Enum):
    WAITING = "waiting"
    PLACED = "placed"


@dataclass(slots=True)
class Token:
    """A recyclable token from the bag.

    token_id: permanent identifier, unique within one pool.
    color: one of the configured color names.
    location: WAITING while queued in the TokenPool, PLACED while bound to a board cell.
    """
    token_id: str
    color: str
    location: TokenLocation = TokenLocation.WAITING
