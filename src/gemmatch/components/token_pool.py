from collections import deque
from dataclasses import dataclass, field
from typing import Deque

@dataclass(slots=True)
class TokenPool:
    """Draw queue of waiting token entities.

    total: fixed number of tokens in circulation (waiting + placed).
    queue: waiting token entities in draw order; the front is drawn next.
    """
    total: int = 0
    queue: Deque[int] = field(default_factory=deque)
