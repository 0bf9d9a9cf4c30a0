from dataclasses import dataclass, field
from typing import List, Optional

@dataclass(slots=True)
class Board:
    rows: int
    cols: int
    # cells[row][col] -> token entity or None; row 0 is the top row.
    cells: List[List[Optional[int]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[None] * self.cols for _ in range(self.rows)]
