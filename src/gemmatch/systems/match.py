"""Match detection over a color grid.

A grid is a list of rows, each a list of color names or ``None`` for an
empty cell. Every function here is pure: same grid in, same result out.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Set, Tuple

Position = Tuple[int, int]
ColorGrid = Sequence[Sequence[Optional[str]]]

MIN_RUN = 3


def _runs(grid: ColorGrid) -> List[List[Position]]:
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    runs: List[List[Position]] = []
    # Horizontal runs
    for r in range(rows):
        run: List[Position] = []
        last = None
        for c in range(cols):
            tval = grid[r][c]
            if tval is not None and tval == last:
                run.append((r, c))
            else:
                if len(run) >= MIN_RUN:
                    runs.append(run)
                run = [(r, c)] if tval is not None else []
                last = tval
        if len(run) >= MIN_RUN:
            runs.append(run)
    # Vertical runs
    for c in range(cols):
        run = []
        last = None
        for r in range(rows):
            tval = grid[r][c]
            if tval is not None and tval == last:
                run.append((r, c))
            else:
                if len(run) >= MIN_RUN:
                    runs.append(run)
                run = [(r, c)] if tval is not None else []
                last = tval
        if len(run) >= MIN_RUN:
            runs.append(run)
    return runs


def find_matches(grid: ColorGrid) -> Set[Position]:
    """Return every cell that belongs to a same-color run of three or more."""
    return {pos for run in _runs(grid) for pos in run}


def find_match_groups(grid: ColorGrid) -> List[List[Position]]:
    """Detect runs and merge the ones sharing a cell into connected groups."""
    groups = [set(run) for run in _runs(grid)]
    merged: List[Set[Position]] = []
    while groups:
        first = groups.pop()
        changed = True
        while changed:
            changed = False
            for g in groups[:]:
                if first & g:
                    first |= g
                    groups.remove(g)
                    changed = True
        merged.append(first)
    return sorted(sorted(group) for group in merged)


def creates_match_at(grid: ColorGrid, color: str, row: int, col: int) -> bool:
    """Return True if placing ``color`` at (row, col) would complete a run of three.

    Checks both neighbours on each side plus the straddling pair, so it is
    valid whatever order the grid is being filled in.
    """
    rows = len(grid)
    cols = len(grid[0]) if rows else 0

    def same(r: int, c: int) -> bool:
        return 0 <= r < rows and 0 <= c < cols and grid[r][c] == color

    return (
        (same(row, col - 1) and same(row, col - 2))
        or (same(row, col - 1) and same(row, col + 1))
        or (same(row, col + 1) and same(row, col + 2))
        or (same(row - 1, col) and same(row - 2, col))
        or (same(row - 1, col) and same(row + 1, col))
        or (same(row + 1, col) and same(row + 2, col))
    )
