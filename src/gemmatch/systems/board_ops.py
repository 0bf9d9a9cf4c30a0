from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from esper import World

from gemmatch.components.board_position import BoardPosition
from gemmatch.components.token import Token, TokenLocation
from gemmatch.utils.resources import get_board

if TYPE_CHECKING:
    from gemmatch.systems.token_pool_system import TokenPoolSystem

Position = Tuple[int, int]
ColorEntry = Tuple[int, int, str]


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: Position
    target: Position
    token_id: str
    color: str


def in_bounds(world: World, pos: Position) -> bool:
    board = get_board(world)
    row, col = pos
    return 0 <= row < board.rows and 0 <= col < board.cols


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return abs(ar - br) + abs(ac - bc) == 1


def token_at(world: World, row: int, col: int) -> Optional[int]:
    return get_board(world).cells[row][col]


def color_at(world: World, row: int, col: int) -> Optional[str]:
    entity = token_at(world, row, col)
    if entity is None:
        return None
    return world.component_for_entity(entity, Token).color


def color_grid(world: World) -> List[List[Optional[str]]]:
    """Return the board as rows of color names (None for empty cells)."""
    board = get_board(world)
    return [
        [
            world.component_for_entity(entity, Token).color if entity is not None else None
            for entity in row
        ]
        for row in board.cells
    ]


def board_snapshot(world: World) -> Tuple[Tuple[Optional[Dict[str, str]], ...], ...]:
    """Read-only grid of {'color', 'id'} dicts for rendering."""
    board = get_board(world)
    snapshot = []
    for row in board.cells:
        cells = []
        for entity in row:
            if entity is None:
                cells.append(None)
                continue
            token = world.component_for_entity(entity, Token)
            cells.append({"color": token.color, "id": token.token_id})
        snapshot.append(tuple(cells))
    return tuple(snapshot)


def reset_board(world: World) -> None:
    board = get_board(world)
    for entity, _ in list(world.get_component(BoardPosition)):
        world.remove_component(entity, BoardPosition)
    board.cells = [[None] * board.cols for _ in range(board.rows)]


def place_token(world: World, entity: int, row: int, col: int) -> None:
    board = get_board(world)
    board.cells[row][col] = entity
    if world.has_component(entity, BoardPosition):
        position = world.component_for_entity(entity, BoardPosition)
        position.row, position.col = row, col
    else:
        world.add_component(entity, BoardPosition(row=row, col=col))


def swap_cells(world: World, a: Position, b: Position) -> bool:
    """Exchange the tokens bound to two neighbouring cells. No match check."""
    if not (in_bounds(world, a) and in_bounds(world, b)) or not is_adjacent(a, b):
        return False
    board = get_board(world)
    ent_a = board.cells[a[0]][a[1]]
    ent_b = board.cells[b[0]][b[1]]
    board.cells[a[0]][a[1]], board.cells[b[0]][b[1]] = ent_b, ent_a
    if ent_a is not None:
        pos = world.component_for_entity(ent_a, BoardPosition)
        pos.row, pos.col = b
    if ent_b is not None:
        pos = world.component_for_entity(ent_b, BoardPosition)
        pos.row, pos.col = a
    return True


def remove_at(world: World, pos: Position) -> Optional[int]:
    """Clear a cell and return its token entity; the caller returns it to the pool."""
    board = get_board(world)
    row, col = pos
    entity = board.cells[row][col]
    if entity is None:
        return None
    board.cells[row][col] = None
    if world.has_component(entity, BoardPosition):
        world.remove_component(entity, BoardPosition)
    return entity


def collapse_column(world: World, col: int) -> List[GravityMove]:
    """Compact surviving tokens toward the bottom row, preserving their order."""
    board = get_board(world)
    moves: List[GravityMove] = []
    write_row = board.rows - 1
    for row in range(board.rows - 1, -1, -1):
        entity = board.cells[row][col]
        if entity is None:
            continue
        if row != write_row:
            token = world.component_for_entity(entity, Token)
            board.cells[row][col] = None
            place_token(world, entity, write_row, col)
            moves.append(GravityMove(source=(row, col), target=(write_row, col), token_id=token.token_id, color=token.color))
        write_row -= 1
    return moves


def vacant_count(world: World, col: int) -> int:
    board = get_board(world)
    return sum(1 for row in range(board.rows) if board.cells[row][col] is None)


def fill_column(world: World, pool: "TokenPoolSystem", col: int, count: int) -> List[Position]:
    """Draw ``count`` tokens into the vacated top cells, top to bottom in draw order."""
    board = get_board(world)
    spawned: List[Position] = []
    for row in range(min(count, board.rows)):
        if board.cells[row][col] is not None:
            continue
        entity = pool.draw()
        if entity is None:
            continue
        place_token(world, entity, row, col)
        spawned.append((row, col))
    return spawned


def apply_gravity_and_refill(world: World, pool: "TokenPoolSystem") -> Tuple[List[GravityMove], List[Position]]:
    """Collapse then refill every column that has vacated cells."""
    board = get_board(world)
    moves: List[GravityMove] = []
    spawned: List[Position] = []
    for col in range(board.cols):
        vacated = vacant_count(world, col)
        if not vacated:
            continue
        moves.extend(collapse_column(world, col))
        spawned.extend(fill_column(world, pool, col, vacated))
    return moves, spawned


def clear_cells(world: World, pool: "TokenPoolSystem", positions: Sequence[Position]) -> List[ColorEntry]:
    """Remove tokens at positions and hand them back to the pool."""
    cleared: List[ColorEntry] = []
    for row, col in sorted(positions):
        entity = remove_at(world, (row, col))
        if entity is None:
            continue
        cleared.append((row, col, world.component_for_entity(entity, Token).color))
        pool.return_token(entity)
    return cleared


def clear_board(world: World, pool: "TokenPoolSystem") -> List[ColorEntry]:
    board = get_board(world)
    occupied = [
        (row, col)
        for row in range(board.rows)
        for col in range(board.cols)
        if board.cells[row][col] is not None
    ]
    return clear_cells(world, pool, occupied)


def deal_board(world: World, pool: "TokenPoolSystem") -> List[Position]:
    """Populate every empty cell row-major, avoiding ready-made runs."""
    board = get_board(world)
    placed: List[Position] = []
    for row in range(board.rows):
        for col in range(board.cols):
            if board.cells[row][col] is not None:
                continue
            entity = pool.draw_for_cell(row, col)
            if entity is None:
                continue
            place_token(world, entity, row, col)
            placed.append((row, col))
    return placed


def deal_layout(world: World, pool: "TokenPoolSystem", layout: Sequence[Sequence[Optional[str]]]) -> None:
    """Replace the board with a fixed arrangement of colors (None leaves a cell empty).

    Tokens come out of the pool, so conservation holds for hand-built boards.
    Raises ValueError when the layout does not fit or the pool lacks a color.
    """
    board = get_board(world)
    if len(layout) != board.rows or any(len(row) != board.cols for row in layout):
        raise ValueError(f"Layout must be {board.rows}x{board.cols}")
    clear_board(world, pool)
    for row in range(board.rows):
        for col in range(board.cols):
            color = layout[row][col]
            if color is None:
                continue
            entity = pool.draw_color(color)
            if entity is None:
                raise ValueError(f"No waiting '{color}' token left for cell {(row, col)}")
            place_token(world, entity, row, col)


def board_is_consistent(world: World) -> bool:
    """Bijection between non-empty cells and placed tokens, positions in sync."""
    board = get_board(world)
    seen = set()
    for row in range(board.rows):
        for col in range(board.cols):
            entity = board.cells[row][col]
            if entity is None:
                continue
            if entity in seen:
                return False
            seen.add(entity)
            if world.component_for_entity(entity, Token).location is not TokenLocation.PLACED:
                return False
            if not world.has_component(entity, BoardPosition):
                return False
            position = world.component_for_entity(entity, BoardPosition)
            if (position.row, position.col) != (row, col):
                return False
    placed = {entity for entity, token in world.get_component(Token) if token.location is TokenLocation.PLACED}
    bound = {entity for entity, _ in world.get_component(BoardPosition)}
    return placed == seen and bound == seen
