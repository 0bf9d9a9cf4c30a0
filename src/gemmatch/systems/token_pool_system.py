from __future__ import annotations

import logging
from collections import deque
from typing import Dict, List, Optional

from esper import World

from gemmatch.components.board_position import BoardPosition
from gemmatch.components.token import Token, TokenLocation
from gemmatch.events.bus import (
    EventBus,
    EVENT_POOL_EXHAUSTED,
    EVENT_POOL_INITIALIZED,
    EVENT_POOL_INVARIANT_BROKEN,
)
from gemmatch.systems.board_ops import color_grid, reset_board
from gemmatch.systems.match import creates_match_at
from gemmatch.utils.resources import get_pool, get_rules, world_rng

logger = logging.getLogger(__name__)


class TokenPoolSystem:
    """Owns the bag of tokens that circulates between the queue and the board.

    Logic:
      - initialize(): rebuild the full set of tokens, all waiting, in shuffled order.
      - draw_for_cell(): initial deal only; skips candidates that would complete a run.
      - draw(): refills and cascades; pops the front of the queue unconditionally.
      - return_token(): recycle a cleared token back into the queue.
    Every operation re-checks conservation (waiting + placed == total).
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> List[int]:
        rules = get_rules(self.world)
        pool = get_pool(self.world)
        colors = list(rules.colors)
        if not colors:
            raise ValueError("Token pool needs at least one color")
        for entity, _ in list(self.world.get_component(Token)):
            self.world.delete_entity(entity, immediate=True)
        reset_board(self.world)

        per_color = rules.pool_size // len(colors)
        remainder = rules.pool_size - per_color * len(colors)
        distribution: Dict[str, int] = {}
        created: List[int] = []
        for color in colors:
            count = per_color + (1 if remainder > 0 else 0)
            if remainder > 0:
                remainder -= 1
            distribution[color] = count
            for index in range(count):
                created.append(self.world.create_entity(Token(token_id=f"{color}-{index}", color=color)))

        order = list(created)
        world_rng(self.world).shuffle(order)
        pool.total = rules.pool_size
        pool.queue = deque(order)
        self.check_invariants("initialize")
        self.event_bus.emit(EVENT_POOL_INITIALIZED, total=pool.total, per_color=distribution)
        return created

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw_for_cell(self, row: int, col: int) -> Optional[int]:
        """Draw the first queued token that does not complete a run at (row, col)."""
        pool = get_pool(self.world)
        if not pool.queue:
            self._report_exhausted("draw_for_cell")
            return None
        grid = color_grid(self.world)
        for _ in range(len(pool.queue)):
            candidate = pool.queue[0]
            token = self.world.component_for_entity(candidate, Token)
            if not creates_match_at(grid, token.color, row, col):
                return self._pop_front("draw_for_cell")
            pool.queue.rotate(-1)
        # Every candidate completes a run; accept the front one anyway.
        return self._pop_front("draw_for_cell")

    def draw(self) -> Optional[int]:
        pool = get_pool(self.world)
        if not pool.queue:
            self._report_exhausted("draw")
            return None
        return self._pop_front("draw")

    def draw_color(self, color: str) -> Optional[int]:
        """Take the first waiting token of ``color``; used to deal fixed layouts."""
        pool = get_pool(self.world)
        for entity in pool.queue:
            if self.world.component_for_entity(entity, Token).color == color:
                pool.queue.remove(entity)
                self.world.component_for_entity(entity, Token).location = TokenLocation.PLACED
                self.check_invariants("draw_color")
                return entity
        self._report_exhausted("draw_color")
        return None

    def _pop_front(self, operation: str) -> int:
        pool = get_pool(self.world)
        entity = pool.queue.popleft()
        self.world.component_for_entity(entity, Token).location = TokenLocation.PLACED
        self.check_invariants(operation)
        return entity

    def _report_exhausted(self, operation: str) -> None:
        logger.warning("Token pool exhausted during %s; cell left empty", operation)
        self.event_bus.emit(EVENT_POOL_EXHAUSTED, operation=operation)

    # ------------------------------------------------------------------
    # Returning
    # ------------------------------------------------------------------

    def return_token(self, entity: int) -> None:
        token: Token = self.world.component_for_entity(entity, Token)
        pool = get_pool(self.world)
        if token.location is TokenLocation.WAITING:
            logger.error("Token %s returned twice; ignoring", token.token_id)
            return
        if self.world.has_component(entity, BoardPosition):
            logger.error("Token %s returned while still bound to the board", token.token_id)
        token.location = TokenLocation.WAITING
        if get_rules(self.world).random_return:
            index = world_rng(self.world).randint(0, len(pool.queue))
            pool.queue.insert(index, entity)
        else:
            pool.queue.append(entity)
        self.check_invariants("return_token")

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def waiting_count(self) -> int:
        return len(get_pool(self.world).queue)

    def placed_count(self) -> int:
        return sum(
            1 for _, token in self.world.get_component(Token)
            if token.location is TokenLocation.PLACED
        )

    def pack_snapshot(self, view: str = "all") -> List[Dict[str, str]]:
        """List tokens for a pack viewer; view is 'all' or 'waiting'."""
        if view not in ("all", "waiting"):
            raise ValueError(f"Unknown pack view '{view}'")
        entries = []
        for _, token in sorted(self.world.get_component(Token), key=lambda item: item[0]):
            if view == "waiting" and token.location is not TokenLocation.WAITING:
                continue
            entries.append({"id": token.token_id, "color": token.color, "location": token.location.value})
        return entries

    def check_invariants(self, operation: str = "check") -> bool:
        consistent = pool_is_consistent(self.world)
        if not consistent:
            pool = get_pool(self.world)
            waiting = len(pool.queue)
            placed = self.placed_count()
            logger.error(
                "Token pool inconsistent after %s: waiting=%d placed=%d total=%d",
                operation, waiting, placed, pool.total,
            )
            self.event_bus.emit(
                EVENT_POOL_INVARIANT_BROKEN,
                operation=operation,
                waiting=waiting,
                placed=placed,
                total=pool.total,
            )
        return consistent


def pool_is_consistent(world: World) -> bool:
    """Conservation: queue holds exactly the waiting tokens and waiting + placed == total."""
    pool = get_pool(world)
    tokens = list(world.get_component(Token))
    if len(tokens) != pool.total:
        return False
    if len({token.token_id for _, token in tokens}) != len(tokens):
        return False
    queued = list(pool.queue)
    if len(set(queued)) != len(queued):
        return False
    waiting = {entity for entity, token in tokens if token.location is TokenLocation.WAITING}
    placed = sum(1 for _, token in tokens if token.location is TokenLocation.PLACED)
    return waiting == set(queued) and len(waiting) + placed == pool.total
