"""Public entry point of the engine: one game session per instance."""
from __future__ import annotations

import dataclasses
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Generator, List, Optional, Tuple

from gemmatch.components.charm import Charm
from gemmatch.components.level_state import LevelOutcome, LevelState
from gemmatch.components.rules import Rules
from gemmatch.constants import DEFAULT_SHOP_OFFER_COUNT
from gemmatch.events.bus import (
    EventBus,
    EVENT_SWAP_ACCEPTED,
    EVENT_SWAP_PROPOSED,
    EVENT_SWAP_REJECTED,
    EVENT_SWAP_REVERTED,
    EVENT_TICK,
)
from gemmatch.factories.charms import CharmOffer
from gemmatch.systems.board_ops import Position, board_snapshot, color_grid, in_bounds, is_adjacent, swap_cells
from gemmatch.systems.hint_system import IdleHintSystem
from gemmatch.systems.level_system import LevelSystem
from gemmatch.systems.match import find_matches
from gemmatch.systems.match_resolution import CascadeStep, MatchResolutionSystem, run_to_completion
from gemmatch.systems.scoring import LevelConfig
from gemmatch.systems.shop_system import PurchaseResult, ShopSystem
from gemmatch.systems.solvability import SolvabilitySystem
from gemmatch.systems.token_pool_system import TokenPoolSystem
from gemmatch.utils.resources import (
    get_charm_inventory,
    get_economy,
    get_hint_state,
    get_level_state,
    get_turn_state,
)
from gemmatch.world import create_world

logger = logging.getLogger(__name__)


class SwapStatus(Enum):
    REJECTED = "rejected"
    REVERTED = "reverted"
    RESOLVED = "resolved"


class RejectReason(Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    NOT_ADJACENT = "not_adjacent"
    BUSY = "busy"
    LEVEL_OVER = "level_over"


@dataclass(frozen=True, slots=True)
class SwapOutcome:
    status: SwapStatus
    reason: Optional[RejectReason] = None
    score_gained: int = 0
    steps: Tuple[CascadeStep, ...] = ()
    level_outcome: LevelOutcome = LevelOutcome.NONE


def _as_position(value) -> Optional[Position]:
    try:
        row, col = value
    except (TypeError, ValueError):
        return None
    if not isinstance(row, int) or not isinstance(col, int):
        return None
    return row, col


class GameSession:
    """Owns the world, the event bus and every system of one game.

    A new game (level 1, no charms, no currency) is started on construction.
    Nothing here raises for bad player input; every call answers with an
    outcome value instead.
    """

    def __init__(self, rules: Rules | None = None, seed: int | None = None, event_bus: EventBus | None = None):
        self.event_bus = event_bus or EventBus()
        self.world = create_world(rules=rules, rng=random.Random(seed))
        self.pool = TokenPoolSystem(self.world, self.event_bus)
        self.resolution = MatchResolutionSystem(self.world, self.event_bus, self.pool)
        self.solvability = SolvabilitySystem(self.world, self.event_bus, self.pool, self.resolution)
        self.levels = LevelSystem(self.world, self.event_bus, self.pool)
        self.shop = ShopSystem(self.world, self.event_bus)
        self.hints = IdleHintSystem(self.world, self.event_bus)
        self.levels.start_new_game()

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------

    def propose_swap(self, a, b) -> SwapOutcome:
        """Apply a swap and resolve it to a stable board before returning."""
        _, outcome = run_to_completion(self.play_swap(a, b))
        return outcome

    def play_swap(self, a, b) -> Generator[CascadeStep, None, SwapOutcome]:
        """Step-by-step form of propose_swap.

        Yields each clearance, settle and reshuffle step after the board has
        already advanced. The engine stays busy until the generator finishes;
        closing it early still resolves the board before the lock is released.
        """
        src, dst = _as_position(a), _as_position(b)
        self.event_bus.emit(EVENT_SWAP_PROPOSED, src=src, dst=dst)
        reason = self._rejection(src, dst)
        if reason is not None:
            logger.debug("Swap %s -> %s rejected: %s", src, dst, reason.value)
            self.event_bus.emit(EVENT_SWAP_REJECTED, src=src, dst=dst, reason=reason)
            return SwapOutcome(status=SwapStatus.REJECTED, reason=reason)

        turn = get_turn_state(self.world)
        turn.busy = True
        turn.action_source = "swap"
        try:
            swap_cells(self.world, src, dst)
            if not find_matches(color_grid(self.world)):
                swap_cells(self.world, src, dst)
                self.event_bus.emit(EVENT_SWAP_REVERTED, src=src, dst=dst)
                return SwapOutcome(status=SwapStatus.REVERTED)
            self.event_bus.emit(EVENT_SWAP_ACCEPTED, src=src, dst=dst)

            episode = self._iter_episode()
            steps: List[CascadeStep] = []
            try:
                while True:
                    try:
                        step = next(episode)
                    except StopIteration as stop:
                        score = stop.value
                        break
                    steps.append(step)
                    yield step
            except GeneratorExit:
                run_to_completion(episode)
                self.levels.record_move()
                raise
            level_outcome = self.levels.record_move()
            return SwapOutcome(
                status=SwapStatus.RESOLVED,
                score_gained=score,
                steps=tuple(steps),
                level_outcome=level_outcome,
            )
        finally:
            turn.busy = False
            turn.action_source = None

    def _iter_episode(self) -> Generator[CascadeStep, None, int]:
        cascade = yield from self.resolution.iter_cascade("swap")
        reshuffle = yield from self.solvability.iter_reshuffle()
        return cascade.score + reshuffle.score

    def _rejection(self, src: Optional[Position], dst: Optional[Position]) -> Optional[RejectReason]:
        if get_turn_state(self.world).busy:
            return RejectReason.BUSY
        if self.levels.level_over():
            return RejectReason.LEVEL_OVER
        if src is None or dst is None or not (in_bounds(self.world, src) and in_bounds(self.world, dst)):
            return RejectReason.OUT_OF_BOUNDS
        if not is_adjacent(src, dst):
            return RejectReason.NOT_ADJACENT
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_hint(self) -> Optional[Tuple[Position, Position]]:
        if get_turn_state(self.world).busy:
            return None
        return self.solvability.find_hint_move()

    def get_board_snapshot(self):
        return board_snapshot(self.world)

    def get_pack_snapshot(self, view: str = "all"):
        try:
            return self.pool.pack_snapshot(view)
        except ValueError:
            logger.warning("Unknown pack view %r", view)
            return []

    @property
    def level_state(self) -> LevelState:
        return dataclasses.replace(get_level_state(self.world))

    @property
    def currency(self) -> int:
        return get_economy(self.world).currency

    @property
    def charms(self) -> Tuple[Charm, ...]:
        return tuple(get_charm_inventory(self.world).charms)

    @property
    def busy(self) -> bool:
        return get_turn_state(self.world).busy

    @property
    def pending_hint(self) -> Optional[Tuple[Position, Position]]:
        return get_hint_state(self.world).hint

    # ------------------------------------------------------------------
    # Shop
    # ------------------------------------------------------------------

    def get_shop_offer(self, count: int = DEFAULT_SHOP_OFFER_COUNT) -> List[CharmOffer]:
        if not isinstance(count, int):
            return []
        return self.shop.get_shop_offer(count)

    def purchase_charm(self, offer_id: str) -> PurchaseResult:
        if not isinstance(offer_id, str):
            return PurchaseResult.UNKNOWN_CHARM
        return self.shop.purchase_charm(offer_id)

    def sell_charm(self, index: int) -> int:
        if not isinstance(index, int):
            return 0
        return self.shop.sell_charm(index)

    # ------------------------------------------------------------------
    # Levels and time
    # ------------------------------------------------------------------

    def start_level(self, level: int) -> Optional[LevelConfig]:
        if self.busy or not isinstance(level, int):
            return None
        return self.levels.start_level(level)

    def start_new_game(self) -> Optional[LevelConfig]:
        if self.busy:
            return None
        return self.levels.start_new_game()

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)
