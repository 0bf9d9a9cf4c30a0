from __future__ import annotations

import logging

from esper import World

from gemmatch.components.level_state import LevelOutcome
from gemmatch.events.bus import (
    EventBus,
    EVENT_CURRENCY_CHANGED,
    EVENT_GAME_STARTED,
    EVENT_LEVEL_ENDED,
    EVENT_LEVEL_STARTED,
    EVENT_MOVES_CHANGED,
)
from gemmatch.systems.board_ops import clear_board, color_grid, deal_board
from gemmatch.systems.scoring import LevelConfig, level_config
from gemmatch.systems.solvability import has_any_move
from gemmatch.systems.token_pool_system import TokenPoolSystem
from gemmatch.utils.resources import get_charm_inventory, get_economy, get_level_state, get_rules

logger = logging.getLogger(__name__)


class LevelSystem:
    """Level progression and the currency earned from it.

    Flow:
      - start_level(): fresh pool, fresh match-free deal, target/moves from level_config().
      - record_move(): called once per accepted swap after the board settles;
        decides completion (score reached) or failure (moves exhausted).
      - On completion currency += unused moves. EVENT_LEVEL_ENDED is the
        level-end hook and always fires before the next level starts.
    Charms and currency survive level changes; start_new_game() resets both.
    """

    def __init__(self, world: World, event_bus: EventBus, pool: TokenPoolSystem):
        self.world = world
        self.event_bus = event_bus
        self.pool = pool

    def start_level(self, level: int) -> LevelConfig:
        level = max(1, int(level))
        config = level_config(level)
        state = get_level_state(self.world)
        state.level = level
        state.score_target = config.target
        state.moves_remaining = config.moves
        state.current_score = 0
        state.chain_multiplier = 1
        state.outcome = LevelOutcome.NONE

        self.pool.initialize()
        self._deal_playable_board()
        logger.info("Level %d started: target=%d moves=%d", level, config.target, config.moves)
        self.event_bus.emit(EVENT_LEVEL_STARTED, level=level, target=config.target, moves=config.moves)
        return config

    def start_new_game(self) -> LevelConfig:
        inventory = get_charm_inventory(self.world)
        inventory.charms.clear()
        economy = get_economy(self.world)
        previous = economy.currency
        economy.currency = 0
        if previous:
            self.event_bus.emit(EVENT_CURRENCY_CHANGED, currency=0, delta=-previous, reason="new_game")
        self.event_bus.emit(EVENT_GAME_STARTED)
        return self.start_level(1)

    def _deal_playable_board(self) -> None:
        """Deal without ready-made matches, re-dealing while the deal has no move."""
        attempts = get_rules(self.world).max_reshuffle_attempts
        deal_board(self.world, self.pool)
        for _ in range(attempts):
            if has_any_move(color_grid(self.world)):
                return
            clear_board(self.world, self.pool)
            deal_board(self.world, self.pool)

    def record_move(self) -> LevelOutcome:
        state = get_level_state(self.world)
        state.moves_remaining = max(0, state.moves_remaining - 1)
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_remaining=state.moves_remaining)
        if state.current_score >= state.score_target:
            outcome = LevelOutcome.COMPLETED
        elif state.moves_remaining == 0:
            outcome = LevelOutcome.FAILED
        else:
            return LevelOutcome.NONE
        self._end_level(outcome)
        return outcome

    def next_level(self) -> int:
        state = get_level_state(self.world)
        if state.outcome is LevelOutcome.COMPLETED:
            return state.level + 1
        return state.level

    def level_over(self) -> bool:
        return get_level_state(self.world).outcome is not LevelOutcome.NONE

    def _end_level(self, outcome: LevelOutcome) -> None:
        state = get_level_state(self.world)
        economy = get_economy(self.world)
        state.outcome = outcome
        awarded = max(0, state.moves_remaining) if outcome is LevelOutcome.COMPLETED else 0
        if awarded:
            economy.currency += awarded
            self.event_bus.emit(EVENT_CURRENCY_CHANGED, currency=economy.currency, delta=awarded, reason="level_complete")
        logger.info(
            "Level %d %s with %d/%d points", state.level, outcome.value, state.current_score, state.score_target
        )
        self.event_bus.emit(
            EVENT_LEVEL_ENDED,
            level=state.level,
            outcome=outcome,
            score=state.current_score,
            target=state.score_target,
            currency_awarded=awarded,
        )
        if get_rules(self.world).auto_advance:
            self.start_level(self.next_level())
