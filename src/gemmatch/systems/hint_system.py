from esper import World

from gemmatch.events.bus import (
    EventBus,
    EVENT_HINT_AVAILABLE,
    EVENT_HINT_CLEARED,
    EVENT_LEVEL_STARTED,
    EVENT_SWAP_PROPOSED,
    EVENT_TICK,
)
from gemmatch.systems.board_ops import color_grid
from gemmatch.systems.solvability import find_hint_move
from gemmatch.utils.resources import get_hint_state, get_rules, get_turn_state


class IdleHintSystem:
    """Surfaces a suggested swap after the player has been idle for a while.

    Ticks accumulate idle time while the engine is not busy. Once
    ``Rules.hint_idle_seconds`` pass, the first available move is published
    and the timer restarts (the hint stays until the next swap attempt).
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_SWAP_PROPOSED, self.on_activity)
        self.event_bus.subscribe(EVENT_LEVEL_STARTED, self.on_activity)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 0.0) or 0.0
        if get_turn_state(self.world).busy:
            return
        state = get_hint_state(self.world)
        state.idle_seconds += dt
        if state.idle_seconds < get_rules(self.world).hint_idle_seconds:
            return
        state.idle_seconds = 0.0
        hint = find_hint_move(color_grid(self.world))
        if hint is None:
            return
        state.hint = hint
        self.event_bus.emit(EVENT_HINT_AVAILABLE, src=hint[0], dst=hint[1])

    def on_activity(self, sender, **kwargs):
        self.reset()

    def reset(self):
        state = get_hint_state(self.world)
        state.idle_seconds = 0.0
        if state.hint is not None:
            state.hint = None
            self.event_bus.emit(EVENT_HINT_CLEARED)
