from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps lambdas and bound methods of unreferenced systems alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# SWAPS & INPUT
# ============================================================================
EVENT_SWAP_PROPOSED = "swap_proposed"              # payload: src=(r,c), dst=(r,c)
EVENT_SWAP_REJECTED = "swap_rejected"              # payload: src=(r,c), dst=(r,c), reason=RejectReason
EVENT_SWAP_REVERTED = "swap_reverted"              # payload: src=(r,c), dst=(r,c)
EVENT_SWAP_ACCEPTED = "swap_accepted"              # payload: src=(r,c), dst=(r,c)
EVENT_HINT_AVAILABLE = "hint_available"            # payload: src=(r,c), dst=(r,c)
EVENT_HINT_CLEARED = "hint_cleared"                # payload: None


# ============================================================================
# BOARD RESOLUTION
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], groups=[[(r,c),...]], size=int, depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], types=[(r,c,color),...], depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[GravityMove], columns=int
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...], reason=str
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, score=int, reason=str
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: attempt=int, positions=[(r,c),...]
EVENT_BOARD_UNSOLVABLE = "board_unsolvable"        # payload: attempts=int


# ============================================================================
# TOKEN POOL
# ============================================================================
EVENT_POOL_INITIALIZED = "pool_initialized"              # payload: total=int, per_color=dict[str,int]
EVENT_POOL_EXHAUSTED = "pool_exhausted"                  # payload: operation=str
EVENT_POOL_INVARIANT_BROKEN = "pool_invariant_broken"    # payload: operation=str, waiting=int, placed=int, total=int


# ============================================================================
# SCORE & LEVELS
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int, multiplier=int
EVENT_LEVEL_STARTED = "level_started"              # payload: level=int, target=int, moves=int
EVENT_MOVES_CHANGED = "moves_changed"              # payload: moves_remaining=int
EVENT_LEVEL_ENDED = "level_ended"                  # payload: level=int, outcome=LevelOutcome, score=int, target=int, currency_awarded=int
EVENT_GAME_STARTED = "game_started"                # payload: None


# ============================================================================
# ECONOMY & CHARMS
# ============================================================================
EVENT_CURRENCY_CHANGED = "currency_changed"        # payload: currency=int, delta=int, reason=str
EVENT_SHOP_REQUEST = "shop_request"                # payload: count=int, request_id=Any
EVENT_SHOP_OFFER = "shop_offer"                    # payload: offers=list[CharmOffer], request_id=Any
EVENT_CHARM_PURCHASED = "charm_purchased"          # payload: charm=Charm, price=int
EVENT_CHARM_SOLD = "charm_sold"                    # payload: charm=Charm, refund=int
