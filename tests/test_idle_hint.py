from gemmatch.components.rules import Rules
from gemmatch.events.bus import EVENT_HINT_AVAILABLE, EVENT_HINT_CLEARED
from gemmatch.session import GameSession
from gemmatch.systems.board_ops import deal_layout
from gemmatch.utils.resources import get_hint_state, get_turn_state
from tests.helpers import cascade_layout, record


def _session():
    session = GameSession(rules=Rules(hint_idle_seconds=30.0), seed=9)
    deal_layout(session.world, session.pool, cascade_layout())
    return session


def drive_ticks(session, count, dt=1.0):
    for _ in range(count):
        session.tick(dt)


def test_hint_appears_after_idle_delay():
    session = _session()
    hints = record(session.event_bus, EVENT_HINT_AVAILABLE)

    drive_ticks(session, 29)
    assert hints == []

    drive_ticks(session, 1)
    assert len(hints) == 1
    assert (hints[0]["src"], hints[0]["dst"]) == session.get_hint()
    assert session.pending_hint == session.get_hint()
    assert get_hint_state(session.world).idle_seconds == 0.0


def test_hint_repeats_while_player_stays_idle():
    session = _session()
    hints = record(session.event_bus, EVENT_HINT_AVAILABLE)
    drive_ticks(session, 60)
    assert len(hints) == 2


def test_swap_attempt_clears_hint_and_restarts_timer():
    session = _session()
    cleared = record(session.event_bus, EVENT_HINT_CLEARED)
    drive_ticks(session, 30)
    assert session.pending_hint is not None

    session.propose_swap((0, 0), (0, 5))

    assert session.pending_hint is None
    assert len(cleared) == 1
    assert get_hint_state(session.world).idle_seconds == 0.0


def test_timer_does_not_run_while_busy():
    session = _session()
    hints = record(session.event_bus, EVENT_HINT_AVAILABLE)
    get_turn_state(session.world).busy = True
    drive_ticks(session, 45)
    assert hints == []
    assert get_hint_state(session.world).idle_seconds == 0.0


def test_level_start_clears_hint():
    session = _session()
    drive_ticks(session, 30)
    session.start_level(2)
    assert session.pending_hint is None
