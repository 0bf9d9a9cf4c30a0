import random
from collections import Counter

import pytest

from gemmatch.components.rules import Rules
from gemmatch.components.token import Token, TokenLocation
from gemmatch.events.bus import EVENT_POOL_EXHAUSTED, EVENT_POOL_INITIALIZED, EventBus
from gemmatch.systems.board_ops import board_is_consistent, clear_cells, color_grid, deal_board
from gemmatch.systems.match import find_matches
from gemmatch.systems.token_pool_system import TokenPoolSystem, pool_is_consistent
from gemmatch.utils.resources import get_pool
from gemmatch.world import create_world
from tests.helpers import record


def test_initialize_creates_every_token_waiting(engine):
    tokens = [token for _, token in engine.world.get_component(Token)]
    assert len(tokens) == 88
    assert len({token.token_id for token in tokens}) == 88
    assert all(token.location is TokenLocation.WAITING for token in tokens)
    assert Counter(token.color for token in tokens) == {color: 11 for color in Rules().colors}
    assert engine.pool.waiting_count() == 88
    assert pool_is_consistent(engine.world)


def test_uneven_pool_gives_remainder_to_first_colors():
    bus = EventBus()
    events = record(bus, EVENT_POOL_INITIALIZED)
    world = create_world(rules=Rules(colors=("ruby", "sapphire", "emerald")), rng=random.Random(3))
    TokenPoolSystem(world, bus).initialize()
    assert events[-1]["per_color"] == {"ruby": 30, "sapphire": 29, "emerald": 29}
    assert events[-1]["total"] == 88


def test_deal_and_clear_conserve_tokens(engine):
    deal_board(engine.world, engine.pool)
    assert engine.pool.placed_count() == 64
    assert engine.pool.waiting_count() == 24
    clear_cells(engine.world, engine.pool, [(0, 0), (3, 4), (7, 7)])
    assert engine.pool.placed_count() == 61
    assert engine.pool.waiting_count() == 27
    assert pool_is_consistent(engine.world)
    assert board_is_consistent(engine.world)


@pytest.mark.parametrize("seed", [0, 1, 7, 42, 2024])
def test_initial_deal_has_no_matches(seed):
    bus = EventBus()
    world = create_world(rng=random.Random(seed))
    pool = TokenPoolSystem(world, bus)
    pool.initialize()
    deal_board(world, pool)
    assert not find_matches(color_grid(world))


def test_fifo_return_appends_to_back(fifo_engine):
    deal_board(fifo_engine.world, fifo_engine.pool)
    cleared = clear_cells(fifo_engine.world, fifo_engine.pool, [(2, 2)])
    queue = get_pool(fifo_engine.world).queue
    last = fifo_engine.world.component_for_entity(queue[-1], Token)
    assert last.color == cleared[0][2]
    assert last.location is TokenLocation.WAITING


def test_pack_snapshot_views(engine):
    deal_board(engine.world, engine.pool)
    everything = engine.pool.pack_snapshot("all")
    waiting = engine.pool.pack_snapshot("waiting")
    assert len(everything) == 88
    assert len(waiting) == 24
    assert all(entry["location"] == "waiting" for entry in waiting)
    with pytest.raises(ValueError):
        engine.pool.pack_snapshot("discarded")


def test_draw_from_empty_queue_reports_exhaustion():
    bus = EventBus()
    exhausted = record(bus, EVENT_POOL_EXHAUSTED)
    world = create_world(rules=Rules(pool_size=64), rng=random.Random(5))
    pool = TokenPoolSystem(world, bus)
    pool.initialize()
    deal_board(world, pool)

    assert pool.waiting_count() == 0
    assert pool.draw() is None
    assert exhausted == [{"operation": "draw"}]
    assert pool_is_consistent(world)


def test_double_return_is_ignored(engine):
    entity = engine.pool.draw()
    engine.pool.return_token(entity)
    engine.pool.return_token(entity)
    assert engine.pool.waiting_count() == 88
    assert pool_is_consistent(engine.world)
