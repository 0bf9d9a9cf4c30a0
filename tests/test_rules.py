import pytest

from gemmatch.components.economy import Economy
from gemmatch.components.hint_state import HintState
from gemmatch.components.level_state import LevelState
from gemmatch.components.rules import Rules
from gemmatch.components.turn_state import TurnState
from gemmatch.utils.resources import (
    get_board,
    get_charm_inventory,
    get_economy,
    get_hint_state,
    get_level_state,
    get_pool,
    get_rules,
    get_turn_state,
)
from gemmatch.world import create_world


def test_default_rules():
    rules = Rules()
    assert (rules.rows, rules.cols) == (8, 8)
    assert rules.pool_size == 88
    assert len(rules.colors) == 8
    assert rules.max_reshuffle_attempts == 5
    assert rules.cell_count == 64


@pytest.mark.parametrize(
    "kwargs",
    [
        {"colors": ("ruby",)},
        {"colors": ("ruby", "ruby", "topaz")},
        {"pool_size": 63},
        {"rows": 0},
        {"rows": 1, "cols": 2, "pool_size": 2, "colors": ("ruby", "topaz", "rose")},
    ],
)
def test_misconfigured_rules_raise(kwargs):
    with pytest.raises(ValueError):
        Rules(**kwargs)


def test_create_world_registers_resources():
    rules = Rules(rows=6, cols=7, max_charms=3)
    world = create_world(rules=rules)
    assert get_rules(world) is rules
    board = get_board(world)
    assert (board.rows, board.cols) == (6, 7)
    assert len(board.cells) == 6 and all(len(row) == 7 for row in board.cells)
    assert get_pool(world).total == 88
    assert get_charm_inventory(world).capacity == 3


@pytest.mark.parametrize(
    "component_type, lookup",
    [
        (TurnState, get_turn_state),
        (LevelState, get_level_state),
        (Economy, get_economy),
        (HintState, get_hint_state),
    ],
)
def test_missing_resource_raises_instead_of_being_created(component_type, lookup):
    world = create_world()
    for entity, _ in list(world.get_component(component_type)):
        world.delete_entity(entity, immediate=True)
    with pytest.raises(RuntimeError):
        lookup(world)
    assert list(world.get_component(component_type)) == []
