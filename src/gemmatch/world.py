import random

from esper import World

from gemmatch.components.board import Board
from gemmatch.components.charm_inventory import CharmInventory
from gemmatch.components.economy import Economy
from gemmatch.components.hint_state import HintState
from gemmatch.components.level_state import LevelState
from gemmatch.components.rules import Rules
from gemmatch.components.token_pool import TokenPool
from gemmatch.components.turn_state import TurnState


def create_world(
    *,
    rules: Rules | None = None,
    rng: random.Random | None = None,
) -> World:
    """Build the world holding every resource of one game session.

    Tokens are not created here; ``TokenPoolSystem.initialize`` fills the pool
    when a level starts.
    """
    world = World()
    setattr(world, "random", rng or random.Random())
    rules = rules or Rules()

    world.create_entity(rules)
    world.create_entity(Board(rows=rules.rows, cols=rules.cols))
    world.create_entity(TokenPool(total=rules.pool_size))
    world.create_entity(LevelState())
    world.create_entity(CharmInventory(capacity=rules.max_charms))
    world.create_entity(Economy())
    world.create_entity(TurnState())
    world.create_entity(HintState())
    return world
