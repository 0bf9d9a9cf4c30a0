"""Lookup helpers for the singleton components created by ``create_world``."""
from __future__ import annotations

import random
from typing import Type, TypeVar

from esper import World

from gemmatch.components.board import Board
from gemmatch.components.charm_inventory import CharmInventory
from gemmatch.components.economy import Economy
from gemmatch.components.hint_state import HintState
from gemmatch.components.level_state import LevelState
from gemmatch.components.rules import Rules
from gemmatch.components.token_pool import TokenPool
from gemmatch.components.turn_state import TurnState

C = TypeVar("C")


def _singleton(world: World, component_type: Type[C]) -> C:
    for _, component in world.get_component(component_type):
        return component
    raise RuntimeError(f"{component_type.__name__} resource not found")


def get_rules(world: World) -> Rules:
    return _singleton(world, Rules)


def get_board(world: World) -> Board:
    return _singleton(world, Board)


def get_pool(world: World) -> TokenPool:
    return _singleton(world, TokenPool)


def get_level_state(world: World) -> LevelState:
    return _singleton(world, LevelState)


def get_charm_inventory(world: World) -> CharmInventory:
    return _singleton(world, CharmInventory)


def get_economy(world: World) -> Economy:
    return _singleton(world, Economy)


def get_turn_state(world: World) -> TurnState:
    return _singleton(world, TurnState)


def get_hint_state(world: World) -> HintState:
    return _singleton(world, HintState)


def world_rng(world: World) -> random.Random:
    candidate = getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    rng = random.Random()
    setattr(world, "random", rng)
    return rng
