import random
from typing import Sequence

from esper import World

from crush.components.board import Board
from crush.components.game_state import GameState
from crush.components.score_ledger import ScoreLedger
from crush.components.turn_state import TurnState
from crush.constants import GRID_WIDTH, PALETTE
from crush.systems.board_ops import generate_board


def create_world(
    *,
    width: int = GRID_WIDTH,
    palette: Sequence[str] = PALETTE,
    rng: random.Random | None = None,
) -> World:
    """Build a world holding one fresh board plus the session singletons."""
    world = World()
    setattr(world, "random", rng or random.Random())
    world.create_entity(GameState())
    world.create_entity(TurnState())
    world.create_entity(ScoreLedger())
    world.create_entity(Board(grid=generate_board(width, palette, world.random)))
    return world
