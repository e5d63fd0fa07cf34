from __future__ import annotations

from esper import World

from crush.components.board import Board
from crush.components.game_state import GameState
from crush.components.score_ledger import ScoreLedger
from crush.components.turn_state import TurnState
from crush.events.bus import EVENT_PAUSE_CHANGED, EventBus


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def get_ledger(world: World) -> ScoreLedger:
    for _, ledger in world.get_component(ScoreLedger):
        return ledger
    raise RuntimeError("ScoreLedger component not found")


def get_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = list(world.get_component(TurnState))
    if existing:
        return existing[0][1]
    world.create_entity(TurnState())
    return list(world.get_component(TurnState))[0][1]


def get_game_state(world: World) -> GameState:
    existing = list(world.get_component(GameState))
    if existing:
        return existing[0][1]
    world.create_entity(GameState())
    return list(world.get_component(GameState))[0][1]


def set_paused(world: World, event_bus: EventBus, paused: bool) -> None:
    """Update the pause flag and emit a change event when it differs."""
    state = get_game_state(world)
    if state.paused == paused:
        return
    state.paused = paused
    event_bus.emit(EVENT_PAUSE_CHANGED, paused=paused)
