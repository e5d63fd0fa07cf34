from typing import Optional

from esper import World

from crush.components.turn_state import TurnPhase, TurnState
from crush.events.bus import (
    EVENT_CASCADE_COMPLETE,
    EVENT_MOUSE_PRESS,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_REQUEST,
    EventBus,
)
from crush.utils.world_state import get_board, get_game_state, get_turn_state


class BoardSystem:
    """Selection state machine gating player input.

    Idle -> AwaitingSecond on the first pick. A second pick on the same tile
    deselects, a non-adjacent pick moves the selection, and an adjacent pick
    requests a swap and locks input until the cascade completes.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_CASCADE_COMPLETE, self.on_cascade_complete)
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    @property
    def state(self) -> TurnState:
        return get_turn_state(self.world)

    @property
    def selected(self) -> Optional[int]:
        return self.state.selected

    def on_tile_click(self, sender, **kwargs):
        position = kwargs.get('position')
        if position is None:
            return
        self.select(position)

    def select(self, position: int) -> None:
        if get_game_state(self.world).paused:
            return
        grid = get_board(self.world).grid
        if not grid.contains(position):
            return
        state = self.state
        if state.phase is TurnPhase.RESOLVING:
            return
        if state.phase is TurnPhase.IDLE or state.selected is None:
            self._select(position)
            return
        previous = state.selected
        if position == previous:
            self.clear_selection(reason='same_tile')
        elif grid.is_adjacent(previous, position):
            self.attempt_swap(previous, position)
        else:
            # Change selection to new tile
            self._select(position)

    def attempt_swap(self, src: int, dst: int) -> bool:
        """Hand an adjacent pair to the resolver. Returns False when input is locked or the pair is invalid."""
        state = self.state
        if state.phase is TurnPhase.RESOLVING or get_game_state(self.world).paused:
            return False
        grid = get_board(self.world).grid
        if not (grid.contains(src) and grid.contains(dst)) or not grid.is_adjacent(src, dst):
            return False
        state.phase = TurnPhase.RESOLVING
        state.selected = None
        state.turns_played += 1
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)
        return True

    def clear_selection(self, reason: str = 'cleared') -> None:
        state = self.state
        if state.phase is not TurnPhase.AWAITING_SECOND:
            return
        previous = state.selected
        state.selected = None
        state.phase = TurnPhase.IDLE
        self.event_bus.emit(EVENT_TILE_DESELECTED, position=previous, reason=reason)

    def reset(self) -> None:
        state = self.state
        state.phase = TurnPhase.IDLE
        state.selected = None
        state.cascade_depth = 0

    def on_mouse_press(self, sender, **kwargs):
        # Right-click always clears current selection
        # Arcade uses 4 for right mouse button (arcade.MOUSE_BUTTON_RIGHT)
        if kwargs.get('button') != 4:
            return
        self.clear_selection(reason='right_click')

    def on_cascade_complete(self, sender, **kwargs):
        state = self.state
        state.phase = TurnPhase.IDLE
        state.selected = None

    def _select(self, position: int) -> None:
        state = self.state
        state.selected = position
        state.phase = TurnPhase.AWAITING_SECOND
        self.event_bus.emit(EVENT_TILE_SELECTED, position=position)
