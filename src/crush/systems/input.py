from crush.constants import GRID_WIDTH
from crush.events.bus import EVENT_MOUSE_PRESS, EVENT_TILE_CLICK, EventBus
from crush.ui.layout import position_at_point


class InputSystem:
    """Maps left-button presses inside the board onto tile clicks."""
    def __init__(self, event_bus: EventBus, window, width: int = GRID_WIDTH):
        self.event_bus = event_bus
        self.window = window
        self.width = width
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        # Left button (1) selects tiles; right-click is handled by BoardSystem.
        if kwargs.get('button') != 1:
            return
        position = position_at_point(x, y, self.window.width, self.window.height, self.width)
        if position is not None:
            self.event_bus.emit(EVENT_TILE_CLICK, position=position)
