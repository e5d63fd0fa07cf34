"""Entry point for the tile-matching puzzle.

Sets up the game session, input/render systems and the Arcade window.
"""
import logging

import arcade
from arcade import Window, run, set_background_color, color

from crush.constants import STAGE_DELAY, WINDOW_HEIGHT, WINDOW_WIDTH
from crush.events.bus import EVENT_MOUSE_PRESS
from crush.session import GameSession
from crush.systems.input import InputSystem
from crush.systems.render import RenderSystem


class CrushWindow(Window):
    def __init__(self):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, "Crush")
        self.set_update_rate(1/60)
        self.session = GameSession(stage_delay=STAGE_DELAY)
        self.event_bus = self.session.event_bus
        self.input_system = InputSystem(self.event_bus, self, self.session.width)
        self.render_system = RenderSystem(
            self.session.world,
            self.event_bus,
            self,
            best_score_provider=lambda: self.session.best_score,
        )
        set_background_color(color.BLACK)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.session.tick(delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == arcade.key.P:
            self.session.toggle_pause()
        elif symbol == arcade.key.R:
            self.session.restart()
        elif symbol == arcade.key.ESCAPE:
            self.session.exit_game()
            self.close()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    CrushWindow()
    run()


if __name__ == "__main__":
    main()
