from typing import Optional

import arcade
from esper import World

from crush.components.grid import EMPTY, Grid
from crush.components.turn_summary import CascadeStage
from crush.constants import PALETTE_COLORS
from crush.events.bus import (
    EVENT_BOARD_STAGE,
    EVENT_CASCADE_COMPLETE,
    EVENT_NEW_GAME,
    EventBus,
)
from crush.ui.layout import compute_board_geometry, tile_origin
from crush.utils.world_state import get_board, get_game_state, get_ledger, get_turn_state

PADDING = 4


class RenderSystem:
    """Draws the board and HUD.

    While a turn resolves the most recent staged snapshot is shown instead of
    the stable board, so drops and refills become visible one stage at a time.
    """
    def __init__(self, world: World, event_bus: EventBus, window, best_score_provider=None):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self._best_score_provider = best_score_provider
        self._stage: Optional[CascadeStage] = None
        self.event_bus.subscribe(EVENT_BOARD_STAGE, self.on_board_stage, isolated=True)
        self.event_bus.subscribe(EVENT_CASCADE_COMPLETE, self.on_cascade_complete, isolated=True)
        self.event_bus.subscribe(EVENT_NEW_GAME, self.on_cascade_complete, isolated=True)

    def on_board_stage(self, sender, **kwargs):
        self._stage = kwargs.get('stage')

    def on_cascade_complete(self, sender, **kwargs):
        self._stage = None

    def _visible_grid(self) -> Grid:
        if self._stage is not None:
            return self._stage.grid
        return get_board(self.world).grid

    def process(self):
        grid = self._visible_grid()
        tile_size, start_x, start_y = compute_board_geometry(self.window.width, self.window.height, grid.width)
        highlighted = set(self._stage.positions) if self._stage is not None and self._stage.kind == 'clear' else set()
        selected = get_turn_state(self.world).selected
        for pos, token in enumerate(grid.cells):
            left, bottom = tile_origin(pos, tile_size, start_x, start_y, grid.width)
            arcade.draw_lbwh_rectangle_outline(left, bottom, tile_size, tile_size, arcade.color.GRAY, 1)
            if token is EMPTY:
                continue
            color = PALETTE_COLORS.get(token, arcade.color.LIGHT_GRAY)
            center_x = left + tile_size / 2
            center_y = bottom + tile_size / 2
            radius = tile_size / 2 - PADDING
            arcade.draw_circle_filled(center_x, center_y, radius, color)
            if pos in highlighted:
                arcade.draw_circle_outline(center_x, center_y, radius, arcade.color.WHITE, 3)
            if pos == selected:
                arcade.draw_lbwh_rectangle_outline(left + 1, bottom + 1, tile_size - 2, tile_size - 2, arcade.color.WHITE, 3)
        self._draw_hud(start_y + grid.width * tile_size)

    def _draw_hud(self, board_top: float):
        ledger = get_ledger(self.world)
        best = self._best_score_provider() if self._best_score_provider else 0
        minutes, seconds = divmod(ledger.elapsed_seconds, 60)
        lines = [
            f"Score {ledger.total_score}    Best {max(best, ledger.total_score)}",
            f"Combo {ledger.combo_streak}    Time {minutes:02d}:{seconds:02d}",
        ]
        depth = get_turn_state(self.world).cascade_depth
        if depth:
            lines.append(f"Cascade x{depth}")
        if get_game_state(self.world).paused:
            lines.append("PAUSED  (P to resume, R to restart)")
        y = board_top + 16
        for line in reversed(lines):
            arcade.draw_text(line, 20, y, arcade.color.WHITE, 16)
            y += 26
