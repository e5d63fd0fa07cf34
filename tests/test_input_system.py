import pytest

from crush.events.bus import EVENT_MOUSE_PRESS, EVENT_TILE_CLICK, EventBus
from crush.systems.input import InputSystem
from crush.ui.layout import compute_board_geometry, position_at_point, tile_origin


class DummyWindow:
    def __init__(self, width=640, height=720):
        self.width = width
        self.height = height


def test_geometry_fits_board_between_margin_and_hud():
    tile, start_x, start_y = compute_board_geometry(640, 720, 8)
    assert tile == 70
    assert start_x == (640 - 8 * 70) / 2
    assert start_y == 40
    assert start_y + 8 * tile <= 720 - 120


def test_geometry_enforces_minimum_tile_size():
    tile, _, _ = compute_board_geometry(100, 100, 8)
    assert tile == 20


@pytest.mark.parametrize("pos", [0, 7, 9, 56, 63])
def test_tile_centre_maps_back_to_its_position(pos):
    tile, start_x, start_y = compute_board_geometry(640, 720, 8)
    left, bottom = tile_origin(pos, tile, start_x, start_y, 8)
    assert position_at_point(left + tile / 2, bottom + tile / 2, 640, 720, 8) == pos


def test_top_row_is_drawn_highest():
    tile, start_x, start_y = compute_board_geometry(640, 720, 8)
    _, top = tile_origin(0, tile, start_x, start_y, 8)
    _, bottom = tile_origin(56, tile, start_x, start_y, 8)
    assert top > bottom


def test_points_outside_board_map_to_nothing():
    assert position_at_point(1, 1, 640, 720, 8) is None
    assert position_at_point(320, 700, 640, 720, 8) is None


def test_left_click_emits_tile_click():
    bus = EventBus()
    window = DummyWindow()
    InputSystem(bus, window, 8)
    clicks = []
    bus.subscribe(EVENT_TILE_CLICK, lambda sender, **payload: clicks.append(payload['position']))
    tile, start_x, start_y = compute_board_geometry(window.width, window.height, 8)
    left, bottom = tile_origin(10, tile, start_x, start_y, 8)
    bus.emit(EVENT_MOUSE_PRESS, x=left + 5, y=bottom + 5, button=1)
    bus.emit(EVENT_MOUSE_PRESS, x=left + 5, y=bottom + 5, button=4)
    bus.emit(EVENT_MOUSE_PRESS, x=1, y=1, button=1)
    assert clicks == [10]
