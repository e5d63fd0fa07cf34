from typing import Optional, Tuple

from crush.constants import BOTTOM_MARGIN, GRID_WIDTH, HUD_HEIGHT


def compute_board_geometry(window_width: int, window_height: int, width: int = GRID_WIDTH) -> Tuple[int, float, float]:
    """Return (tile_size, start_x, start_y) for a board centred horizontally above the bottom margin.

    Shared by rendering and input so clicks map onto the tiles actually drawn.
    """
    max_board_w = window_width * 0.9
    max_board_h = window_height - BOTTOM_MARGIN - HUD_HEIGHT
    tile_size = int(min(max_board_w / width, max_board_h / width))
    if tile_size < 20:
        tile_size = 20
    total_width = width * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def tile_origin(position: int, tile_size: int, start_x: float, start_y: float, width: int = GRID_WIDTH) -> Tuple[float, float]:
    """Bottom-left corner of a tile in window coordinates; row 0 is drawn at the top."""
    row, col = divmod(position, width)
    return start_x + col * tile_size, start_y + (width - 1 - row) * tile_size


def position_at_point(
    x: float,
    y: float,
    window_width: int,
    window_height: int,
    width: int = GRID_WIDTH,
) -> Optional[int]:
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, width)
    total = width * tile_size
    if x < start_x or x >= start_x + total:
        return None
    if y < start_y or y >= start_y + total:
        return None
    col = int((x - start_x) // tile_size)
    row = width - 1 - int((y - start_y) // tile_size)
    if 0 <= row < width and 0 <= col < width:
        return row * width + col
    return None
