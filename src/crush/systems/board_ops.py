from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Sequence, Set, Tuple

from crush.components.grid import EMPTY, Grid, Token
from crush.constants import BOARD_GENERATION_ATTEMPTS, COMBO_BONUS_POINTS, POINTS_PER_TOKEN

MatchRun = Tuple[int, ...]


@dataclass(slots=True)
class GravityMove:
    source: int
    target: int
    token: str


def _scan_line(grid: Grid, line: List[int]) -> List[MatchRun]:
    runs: List[MatchRun] = []
    cells = grid.cells
    idx = 0
    limit = len(line)
    while idx <= limit - 3:
        token = cells[line[idx]]
        if token is EMPTY or cells[line[idx + 1]] != token or cells[line[idx + 2]] != token:
            idx += 1
            continue
        end = idx + 3
        while end < limit and cells[line[end]] == token:
            end += 1
        runs.append(tuple(line[idx:end]))
        # Resume right after the run; consumed cells are not rechecked.
        idx = end
    return runs


def find_matches(grid: Grid) -> List[MatchRun]:
    """Detect every maximal horizontal or vertical run of length >= 3.

    Rows are scanned before columns, each left-to-right / top-to-bottom, so the
    output order is deterministic for a given grid. A run of four or more is
    reported once at its full extent.
    """
    matches: List[MatchRun] = []
    for row in range(grid.width):
        matches.extend(_scan_line(grid, grid.line(row)))
    for col in range(grid.width):
        matches.extend(_scan_line(grid, grid.line(col, vertical=True)))
    return matches


def matched_positions(matches: Sequence[MatchRun]) -> List[int]:
    """Distinct positions covered by ``matches``; crossing runs share cells."""
    seen: Set[int] = set()
    for run in matches:
        seen.update(run)
    return sorted(seen)


def clear_positions(grid: Grid, positions: Sequence[int]) -> int:
    cleared = 0
    for pos in positions:
        if grid.get(pos) is EMPTY:
            continue
        grid.set(pos, EMPTY)
        cleared += 1
    return cleared


def cascade_step_points(cleared: int, combo_streak: int) -> Tuple[int, int]:
    """Return ``(points, combo_bonus)`` for one cascade step."""
    bonus = (combo_streak // 2) * COMBO_BONUS_POINTS
    return cleared * POINTS_PER_TOKEN + bonus, bonus


def compute_gravity_moves(grid: Grid) -> List[GravityMove]:
    moves: List[GravityMove] = []
    width = grid.width
    for col in range(width):
        target_row = width - 1
        # Bottom-up: each token lands on the lowest free row, keeping column order.
        for row in range(width - 1, -1, -1):
            pos = row * width + col
            token = grid.cells[pos]
            if token is EMPTY:
                continue
            if row != target_row:
                moves.append(GravityMove(source=pos, target=target_row * width + col, token=token))
            target_row -= 1
    return moves


def apply_gravity_moves(grid: Grid, moves: Sequence[GravityMove]) -> None:
    for move in moves:
        grid.set(move.target, move.token)
        grid.set(move.source, EMPTY)


def refill_empty(grid: Grid, palette: Sequence[str], rng: random.Random) -> List[int]:
    spawned: List[int] = []
    for pos in grid.empty_positions():
        grid.set(pos, rng.choice(palette))
        spawned.append(pos)
    return spawned


def _has_line_match(grid: Grid, pos: int) -> bool:
    """Return True if a horizontal or vertical run of >= 3 passes through pos."""
    token = grid.cells[pos]
    if token is EMPTY:
        return False
    row, col = grid.row_col(pos)
    width = grid.width
    cells = grid.cells
    # Horizontal sweep
    left = col
    while left > 0 and cells[row * width + left - 1] == token:
        left -= 1
    right = col
    while right < width - 1 and cells[row * width + right + 1] == token:
        right += 1
    if right - left + 1 >= 3:
        return True
    # Vertical sweep
    up = row
    while up > 0 and cells[(up - 1) * width + col] == token:
        up -= 1
    down = row
    while down < width - 1 and cells[(down + 1) * width + col] == token:
        down += 1
    return down - up + 1 >= 3


def predict_swap_creates_match(grid: Grid, src: int, dst: int) -> bool:
    """Return True if swapping src/dst would create a new match."""
    if not grid.is_adjacent(src, dst):
        return False
    swapped = grid.clone()
    swapped.swap(src, dst)
    return _has_line_match(swapped, src) or _has_line_match(swapped, dst)


def find_valid_swaps(grid: Grid) -> List[Tuple[int, int]]:
    """Enumerate adjacent swaps that would produce a match."""
    swaps: List[Tuple[int, int]] = []
    width = grid.width
    for pos in range(grid.size):
        row, col = divmod(pos, width)
        if col + 1 < width and predict_swap_creates_match(grid, pos, pos + 1):
            swaps.append((pos, pos + 1))
        if row + 1 < width and predict_swap_creates_match(grid, pos, pos + width):
            swaps.append((pos, pos + width))
    return swaps


def _build_layout(width: int, palette: Sequence[str], rng: random.Random) -> List[Token] | None:
    cells: List[Token] = []
    for row in range(width):
        for col in range(width):
            available = list(palette)
            # Prevent horizontal triple: if last two cells share a color, exclude it.
            if col >= 2:
                left1 = cells[-1]
                left2 = cells[-2]
                if left1 == left2 and left1 in available:
                    available = [t for t in available if t != left1]
            # Prevent vertical triple the same way.
            if row >= 2:
                up1 = cells[(row - 1) * width + col]
                up2 = cells[(row - 2) * width + col]
                if up1 == up2 and up1 in available:
                    available = [t for t in available if t != up1]
            if not available:
                return None
            cells.append(rng.choice(available))
    return cells


def generate_board(
    width: int,
    palette: Sequence[str],
    rng: random.Random,
    *,
    require_valid_move: bool = True,
    max_attempts: int = BOARD_GENERATION_ATTEMPTS,
) -> Grid:
    """Fill a fresh board that contains no matches and, optionally, at least one valid move."""
    if not palette:
        raise ValueError("palette must not be empty")
    for _ in range(max_attempts):
        cells = _build_layout(width, palette, rng)
        if cells is None:
            continue
        grid = Grid(width=width, cells=cells)
        if find_matches(grid):
            continue
        if require_valid_move and not find_valid_swaps(grid):
            continue
        return grid
    raise RuntimeError("Unable to generate board without matches and valid swaps")
