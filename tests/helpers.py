from __future__ import annotations

from typing import Iterable, Sequence

from crush.components.board import Board
from crush.components.grid import EMPTY, Grid
from crush.constants import PALETTE
from crush.session import GameSession

LETTERS = {
    'R': 'red',
    'O': 'orange',
    'Y': 'yellow',
    'G': 'green',
    'B': 'blue',
    'P': 'purple',
    '.': EMPTY,
}


def grid_from_letters(rows: Sequence[str]) -> Grid:
    """Build a grid from rows like ``"ROYGBPRO"``; ``.`` marks an empty cell."""
    return Grid.from_rows([[LETTERS[ch] for ch in row] for row in rows])


def striped_grid(width: int = 8) -> Grid:
    """Match-free board where every cell differs from its four neighbours."""
    cells = [PALETTE[(2 * row + col) % len(PALETTE)] for row in range(width) for col in range(width)]
    return Grid(width=width, cells=cells)


class ScriptedRandom:
    """Stand-in random source whose ``choice`` returns a fixed script of tokens."""

    def __init__(self, tokens: Iterable[str] = ()):
        self._tokens = list(tokens)
        self.calls = 0

    def choice(self, seq):
        self.calls += 1
        if self._tokens:
            token = self._tokens.pop(0)
            assert token in seq, f"scripted token {token!r} not in {list(seq)!r}"
            return token
        return seq[0]


def load_grid(session: GameSession, grid: Grid) -> None:
    for _, board in session.world.get_component(Board):
        board.grid = grid
        return
