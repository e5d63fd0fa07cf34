from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from crush.constants import GRID_WIDTH
from crush.errors import OutOfBounds

Token = Optional[str]
# Transient marker for a cleared cell; never present once a turn has resolved.
EMPTY: Token = None


@dataclass(slots=True)
class Grid:
    """Square board of tokens stored row-major.

    Positions are plain integers ``0..width*width-1``. Row 0 is the top row, so
    gravity pulls tokens toward higher row indices.
    """
    width: int = GRID_WIDTH
    cells: List[Token] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("grid width must be positive")
        size = self.width * self.width
        if not self.cells:
            self.cells = [EMPTY] * size
        elif len(self.cells) != size:
            raise ValueError(f"expected {size} cells, got {len(self.cells)}")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Token]]) -> Grid:
        width = len(rows)
        cells: List[Token] = []
        for row in rows:
            if len(row) != width:
                raise ValueError("grid rows must form a square")
            cells.extend(row)
        return cls(width=width, cells=cells)

    @property
    def size(self) -> int:
        return self.width * self.width

    def contains(self, pos: int) -> bool:
        return isinstance(pos, int) and 0 <= pos < self.size

    def _check(self, pos: int) -> None:
        if not self.contains(pos):
            raise OutOfBounds(pos, self.width)

    def get(self, pos: int) -> Token:
        self._check(pos)
        return self.cells[pos]

    def set(self, pos: int, token: Token) -> None:
        self._check(pos)
        self.cells[pos] = token

    def swap(self, a: int, b: int) -> None:
        self._check(a)
        self._check(b)
        self.cells[a], self.cells[b] = self.cells[b], self.cells[a]

    def clone(self) -> Grid:
        return Grid(width=self.width, cells=list(self.cells))

    def row_col(self, pos: int) -> Tuple[int, int]:
        self._check(pos)
        return divmod(pos, self.width)

    def position(self, row: int, col: int) -> int:
        if not (0 <= row < self.width and 0 <= col < self.width):
            raise OutOfBounds((row, col), self.width)
        return row * self.width + col

    def is_adjacent(self, a: int, b: int) -> bool:
        ar, ac = self.row_col(a)
        br, bc = self.row_col(b)
        return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)

    def empty_positions(self) -> List[int]:
        return [pos for pos, token in enumerate(self.cells) if token is EMPTY]

    def rows(self) -> List[List[Token]]:
        return [self.cells[r * self.width:(r + 1) * self.width] for r in range(self.width)]

    def line(self, index: int, *, vertical: bool = False) -> List[int]:
        """Positions of one row (or one column when ``vertical``), in scan order."""
        if not (0 <= index < self.width):
            raise OutOfBounds(index, self.width)
        if vertical:
            return [r * self.width + index for r in range(self.width)]
        return list(range(index * self.width, (index + 1) * self.width))

    def fill(self, tokens: Iterable[Token]) -> None:
        cells = list(tokens)
        if len(cells) != self.size:
            raise ValueError(f"expected {self.size} cells, got {len(cells)}")
        self.cells = cells
