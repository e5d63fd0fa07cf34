from dataclasses import dataclass

from crush.components.grid import Grid


@dataclass(slots=True)
class Board:
    """Singleton component holding the session's stable grid between turns."""
    grid: Grid
