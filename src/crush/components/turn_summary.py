from dataclasses import dataclass
from typing import Tuple

from crush.components.grid import Grid


@dataclass(frozen=True, slots=True)
class CascadeStage:
    """Board snapshot released at one suspension point of a turn.

    kind is one of ``swap``, ``clear``, ``drop``, ``refill`` or ``revert``;
    positions are the cells the stage touched.
    """
    kind: str
    depth: int
    positions: Tuple[int, ...]
    grid: Grid


@dataclass(frozen=True, slots=True)
class TurnSummary:
    tokens_cleared: int
    score_delta: int
    combo_bonus_applied: int
    final_grid: Grid
    had_any_match: bool
    cascade_steps: int = 0
    swap: Tuple[int, int] = (-1, -1)
