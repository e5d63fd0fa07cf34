"""Monte Carlo summary of cascade depth and score per turn.

Used to tune the combo bonus: it plays random valid swaps on generated boards
and aggregates what the resolver reports.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from crush.constants import GRID_WIDTH, PALETTE, POINTS_PER_TOKEN
from crush.systems.board_ops import find_valid_swaps, generate_board
from crush.systems.match_resolution import resolve_turn


@dataclass(slots=True)
class CascadeStats:
    depths: np.ndarray
    scores: np.ndarray
    cleared: np.ndarray

    @property
    def turns(self) -> int:
        return int(self.depths.size)

    def depth_histogram(self) -> np.ndarray:
        """Counts indexed by cascade depth (index 0 is always 0 for valid swaps)."""
        if not self.depths.size:
            return np.zeros(1, dtype=int)
        return np.bincount(self.depths)

    def mean_score(self) -> float:
        return float(self.scores.mean()) if self.scores.size else 0.0

    def combo_bonus_share(self) -> float:
        """Fraction of all points that came from the combo bonus."""
        total = int(self.scores.sum())
        if total == 0:
            return 0.0
        base = int(self.cleared.sum()) * POINTS_PER_TOKEN
        return (total - base) / total


def simulate_turns(
    turns: int,
    *,
    width: int = GRID_WIDTH,
    palette: Sequence[str] = PALETTE,
    seed: int | None = None,
) -> CascadeStats:
    rng = random.Random(seed)
    grid = generate_board(width, palette, rng)
    depths: list[int] = []
    scores: list[int] = []
    cleared: list[int] = []
    for _ in range(turns):
        swaps = find_valid_swaps(grid)
        if not swaps:
            grid = generate_board(width, palette, rng)
            swaps = find_valid_swaps(grid)
        src, dst = rng.choice(swaps)
        summary = resolve_turn(grid, src, dst, rng=rng, palette=palette)
        depths.append(summary.cascade_steps)
        scores.append(summary.score_delta)
        cleared.append(summary.tokens_cleared)
        grid = summary.final_grid
    return CascadeStats(
        depths=np.asarray(depths, dtype=int),
        scores=np.asarray(scores, dtype=int),
        cleared=np.asarray(cleared, dtype=int),
    )
