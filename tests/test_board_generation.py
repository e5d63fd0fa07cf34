import random

import pytest

from crush.constants import PALETTE
from crush.systems.board_ops import (
    find_matches,
    find_valid_swaps,
    generate_board,
    predict_swap_creates_match,
)
from crush.systems.match_resolution import resolve_turn
from tests.helpers import grid_from_letters, striped_grid


@pytest.mark.parametrize("seed", range(10))
def test_initial_board_has_no_matches_and_a_valid_move(seed):
    grid = generate_board(8, PALETTE, random.Random(seed))
    assert grid.size == 64
    assert grid.empty_positions() == []
    assert find_matches(grid) == []
    assert find_valid_swaps(grid)


def test_generation_fails_loudly_when_palette_cannot_avoid_matches():
    with pytest.raises(RuntimeError):
        generate_board(4, ['red'], random.Random(0), max_attempts=5)


def test_empty_palette_is_rejected():
    with pytest.raises(ValueError):
        generate_board(4, [], random.Random(0))


def test_striped_board_has_no_valid_swaps():
    assert find_valid_swaps(striped_grid()) == []


def test_prediction_matches_resolution():
    grid = grid_from_letters([
        "RRYG",
        "OYRB",
        "YBPO",
        "BPOY",
    ])
    assert predict_swap_creates_match(grid, 2, 6)
    assert not predict_swap_creates_match(grid, 0, 4)
    assert (2, 6) in find_valid_swaps(grid)
    for src, dst in find_valid_swaps(grid):
        assert resolve_turn(grid, src, dst, rng=random.Random(1)).had_any_match


def test_prediction_does_not_mutate_grid():
    grid = grid_from_letters([
        "RRYG",
        "OYRB",
        "YBPO",
        "BPOY",
    ])
    before = grid.clone()
    predict_swap_creates_match(grid, 2, 6)
    find_valid_swaps(grid)
    assert grid == before
