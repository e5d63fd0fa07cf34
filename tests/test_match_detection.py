from crush.systems.board_ops import find_matches, matched_positions
from tests.helpers import grid_from_letters, striped_grid


def test_stable_board_has_no_matches():
    assert find_matches(striped_grid()) == []


def test_horizontal_run_of_three():
    grid = grid_from_letters([
        "RRRG",
        "GOYB",
        "OYBP",
        "YBPO",
    ])
    assert find_matches(grid) == [(0, 1, 2)]


def test_run_of_four_is_reported_once_at_full_extent():
    grid = grid_from_letters([
        "RRRR",
        "GOYB",
        "OYBP",
        "YBPO",
    ])
    assert find_matches(grid) == [(0, 1, 2, 3)]


def test_run_of_five_is_single_maximal_run():
    grid = grid_from_letters([
        "GGGGG",
        "OYBPR",
        "YBPRO",
        "BPROY",
        "PROYB",
    ])
    assert find_matches(grid) == [(0, 1, 2, 3, 4)]


def test_vertical_run_reported_after_rows():
    grid = grid_from_letters([
        "RGGG",
        "ROYB",
        "RYBP",
        "OBPO",
    ])
    # Row 0 cols 1..3 first, then column 0 rows 0..2.
    assert find_matches(grid) == [(1, 2, 3), (0, 4, 8)]


def test_crossing_runs_share_cells_once():
    grid = grid_from_letters([
        "ORYB",
        "RRRB",
        "YRBP",
        "BOPO",
    ])
    matches = find_matches(grid)
    assert matches == [(4, 5, 6), (1, 5, 9)]
    assert matched_positions(matches) == [1, 4, 5, 6, 9]


def test_empty_cells_never_match():
    grid = grid_from_letters([
        "...G",
        "GOYB",
        "OYBP",
        "YBPO",
    ])
    assert find_matches(grid) == []


def test_two_separate_runs_in_one_row():
    grid = grid_from_letters([
        "RRRGBBB",
        "OYPOYPO",
        "YPOYPOY",
        "POYPOYP",
        "OYPOYPO",
        "YPOYPOY",
        "POYPOYP",
    ])
    assert find_matches(grid) == [(0, 1, 2), (4, 5, 6)]


def test_detection_is_pure():
    grid = grid_from_letters([
        "RRRG",
        "GOYB",
        "OYBP",
        "YBPO",
    ])
    before = grid.clone()
    assert find_matches(grid) == find_matches(grid)
    assert grid == before
