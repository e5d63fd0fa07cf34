import numpy as np

from crush.utils.cascade_stats import CascadeStats, simulate_turns


def test_simulation_is_reproducible_for_a_seed():
    first = simulate_turns(30, seed=3)
    second = simulate_turns(30, seed=3)
    assert first.turns == 30
    assert np.array_equal(first.depths, second.depths)
    assert np.array_equal(first.scores, second.scores)


def test_every_simulated_turn_matches():
    stats = simulate_turns(25, seed=1)
    assert (stats.depths >= 1).all()
    assert (stats.cleared >= 3).all()
    assert (stats.scores >= stats.cleared * 10).all()
    histogram = stats.depth_histogram()
    assert histogram[0] == 0
    assert histogram.sum() == 25
    assert stats.mean_score() >= 30


def test_combo_bonus_share():
    stats = CascadeStats(
        depths=np.array([1, 3]),
        scores=np.array([30, 100]),
        cleared=np.array([3, 9]),
    )
    assert stats.combo_bonus_share() == 10 / 130


def test_empty_stats():
    empty = CascadeStats(depths=np.array([], dtype=int), scores=np.array([], dtype=int), cleared=np.array([], dtype=int))
    assert empty.turns == 0
    assert empty.mean_score() == 0.0
    assert empty.combo_bonus_share() == 0.0
    assert empty.depth_histogram().tolist() == [0]
