import numpy as np
import pytest

from anttour import DegenerateGeometry, TSPInstance, build_distance_matrix, build_tour, init_pheromone, roulette_select
from anttour.construction import transition_scores


def test_roulette_frequencies_match_probabilities():
    probs = [0.1, 0.2, 0.3, 0.4]
    rng = np.random.default_rng(2024)
    draws = 20000
    counts = np.bincount([roulette_select(probs, rng) for _ in range(draws)], minlength=4)
    assert np.allclose(counts / draws, probs, atol=0.02)


def test_roulette_never_picks_zero_probability():
    rng = np.random.default_rng(0)
    picks = {roulette_select([0.0, 1.0, 0.0], rng) for _ in range(500)}
    assert picks == {1}


class _FixedRng:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def test_roulette_rounding_falls_back_to_last_candidate():
    # probabilities summing to slightly less than the draw
    assert roulette_select([0.3, 0.3, 0.3999999], _FixedRng(0.99999999)) == 2
    assert roulette_select([0.5, 0.5, 0.0], _FixedRng(0.999999999999)) == 1


def test_roulette_draw_of_zero_picks_first():
    assert roulette_select([0.5, 0.5], _FixedRng(0.0)) == 0


def test_scores_follow_formula():
    D = build_distance_matrix([(0, 0), (0, 2), (0, 4)])
    tau = np.full((3, 3), 0.5)
    scores = transition_scores(D, tau, 0, [1, 2], beta=2.0)
    assert scores == pytest.approx([0.5 * (1 / 2) ** 2, 0.5 * (1 / 4) ** 2])


def test_coincident_points_are_clamped():
    D = build_distance_matrix([(0, 0), (0, 0), (5, 0)])
    tau = np.ones((3, 3))
    scores = transition_scores(D, tau, 0, [1, 2], beta=2.0)
    assert np.all(np.isfinite(scores))
    assert scores[0] > scores[1]


def test_coincident_overflow_gets_full_preference():
    D = build_distance_matrix([(0, 0), (0, 0), (5, 0)])
    scores = transition_scores(D, np.ones((3, 3)), 0, [1, 2], beta=50.0)
    assert list(scores) == [1.0, 0.0]


def test_coincident_points_raise_without_clamping():
    D = build_distance_matrix([(0, 0), (0, 0), (5, 0)])
    with pytest.raises(DegenerateGeometry):
        transition_scores(D, np.ones((3, 3)), 0, [1, 2], beta=2.0, epsilon=None)


@pytest.mark.parametrize("seed", range(5))
def test_build_tour_is_permutation(seed):
    inst = TSPInstance.random_euclidean(15, seed=seed)
    D = inst.distance_matrix()
    tour = build_tour(D, init_pheromone(15, 1 / 15), 2.0, np.random.default_rng(seed))
    assert sorted(tour.order) == list(range(15))
    assert tour.length == pytest.approx(inst.tour_length(tour.order))


def test_build_tour_with_duplicates_and_dead_pheromone():
    D = build_distance_matrix([(0, 0), (0, 0), (3, 4), (3, 4), (6, 8)])
    tau = np.zeros((5, 5))
    tour = build_tour(D, tau, 2.0, np.random.default_rng(1))
    assert sorted(tour.order) == list(range(5))


def test_build_tour_respects_start():
    D = build_distance_matrix([(0, 0), (1, 0), (2, 0)])
    tour = build_tour(D, np.ones((3, 3)), 2.0, np.random.default_rng(0), start=2)
    assert tour.order[0] == 2


def test_near_points_keep_preference_when_scores_sum_past_float_max():
    # each near score is ~1e308; their sum overflows, the far point must stay negligible
    D = build_distance_matrix([(0, 0), (1e-77, 0), (0, 1e-77), (1, 0)])
    tau = np.ones((4, 4))
    rng = np.random.default_rng(0)
    seconds = [build_tour(D, tau, 4.0, rng, start=0).order[1] for _ in range(3000)]
    assert 3 not in seconds
    assert set(seconds) == {1, 2}
