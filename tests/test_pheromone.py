import logging

import numpy as np
import pytest

from anttour import InvalidConfig, InvalidInput, Tour, build_distance_matrix, decay, init_pheromone, reinforce

SQUARE = [(0, 0), (0, 10), (10, 10), (10, 0)]


def test_init_is_uniform():
    tau = init_pheromone(5, 0.2)
    assert tau.shape == (5, 5)
    assert np.all(tau == 0.2)


@pytest.mark.parametrize("value", [0.0, -1.0, float("inf"), float("nan")])
def test_init_rejects_non_positive(value):
    with pytest.raises(InvalidConfig):
        init_pheromone(3, value)


def test_init_rejects_empty():
    with pytest.raises(InvalidInput):
        init_pheromone(0, 1.0)


def test_decay_scales_every_cell():
    rng = np.random.default_rng(1)
    tau = rng.uniform(0.1, 2.0, size=(6, 6))
    out = decay(tau, 0.3)
    assert np.allclose(out, tau * 0.7)
    assert out is not tau


def test_decay_zero_is_identity():
    tau = np.arange(1.0, 10.0).reshape(3, 3)
    assert np.array_equal(decay(tau, 0.0), tau)


@pytest.mark.parametrize("factor", [1.0, 1.5, -0.1])
def test_decay_rejects_out_of_range(factor):
    with pytest.raises(InvalidConfig):
        decay(np.ones((2, 2)), factor)


def test_reinforce_touches_only_traversed_edges():
    D = build_distance_matrix(SQUARE)
    tau = init_pheromone(4, 0.25)
    tour = Tour.from_order(D, [0, 1, 2, 3])
    out = reinforce(tau, [tour])

    changed = {(int(i), int(j)) for i, j in np.argwhere(out != tau)}
    assert changed == {(0, 1), (1, 2), (2, 3)}
    assert out[0, 1] == pytest.approx(0.25 + 1 / 30)
    assert np.all(out >= tau)
    # input untouched
    assert np.all(tau == 0.25)


def test_reinforce_adds_once_per_tour():
    D = build_distance_matrix(SQUARE)
    tau = np.zeros((4, 4))
    a = Tour.from_order(D, [0, 1, 2, 3])
    b = Tour.from_order(D, [0, 1, 3, 2])
    out = reinforce(tau, [a, b])
    assert out[0, 1] == pytest.approx(1 / a.length + 1 / b.length)
    assert out[1, 0] == 0.0


def test_reinforce_closed_adds_return_edge():
    D = build_distance_matrix(SQUARE)
    tour = Tour.from_order(D, [0, 1, 2, 3], closed=True)
    out = reinforce(np.zeros((4, 4)), [tour], closed=True)
    assert out[3, 0] == pytest.approx(1 / 40)


def test_reinforce_skips_zero_length_tour(caplog):
    tau = np.ones((2, 2))
    with caplog.at_level(logging.WARNING, logger="anttour.pheromone"):
        out = reinforce(tau, [Tour(order=(0, 1), length=0.0)])
    assert np.array_equal(out, tau)
    assert "skipped deposit for 1 tour" in caplog.text
    assert np.all(np.isfinite(out))


def test_reinforce_warns_once_per_call(caplog):
    tau = np.ones((3, 3))
    tours = [Tour(order=(0, 1, 2), length=0.0) for _ in range(5)]
    with caplog.at_level(logging.WARNING, logger="anttour.pheromone"):
        reinforce(tau, tours)
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "5 tour(s)" in warnings[0].getMessage()
