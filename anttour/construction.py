from __future__ import annotations
from typing import Optional, Sequence

import numpy as np

from .errors import DegenerateGeometry
from .tsp import Tour

ALPHA = 1.0                 # pheromone influence, fixed
COINCIDENT_EPSILON = 1e-9   # stand-in distance for coincident points


def transition_scores(distances: np.ndarray, pheromone: np.ndarray, current: int,
                      candidates: Sequence[int], beta: float,
                      epsilon: Optional[float] = COINCIDENT_EPSILON) -> np.ndarray:
    """tau^alpha * (1/d)^beta for each candidate, as a finite weight vector."""
    idx = np.asarray(candidates, dtype=int)
    d = np.asarray(distances[current, idx], dtype=float)
    if np.any(d <= 0):
        if epsilon is None:
            bad = [int(c) for c in idx[d <= 0]]
            raise DegenerateGeometry(f"point {current} coincides with {bad}")
        d = np.maximum(d, epsilon)
    tau = np.asarray(pheromone[current, idx], dtype=float)
    with np.errstate(over="ignore", invalid="ignore"):
        scores = (tau ** ALPHA) * ((1.0 / d) ** beta)
    # 0 * inf on a dead trail
    scores[np.isnan(scores)] = 0.0
    inf_mask = np.isinf(scores)
    if inf_mask.any():
        # equal maximal preference for the candidates that overflowed
        return inf_mask.astype(float)
    return scores


def roulette_select(probabilities: Sequence[float], rng: np.random.Generator) -> int:
    """Pick an index with frequency proportional to its probability.

    The remainder is exhausted in list order; rounding that leaves a small
    positive remainder selects the last candidate with non-zero probability.
    """
    r = rng.random()
    last = len(probabilities) - 1
    for k, p in enumerate(probabilities):
        if p <= 0:
            continue
        last = k
        r -= p
        if r <= 0:
            return k
    return last


def _probabilities(scores: np.ndarray) -> np.ndarray:
    # scale by the largest score first; finite scores can still sum past float max
    m = float(scores.max())
    if not (m > 0 and np.isfinite(m)):
        return np.full(len(scores), 1.0 / len(scores))
    s = scores / m
    return s / s.sum()


def build_tour(distances: np.ndarray, pheromone: np.ndarray, beta: float,
               rng: np.random.Generator, closed: bool = False,
               epsilon: Optional[float] = COINCIDENT_EPSILON,
               start: Optional[int] = None) -> Tour:
    n = len(distances)
    current = int(rng.integers(n)) if start is None else int(start)
    tour = [current]
    unvisited = [j for j in range(n) if j != current]
    while unvisited:
        scores = transition_scores(distances, pheromone, current, unvisited, beta, epsilon=epsilon)
        k = roulette_select(_probabilities(scores), rng)
        current = unvisited.pop(k)
        tour.append(current)
    return Tour.from_order(distances, tour, closed=closed)
