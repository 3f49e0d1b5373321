from __future__ import annotations
import math
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidInput

Point = Tuple[float, float]


def as_points(points) -> np.ndarray:
    """Return the coordinates as a float array of shape (n, 2)."""
    try:
        arr = np.asarray(points, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"points must be (x, y) pairs: {exc}") from exc
    if arr.size == 0:
        return np.empty((0, 2), dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise InvalidInput(f"points must have shape (n, 2), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidInput("points must have finite coordinates")
    return arr


def build_distance_matrix(points) -> np.ndarray:
    """Pairwise Euclidean distances, returned as a read-only array.

    Coincident points give a zero entry off the diagonal, which is valid here;
    the tour builder decides how to treat them.
    """
    P = as_points(points)
    if len(P) == 0:
        raise InvalidInput("cannot build a distance matrix for zero points")
    diff = P[:, None, :] - P[None, :, :]
    D = np.hypot(diff[..., 0], diff[..., 1])
    # hypot is symmetric per pair, but force it so the invariant never depends on rounding
    D = np.triu(D, 1)
    D = D + D.T
    D.flags.writeable = False
    return D


def tour_length(distances, order: Sequence[int], closed: bool = False) -> float:
    """Sum of consecutive edge lengths; the return edge counts only when closed."""
    n = len(order)
    if n < 2:
        return 0.0
    idx = np.asarray(order, dtype=int)
    total = float(np.sum(distances[idx[:-1], idx[1:]]))
    if closed:
        total += float(distances[idx[-1], idx[0]])
    return total


def random_tour(n: int, rng: np.random.Generator) -> List[int]:
    return [int(i) for i in rng.permutation(n)]


@dataclass(frozen=True)
class Tour:
    order: Tuple[int, ...]
    length: float

    def __len__(self) -> int:
        return len(self.order)

    def edges(self, closed: bool = False) -> Iterator[Tuple[int, int]]:
        for k in range(len(self.order) - 1):
            yield self.order[k], self.order[k + 1]
        if closed and len(self.order) > 1:
            yield self.order[-1], self.order[0]

    @classmethod
    def from_order(cls, distances, order: Sequence[int], closed: bool = False) -> "Tour":
        return cls(order=tuple(int(i) for i in order),
                   length=tour_length(distances, order, closed=closed))


@dataclass
class TSPInstance:
    coords: List[Point]
    name: str = "euclidean_tsp"

    @staticmethod
    def random_euclidean(n: int, seed: Optional[int] = None, square_size: float = 100.0, name: str = "random_euclidean"):
        rng = random.Random(seed)
        coords = [(rng.uniform(0, square_size), rng.uniform(0, square_size)) for _ in range(n)]
        return TSPInstance(coords=coords, name=name)

    def n_cities(self) -> int:
        return len(self.coords)

    def distance(self, i: int, j: int) -> float:
        (x1, y1), (x2, y2) = self.coords[i], self.coords[j]
        return math.hypot(x1 - x2, y1 - y2)

    def distance_matrix(self) -> np.ndarray:
        return build_distance_matrix(self.coords)

    def tour_length(self, tour: Sequence[int], closed: bool = False) -> float:
        dist = 0.0
        for k in range(len(tour) - 1):
            dist += self.distance(tour[k], tour[k + 1])
        if closed and len(tour) > 1:
            dist += self.distance(tour[-1], tour[0])
        return dist
