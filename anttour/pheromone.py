"""Pheromone field: initialisation, evaporation and deposit.

Every function returns a fresh matrix; the input is never modified, so a
generation's update is a single step from one matrix value to the next.
"""
from __future__ import annotations
import logging
import math
from typing import Iterable

import numpy as np

from .errors import InvalidConfig, InvalidInput
from .tsp import Tour

logger = logging.getLogger(__name__)


def init_pheromone(size: int, initial_value: float) -> np.ndarray:
    if size < 1:
        raise InvalidInput("pheromone matrix needs at least one point")
    if not math.isfinite(initial_value) or initial_value <= 0:
        raise InvalidConfig(f"initial pheromone must be > 0, got {initial_value}")
    return np.full((size, size), float(initial_value))


def check_decay_factor(factor: float) -> None:
    # factor >= 1 wipes every trail to zero, factor < 0 grows them without bound
    if not (0.0 <= factor < 1.0):
        raise InvalidConfig(f"decay factor must lie in [0, 1), got {factor}")


def decay(matrix: np.ndarray, factor: float) -> np.ndarray:
    check_decay_factor(factor)
    return np.asarray(matrix, dtype=float) * (1.0 - factor)


def reinforce(matrix: np.ndarray, tours: Iterable[Tour], closed: bool = False) -> np.ndarray:
    """Deposit 1/length on each directed edge a tour takes, once per tour.

    Zero-length tours (all visited points coincident) have no defined deposit
    and are skipped.
    """
    tau = np.array(matrix, dtype=float, copy=True)
    skipped = 0
    for tour in tours:
        delta = 1.0 / tour.length if tour.length > 0 and math.isfinite(tour.length) else math.inf
        if not math.isfinite(delta):
            logger.debug("no deposit for tour of length %r: %s", tour.length, tour.order)
            skipped += 1
            continue
        for i, j in tour.edges(closed=closed):
            tau[i, j] += delta
    if skipped:
        logger.warning("skipped deposit for %d tour(s) of zero or non-finite length", skipped)
    return tau
