from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .construction import COINCIDENT_EPSILON, build_tour
from .pheromone import decay, reinforce
from .tsp import Tour


@dataclass(frozen=True)
class GenerationResult:
    best: Tour
    tours: List[Tour]
    pheromone: np.ndarray
    skipped: int = 0     # zero-length tours that deposited nothing


def spawn_rngs(seed_sequence: np.random.SeedSequence, count: int) -> List[np.random.Generator]:
    """One independent generator per ant, so construction order never matters."""
    return [np.random.default_rng(child) for child in seed_sequence.spawn(count)]


def run_generation(distances: np.ndarray, pheromone: np.ndarray, population_size: int,
                   beta: float, rngs: Sequence[np.random.Generator], decay_factor: float,
                   closed: bool = False, epsilon: Optional[float] = COINCIDENT_EPSILON,
                   workers: int = 1) -> GenerationResult:
    """Build one tour per ant, then decay and reinforce with all of them."""
    if len(rngs) != population_size:
        raise ValueError(f"need {population_size} generators, got {len(rngs)}")

    def one_ant(rng):
        return build_tour(distances, pheromone, beta, rng, closed=closed, epsilon=epsilon)

    if workers > 1 and population_size > 1:
        with ThreadPoolExecutor(max_workers=min(workers, population_size)) as executor:
            # map keeps ant order and re-raises worker exceptions
            tours = list(executor.map(one_ant, rngs))
    else:
        tours = [one_ant(rng) for rng in rngs]

    best = min(tours, key=lambda t: t.length)
    skipped = sum(1 for t in tours if not t.length > 0)
    new_tau = reinforce(decay(pheromone, decay_factor), tours, closed=closed)
    return GenerationResult(best=best, tours=tours, pheromone=new_tau, skipped=skipped)
