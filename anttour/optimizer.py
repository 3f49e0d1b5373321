from __future__ import annotations
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from .colony import run_generation, spawn_rngs
from .errors import DegenerateGeometry, InvalidConfig, InvalidInput
from .pheromone import check_decay_factor, init_pheromone
from .tsp import Tour, as_points, build_distance_matrix, random_tour

logger = logging.getLogger(__name__)


def _is_int(v) -> bool:
    return isinstance(v, (int, np.integer)) and not isinstance(v, bool)


def _is_real(v) -> bool:
    return isinstance(v, (int, float, np.integer, np.floating)) and not isinstance(v, bool)


@dataclass
class ACOConfig:
    generations: int = 100          # fixed iteration count, no early stopping
    population_size: int = 10       # ants per generation
    beta: float = 2.0               # heuristic (1/d) influence
    decay_factor: float = 0.5       # evaporation rate, in [0, 1)
    initial_pheromone: Optional[float] = None  # None -> 1 / n_points
    seed: Optional[int] = None
    workers: int = 1                # threads used to build a generation's tours
    closed: bool = False            # count the return edge (standard TSP)
    clamp_coincident: bool = True
    coincident_epsilon: float = 1e-9

    def validate(self) -> None:
        if not _is_int(self.generations) or self.generations <= 0:
            raise InvalidConfig(f"generations must be a positive integer, got {self.generations!r}")
        if not _is_int(self.population_size) or self.population_size <= 0:
            raise InvalidConfig(f"population_size must be a positive integer, got {self.population_size!r}")
        if not _is_real(self.beta) or not math.isfinite(self.beta) or self.beta <= 0:
            raise InvalidConfig(f"beta must be a positive real, got {self.beta!r}")
        if not _is_real(self.decay_factor):
            raise InvalidConfig(f"decay_factor must be a real, got {self.decay_factor!r}")
        check_decay_factor(self.decay_factor)
        if self.initial_pheromone is not None:
            if (not _is_real(self.initial_pheromone) or not math.isfinite(self.initial_pheromone)
                    or self.initial_pheromone <= 0):
                raise InvalidConfig(f"initial_pheromone must be a positive real, got {self.initial_pheromone!r}")
        if self.seed is not None and not _is_int(self.seed):
            raise InvalidConfig(f"seed must be an integer or None, got {self.seed!r}")
        if not _is_int(self.workers) or self.workers <= 0:
            raise InvalidConfig(f"workers must be a positive integer, got {self.workers!r}")
        if (not _is_real(self.coincident_epsilon) or not math.isfinite(self.coincident_epsilon)
                or self.coincident_epsilon <= 0):
            raise InvalidConfig(f"coincident_epsilon must be a positive real, got {self.coincident_epsilon!r}")


@dataclass(frozen=True)
class GenerationReport:
    """What an observer sees after each generation."""
    iteration: int
    generation_best: Tour
    best: Tour
    distances: np.ndarray
    pheromone: np.ndarray
    skipped: int = 0


@dataclass
class ACOResult:
    best_tour: List[int]
    best_length: float
    history_best_lengths: List[float]
    history_best_tours: List[List[int]]
    config: ACOConfig
    elapsed_sec: float
    distances: Optional[np.ndarray] = field(default=None, repr=False)
    pheromone: Optional[np.ndarray] = field(default=None, repr=False)


class AntColonyOptimizer:
    """Ant System over an open (or optionally closed) path.

    Everything the run needs is built here and validated up front, so a bad
    point set or configuration fails before the first generation.
    """

    def __init__(self, points, cfg: Optional[ACOConfig] = None):
        self.cfg = cfg or ACOConfig()
        self.cfg.validate()
        P = as_points(points)
        if len(P) < 2:
            raise InvalidInput(f"need at least 2 points to build a tour, got {len(P)}")
        self.points = P
        self.n = len(P)
        self.D = build_distance_matrix(P)
        self.epsilon = self.cfg.coincident_epsilon if self.cfg.clamp_coincident else None
        if self.epsilon is None:
            off_diag = self.D + np.eye(self.n)
            if np.any(off_diag <= 0):
                i, j = np.argwhere(off_diag <= 0)[0]
                raise DegenerateGeometry(f"points {int(i)} and {int(j)} coincide and clamping is disabled")

        # fixed entropy so every run() replays the same streams, even when seed is None
        self._entropy = np.random.SeedSequence(self.cfg.seed).entropy
        self.reset()

    def reset(self) -> None:
        """Restore the initial pheromone, incumbent, random streams and history."""
        tau0 = self.cfg.initial_pheromone if self.cfg.initial_pheromone is not None else 1.0 / self.n
        self.tau = init_pheromone(self.n, tau0)
        self.tau.flags.writeable = False
        self._seed_seq = np.random.SeedSequence(self._entropy)
        self.rng = np.random.default_rng(self._seed_seq.spawn(1)[0])

        # incumbent starts as a random permutation, replaced by any generation best <= it
        self.best = Tour.from_order(self.D, random_tour(self.n, self.rng), closed=self.cfg.closed)
        self.history_best_lengths: List[float] = []
        self.history_best_tours: List[List[int]] = []

    @property
    def best_tour(self) -> List[int]:
        return list(self.best.order)

    @property
    def best_length(self) -> float:
        return self.best.length

    def step(self, iteration: int) -> GenerationReport:
        cfg = self.cfg
        gen = run_generation(self.D, self.tau, cfg.population_size, cfg.beta,
                             spawn_rngs(self._seed_seq, cfg.population_size), cfg.decay_factor,
                             closed=cfg.closed, epsilon=self.epsilon, workers=cfg.workers)
        if gen.best.length <= self.best.length:
            self.best = gen.best
        self.tau = gen.pheromone
        # observers get the live matrix, so keep it read-only
        self.tau.flags.writeable = False

        self.history_best_lengths.append(self.best.length)
        self.history_best_tours.append(list(self.best.order))
        logger.debug("generation %d: generation best %.4f, best %.4f",
                     iteration, gen.best.length, self.best.length)
        return GenerationReport(iteration=iteration, generation_best=gen.best, best=self.best,
                                distances=self.D, pheromone=self.tau, skipped=gen.skipped)

    def run(self, callback: Optional[Callable[[GenerationReport], None]] = None) -> ACOResult:
        self.reset()
        start = time.time()

        for it in range(1, self.cfg.generations + 1):
            report = self.step(it)
            if callback is not None:
                callback(report)

        elapsed = time.time() - start
        logger.info("finished %d generations on %d points: best length %.4f in %.2fs",
                    self.cfg.generations, self.n, self.best.length, elapsed)
        return ACOResult(best_tour=self.best_tour, best_length=self.best_length,
                         history_best_lengths=self.history_best_lengths,
                         history_best_tours=self.history_best_tours, config=self.cfg,
                         elapsed_sec=elapsed, distances=self.D, pheromone=self.tau)


def solve(points, cfg: Optional[ACOConfig] = None,
          callback: Optional[Callable[[GenerationReport], None]] = None) -> ACOResult:
    return AntColonyOptimizer(points, cfg).run(callback=callback)
