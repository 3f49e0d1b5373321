from __future__ import annotations
import itertools, statistics, os
from typing import Dict, Any, List, Optional, Tuple
from dataclasses import asdict, replace
import csv

import numpy as np

from .optimizer import ACOConfig, solve
from .tsp import Tour, build_distance_matrix


def run_repeated_trials(points, cfg: ACOConfig, n_runs: int = 10, base_seed: int = 42):
    lengths = []
    times = []
    best_tours = []
    for r in range(n_runs):
        cfg_r = replace(cfg, seed=base_seed + r)
        res = solve(points, cfg_r)
        lengths.append(res.best_length)
        times.append(res.elapsed_sec)
        best_tours.append(res.best_tour)
    stats = {
        "mean_length": statistics.mean(lengths),
        "std_length": statistics.stdev(lengths) if len(lengths) > 1 else 0.0,
        "min_length": min(lengths),
        "max_length": max(lengths),
        "median_length": statistics.median(lengths),
        "mean_time": statistics.mean(times),
        "n_runs": n_runs,
    }
    return stats, list(zip(lengths, times, best_tours))


def run_parameter_sweep(points, param_grid: Dict[str, List[Any]],
                        base_cfg: Optional[ACOConfig] = None, n_runs: int = 5, base_seed: int = 100,
                        csv_path: Optional[str] = None) -> List[Dict[str, Any]]:
    base_cfg = base_cfg or ACOConfig()
    known = set(asdict(base_cfg))
    unknown = sorted(set(param_grid) - known)
    if unknown:
        raise ValueError(f"Unknown config fields in grid: {unknown}")
    keys = sorted(param_grid.keys())
    rows = []
    for values in itertools.product(*[param_grid[k] for k in keys]):
        cfg = replace(base_cfg, **dict(zip(keys, values)))
        stats, _ = run_repeated_trials(points, cfg, n_runs=n_runs, base_seed=base_seed)
        row = {**{k: getattr(cfg, k) for k in keys}, **stats}
        rows.append(row)
        if csv_path is not None:
            write_header = not os.path.exists(csv_path)
            with open(csv_path, "a", newline="") as f:
                w = csv.DictWriter(f, fieldnames=row.keys())
                if write_header:
                    w.writeheader()
                w.writerow(row)
    return rows


def nearest_neighbor_tour(distances, start: int = 0, closed: bool = False) -> Tour:
    """Greedy nearest-neighbour baseline to put ACO lengths in scale."""
    D = np.asarray(distances, dtype=float)
    n = D.shape[0]
    visited = np.zeros(n, dtype=bool)
    tour = [start]
    visited[start] = True
    cur = start
    for _ in range(n - 1):
        dist_row = D[cur].copy()
        dist_row[visited] = np.inf
        nxt = int(np.argmin(dist_row))
        tour.append(nxt)
        visited[nxt] = True
        cur = nxt
    return Tour.from_order(D, tour, closed=closed)


def baseline_gap(points, length: float, closed: bool = False) -> Tuple[float, float]:
    """Return (nearest-neighbour length, relative gap of `length` to it)."""
    nn = nearest_neighbor_tour(build_distance_matrix(points), closed=closed).length
    gap = (length - nn) / nn if nn > 0 else 0.0
    return nn, gap
