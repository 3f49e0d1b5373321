"""Console output for a run: matrix dumps, tour rendering, progress lines."""
from __future__ import annotations
import sys
from typing import Optional, Sequence, TextIO

import numpy as np

from .optimizer import GenerationReport


def format_matrix(matrix, decimals: int = 4) -> str:
    M = np.asarray(matrix, dtype=float)
    return "\n".join(", ".join(f"{x:.{decimals}f}" for x in row) for row in M)


def format_tour(order: Sequence[int]) -> str:
    return " -> ".join(str(i) for i in order)


class ConsoleReporter:
    """Generation callback printing the best tour and distance.

    `every` thins the output; the last generation is printed only if it
    falls on the stride. `dump_pheromone` appends the pheromone matrix.
    """

    def __init__(self, every: int = 1, show_tour: bool = True, dump_pheromone: bool = False,
                 stream: Optional[TextIO] = None):
        if every < 1:
            raise ValueError("every must be >= 1")
        self.every = every
        self.show_tour = show_tour
        self.dump_pheromone = dump_pheromone
        self.stream = stream

    def __call__(self, report: GenerationReport) -> None:
        if report.iteration % self.every != 0:
            return
        out = self.stream or sys.stdout
        if self.show_tour:
            print(format_tour(report.best.order), file=out)
        print(f"Generation {report.iteration} best distance {report.best.length:.4f}", file=out)
        if report.skipped:
            print(f"  ({report.skipped} zero-length tours deposited nothing)", file=out)
        if self.dump_pheromone:
            print("Pheromones:", file=out)
            print(format_matrix(report.pheromone), file=out)
