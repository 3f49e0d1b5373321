# run_experiments.py
import os, json, argparse, logging
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from anttour import TSPInstance, ACOConfig, AntColonyOptimizer
from anttour.experiments import run_repeated_trials, run_parameter_sweep, nearest_neighbor_tour
from anttour.reporting import ConsoleReporter, format_matrix, format_tour

OUTDIR = os.path.dirname(os.path.abspath(__file__))


def ensure(path: str) -> str:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    return path


def plot_scatter(details_by_label, save_path):
    plt.figure()
    labels = list(details_by_label.keys())
    for i, label in enumerate(labels, start=1):
        lengths = [L for (L, t, tour) in details_by_label[label]]
        x = np.random.normal(loc=i, scale=0.03, size=len(lengths))
        plt.plot(x, lengths, "o")
    plt.xticks(range(1, len(labels) + 1), labels)
    plt.ylabel("Best tour length")
    plt.title("Best lengths across runs")
    ensure(save_path)
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close()


def plot_convergence(inst, label, cfg, save_path, nn_length=None):
    solver = AntColonyOptimizer(inst.coords, cfg)
    _ = solver.run()
    plt.figure()
    plt.plot(range(1, len(solver.history_best_lengths) + 1), solver.history_best_lengths, label="ACO best-so-far")
    if nn_length is not None:
        plt.axhline(nn_length, linestyle="--", color="gray", label="nearest neighbour")
    plt.xlabel("Generation")
    plt.ylabel("Best-so-far tour length")
    plt.title(f"{label} convergence")
    plt.legend()
    ensure(save_path)
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--n", type=int, default=50)
    ap.add_argument("--square", type=float, default=100.0)
    ap.add_argument("--runs", type=int, default=5)
    ap.add_argument("--iters", type=int, default=100)
    ap.add_argument("--ants", type=int, default=10)
    ap.add_argument("--beta", type=float, default=2.0)
    ap.add_argument("--decay", type=float, default=0.5)
    ap.add_argument("--workers", type=int, default=1)
    ap.add_argument("--closed", action="store_true", help="count the return edge (closed tour)")
    ap.add_argument("--no-sweep", action="store_true", help="skip the beta/decay grid")
    ap.add_argument("--verbose", action="store_true", help="print every generation and the matrices")
    args = ap.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s - %(levelname)s - %(message)s")

    inst = TSPInstance.random_euclidean(n=args.n, seed=123, square_size=args.square, name=f"demo{args.n}")
    D = inst.distance_matrix()
    nn = nearest_neighbor_tour(D, closed=args.closed)
    print("Nearest neighbour:", format_tour(nn.order))
    print(f"Nearest neighbour length {nn.length:.4f}")

    configs = [
        (f"beta={b:g}", ACOConfig(generations=args.iters, population_size=args.ants, beta=b,
                                  decay_factor=args.decay, workers=args.workers, closed=args.closed))
        for b in sorted({1.0, args.beta, 5.0})
    ]

    if args.verbose:
        print("Distance matrix:")
        print(format_matrix(D))
        res = AntColonyOptimizer(inst.coords, configs[0][1]).run(callback=ConsoleReporter(every=10))
        print("Final pheromones:")
        print(format_matrix(res.pheromone))

    # repeated trials
    records = []
    details_by_label = {}
    for label, cfg in configs:
        stats, details = run_repeated_trials(inst.coords, cfg, n_runs=args.runs)
        print(label, json.dumps(stats, indent=2))
        records.append({"config": label, "nn_length": nn.length,
                        "gap_to_nn": (stats["mean_length"] - nn.length) / nn.length, **stats})
        details_by_label[label] = details

    # summary CSV + scatter plot
    df_summary = pd.DataFrame.from_records(records)
    summary_csv = os.path.join(OUTDIR, "results_summary.csv")
    df_summary.to_csv(summary_csv, index=False)
    scatter_png = os.path.join(OUTDIR, "results_distribution.png")
    plot_scatter(details_by_label, scatter_png)

    # convergence plots (per config)
    for label, cfg in configs:
        conv_png = os.path.join(OUTDIR, f"convergence_{label.replace('=', '')}.png")
        plot_convergence(inst, label, cfg, conv_png, nn_length=nn.length)

    # parameter sweep over beta and decay
    if not args.no_sweep:
        grid = {"beta": [1.0, 2.0, 3.0, 5.0], "decay_factor": [0.1, 0.3, 0.5, 0.8]}
        rows = run_parameter_sweep(
            inst.coords, grid, base_cfg=configs[0][1],
            n_runs=3, base_seed=500, csv_path=os.path.join(OUTDIR, "beta_decay_grid.csv")
        )
        print("Grid search evaluated:", len(rows))


if __name__ == "__main__":
    main()
