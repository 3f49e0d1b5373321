import os, argparse, logging
import numpy as np
import matplotlib.pyplot as plt
import imageio

from anttour import TSPInstance, ACOConfig, AntColonyOptimizer


def path_xy(coords, tour, closed):
    order = list(tour) + ([tour[0]] if closed else [])
    return [coords[i][0] for i in order], [coords[i][1] for i in order]


def save_pheromone_heatmap(pheromone, save_path):
    fig, ax = plt.subplots(figsize=(5, 4))
    im = ax.imshow(np.asarray(pheromone), cmap="viridis", interpolation="nearest")
    ax.set_title("Final pheromone")
    ax.set_xlabel("to")
    ax.set_ylabel("from")
    fig.colorbar(im, ax=ax)
    fig.savefig(save_path, dpi=120, bbox_inches="tight")
    plt.close(fig)


def visualize(inst, cfg, outdir, step=5):
    os.makedirs(outdir, exist_ok=True)
    solver = AntColonyOptimizer(inst.coords, cfg)
    res = solver.run()

    coords = inst.coords
    frames = []
    iters = list(range(0, len(res.history_best_tours), step))
    for it in iters:
        tour = res.history_best_tours[it]
        L = res.history_best_lengths[it]
        xs, ys = path_xy(coords, tour, cfg.closed)
        cx = [c[0] for c in coords]
        cy = [c[1] for c in coords]

        plt.figure(figsize=(5,5))
        plt.plot(cx, cy, "o")
        plt.plot(xs, ys, "-")
        plt.title(f"best-so-far\ngeneration={it+1}  length={L:.2f}")
        plt.axis("equal")
        plt.tight_layout()
        frame_path = os.path.join(outdir, f"frame_{it:03d}.png")
        plt.savefig(frame_path, dpi=120, bbox_inches="tight")
        plt.close()
        frames.append(frame_path)

    gif_path = os.path.join(outdir, "aco_convergence.gif")
    with imageio.get_writer(gif_path, mode="I", duration=0.6) as writer:
        for fp in frames:
            writer.append_data(imageio.v2.imread(fp))
    print("Saved:", gif_path)

    heat_path = os.path.join(outdir, "aco_pheromone.png")
    save_pheromone_heatmap(res.pheromone, heat_path)
    print("Saved:", heat_path)

def main():
    p = argparse.ArgumentParser()
    p.add_argument("--n", type=int, default=50, help="number of cities")
    p.add_argument("--iters", type=int, default=100)
    p.add_argument("--ants", type=int, default=10)
    p.add_argument("--beta", type=float, default=2.0)
    p.add_argument("--decay", type=float, default=0.5)
    p.add_argument("--square", type=float, default=100.0)
    p.add_argument("--seed", type=int, default=321)
    p.add_argument("--closed", action="store_true")
    p.add_argument("--outdir", default="viz")
    p.add_argument("--step", type=int, default=5, help="frame every k generations")
    args = p.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    inst = TSPInstance.random_euclidean(n=args.n, seed=args.seed, square_size=args.square, name=f"viz{args.n}")
    cfg = ACOConfig(generations=args.iters, population_size=args.ants, beta=args.beta,
                    decay_factor=args.decay, seed=args.seed, closed=args.closed)
    visualize(inst, cfg, args.outdir, step=args.step)

if __name__ == "__main__":
    main()
