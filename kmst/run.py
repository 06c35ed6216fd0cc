from __future__ import annotations
from pathlib import Path
import argparse
import sys

import numpy as np

from kmst.config import InvalidConfigurationError, params_from_preset, validate_problem
from kmst.algorithm.constants import PRESETS
from kmst.data.loader import load_graph
from kmst.algorithm.components.mst import MstOracle
from kmst.experiment import run_suite
from kmst.visualization import plot_convergence, save_tree

DEFAULT_OUTDIR = Path("results")


# ---------- Seed ranges ----------
def parse_seed_range(text: str) -> list[int]:
    """Expand "1-5,9,12-13" into [1, 2, 3, 4, 5, 9, 12, 13] (order kept, duplicates dropped)."""
    seeds: dict[int, None] = {}
    for part in "".join(text.split()).split(","):
        if not part:
            continue
        lo, sep, hi = part.partition("-")
        try:
            a, b = (int(lo), int(hi)) if sep and lo else (int(part), int(part))
        except ValueError:
            raise InvalidConfigurationError(f"Invalid seed spec '{part}'.") from None
        if a < 0:
            raise InvalidConfigurationError(f"Seeds must be non-negative, got '{part}'.")
        if b < a:
            raise InvalidConfigurationError(f"Reversed seed range '{part}'.")
        for s in range(a, b + 1):
            seeds.setdefault(s, None)
    if not seeds:
        raise InvalidConfigurationError(f"No seeds in '{text}'.")
    return list(seeds)


def _parse_preset(value: str) -> str:
    """Return an uppercase preset name if it exists, else raise."""
    name = value.upper()
    if name not in PRESETS:
        valid = ", ".join(sorted(PRESETS))
        raise argparse.ArgumentTypeError(f"Unknown preset '{value}'. Choose from: {valid}.")
    return name


def _parse_seeds(value: str) -> list[int]:
    try:
        return parse_seed_range(value)
    except InvalidConfigurationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


# ---------- CLI ----------
def parse_args(argv=None):
    ap = argparse.ArgumentParser(prog="kmst", description="Discrete PSO search for a k-cardinality MST.")

    ap.add_argument("graph", type=Path, help="Graph file with 'u,v,w;' records")
    ap.add_argument("-k", type=int, required=True, help="Number of vertices in the tree")
    ap.add_argument("--preset", default="FAST", type=_parse_preset,
                    help="Parameter profile (QUICK_TEST, FAST, BALANCED, INTENSIVE)")
    ap.add_argument("--seeds", type=_parse_seeds, default=[42],
                    help="Seeds to run, e.g. '1-10' or '3,7,11-12'")
    ap.add_argument("--workers", type=int, default=1, help="Parallel processes (1 = sequential)")
    ap.add_argument("--outdir", type=Path, default=DEFAULT_OUTDIR)
    ap.add_argument("--log-dir", type=Path, default=None,
                    help="Optional directory to store iteration-level CSV logs")
    ap.add_argument("--draw", choices=["tree", "circular", "none"], default="tree")
    ap.add_argument("--no-sweep", dest="no_sweep", action="store_true",
                    help="Skip the local-search refinement of each run's best")
    ap.add_argument("--no-plots", dest="no_plots", action="store_true")
    ap.add_argument("--verbose", action="store_true")

    # Optional manual overrides: use None so they only apply if explicitly set
    ap.add_argument("--swarm", type=int, default=None)
    ap.add_argument("--iters", type=int, default=None)
    ap.add_argument("--alpha-g", type=float, nargs=2, metavar=("START", "END"), default=None)
    ap.add_argument("--alpha-p", type=float, nargs=2, metavar=("START", "END"), default=None)
    ap.add_argument("--stagnation", type=int, default=None,
                    help="Stop a run after this many iterations without global improvement")
    ap.add_argument("--attempts", type=int, default=None, help="Exploration pool draws per move")
    return ap.parse_args(argv)


def make_params(args):
    ag = args.alpha_g or (None, None)
    ap = args.alpha_p or (None, None)
    return params_from_preset(
        args.preset,
        swarm_size=args.swarm,
        iters=args.iters,
        alpha_g_start=ag[0], alpha_g_end=ag[1],
        alpha_p_start=ap[0], alpha_p_end=ap[1],
        stagnation_limit=args.stagnation,
        exploration_attempts=args.attempts,
    )


def main(argv=None) -> int:
    args = parse_args(argv)
    args.outdir.mkdir(parents=True, exist_ok=True)

    graph = load_graph(args.graph)
    print(f"Graph: {args.graph} | Vertices: {graph.num_vertices} | Edges: {graph.num_edges}")

    try:
        params = make_params(args)
        validate_problem(graph, args.k, params)
    except InvalidConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    graph.floyd_warshall()
    graph.complete(args.k)
    normalizer = graph.normalizer(args.k)
    print(f"Preset : {args.preset} | k={args.k} | diameter={graph.diameter:g} | normalizer={normalizer:g}")

    runs_csv, summary_csv, best = run_suite(
        outdir=str(args.outdir),
        graph=graph,
        k=args.k,
        params=params,
        seeds=args.seeds,
        workers=args.workers,
        refine=not args.no_sweep,
        log_dir=str(args.log_dir) if args.log_dir is not None else None,
        verbose=args.verbose,
    )
    print("[run] wrote:", runs_csv, summary_csv)
    print(f"Best seed : {best['seed']}")
    print(f"  weight  : {best['best_value']:.10g} (normalized {best['best_scaled']:.10g})")
    print(f"  vertices: {', '.join(graph.vertex_name(v) for v in best['best_set'])}")
    print(f"  edges   : {best['edges']}")

    if args.draw != "none":
        result = MstOracle(graph).tree(best["best_set"])
        out = save_tree(graph, result, args.outdir / f"tree_k{args.k}_seed{best['seed']}.svg", layout=args.draw)
        print(f"[run] tree drawn to: {out}")

    if not args.no_plots:
        curves_dir = args.outdir / f"curves_k{args.k}"
        curves = {s: np.load(curves_dir / f"seed{s}.npy") for s in args.seeds}
        plot_convergence(curves, str(args.outdir / f"convergence_k{args.k}.png"), normalizer)

    return 0


if __name__ == "__main__":
    sys.exit(main())
