# experiment.py
from __future__ import annotations
import os, csv, json, time
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from kmst.config import InvalidConfigurationError, SwarmParams, validate_problem
from kmst.data.graph import scale
from kmst.algorithm.swarm import DiscreteSwarm
from kmst.algorithm.sweep import sweep
from kmst.logging import RunLogger

"""
This file orchestrates independent runs (one per seed) and persists results
in a reproducible way. Each run owns its swarm state and RNG stream and only
reads the (already completed) graph, so seeds can run in separate processes.
The overall best is reduced in one place, comparing by best value only.
"""


def run_seed(graph, k: int, params: SwarmParams, seed: int, refine: bool = True,
             log_dir: Optional[str] = None, verbose: bool = False) -> Dict:
    """One full run: swarm, optional sweep, final tree. Returns a picklable dict."""
    swarm = DiscreteSwarm(graph, k, params)

    logger = None
    if log_dir is not None:
        logger = RunLogger(base_dir=log_dir, filename=f"swarm_k{k}_seed{seed}.csv",
                           metadata={"runner": "run_seed"})

    t0 = time.time()
    res = swarm.run(seed=seed, logger=logger, verbose=verbose)
    if logger is not None and len(logger):
        logger.flush()

    best_set, best_value, swaps = res["best_set"], res["best_value"], 0
    if refine:
        evals_before = swarm.oracle.calls
        refined, refined_value, swaps = sweep(swarm.oracle, swarm.n, best_set, best_value, verbose=verbose)
        res["evals_used"] += swarm.oracle.calls - evals_before
        # only a strictly better sweep result replaces the swarm incumbent
        if refined_value < best_value:
            best_set, best_value = refined, refined_value

    tree = swarm.oracle.tree(best_set)
    res.update(
        seed=int(seed),
        best_set=list(best_set),
        best_value=float(best_value),
        best_scaled=scale(best_value, res["normalizer"]),
        swarm_value=float(res["best_value"]),
        swaps=int(swaps),
        parent=tree.parent,
        edges=tree.edge_string(graph),
        time_s=time.time() - t0,
    )
    return res


def _better(row: Dict, best: Optional[Dict], order: Dict[int, int]) -> bool:
    if best is None:
        return True
    if row["best_value"] != best["best_value"]:
        return row["best_value"] < best["best_value"]
    # equal values: the seed listed first wins, whatever order runs finished in
    return order[row["seed"]] < order[best["seed"]]


def run_seeds(graph, k: int, params: SwarmParams, seeds: Iterable[int], workers: int = 1,
              refine: bool = True, log_dir: Optional[str] = None,
              verbose: bool = False) -> Tuple[List[Dict], Dict]:
    """
    Run every seed and return (rows in seed order, overall best row).

    workers > 1 runs seeds in a process pool; the graph must not be mutated
    while runs are in flight.
    """
    seeds = list(dict.fromkeys(int(s) for s in seeds))
    if not seeds:
        raise ValueError("seeds must contain at least one seed.")
    negative = [s for s in seeds if s < 0]
    if negative:
        raise InvalidConfigurationError(f"seeds must be non-negative, got {negative}.")
    validate_problem(graph, k, params)
    order = {s: i for i, s in enumerate(seeds)}

    rows: Dict[int, Dict] = {}
    best = None
    if workers is None or workers <= 1:
        for s in seeds:
            row = run_seed(graph, k, params, s, refine=refine, log_dir=log_dir, verbose=verbose)
            rows[s] = row
            if _better(row, best, order):
                best = row
    else:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(run_seed, graph, k, params, s, refine, log_dir, False) for s in seeds]
            for fut in as_completed(futures):
                row = fut.result()
                rows[row["seed"]] = row
                if verbose:
                    print(f"[run] seed {row['seed']}: best = {row['best_value']:.10g}")
                if _better(row, best, order):
                    best = row

    return [rows[s] for s in seeds], best


def run_suite(
    *,
    outdir: str,
    graph,
    k: int,
    params: SwarmParams,
    seeds: Iterable[int],
    workers: int = 1,
    refine: bool = True,
    log_dir: Optional[str] = None,
    verbose: bool = False,
):
    """
    Args:
      outdir: output directory for CSVs and curves.
      graph: completed WeightedGraph (read-only during the suite).
      k: number of vertices in the tree.
      params: fully-specified SwarmParams (no None in required fields).
      seeds: iterable of integer seeds, one independent run each.
      workers: process count; 1 runs sequentially in this process.
    Returns:
      (log_csv_path, summary_csv_path, best_row)
    """
    if not isinstance(outdir, str) or not outdir:
        raise ValueError("outdir must be a non-empty string.")

    os.makedirs(outdir, exist_ok=True)
    curves_dir = os.path.join(outdir, f"curves_k{k}")
    os.makedirs(curves_dir, exist_ok=True)

    rows, best = run_seeds(graph, k, params, seeds, workers=workers,
                           refine=refine, log_dir=log_dir, verbose=verbose)

    log_path = os.path.join(outdir, f"runs_k{k}.csv")
    with open(log_path, "w", newline="") as fh:
        w = csv.writer(fh)
        w.writerow(["seed", "k", "best_value", "best_scaled", "swarm_value", "swaps",
                    "best_set_json", "edges", "evals", "iters", "time_s"])
        for row in rows:
            np.save(os.path.join(curves_dir, f"seed{row['seed']}.npy"), row["gbest_curve"])
            w.writerow([
                row["seed"],
                k,
                row["best_value"],
                row["best_scaled"],
                row["swarm_value"],
                row["swaps"],
                json.dumps([graph.vertex_name(v) for v in row["best_set"]]),
                row["edges"],
                row["evals_used"],
                row["iters_run"],
                float(row["time_s"]),
            ])

    agg_path = os.path.join(outdir, f"summary_k{k}.csv")
    _aggregate(log_path, agg_path)
    return log_path, agg_path, best


def _aggregate(log_csv: str, out_csv: str):
    import pandas as pd
    df = pd.read_csv(log_csv)
    g = df.groupby("k", as_index=False)
    out = g["best_value"].agg(mean="mean", median="median", min="min", max="max", std="std")
    out["runs"] = g.size()["size"].values
    out.to_csv(out_csv, index=False)
