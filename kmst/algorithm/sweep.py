"""Sweep: deterministic first-improvement local search over single swaps.

Starting from a k-subset, repeatedly try swapping one in-vertex for one
out-vertex (positions in order, out-vertices ascending). The first swap that
strictly lowers the MST weight is committed and the scan restarts. The search
ends after a full scan without improvement, i.e. at a local optimum of the
single-swap neighborhood. Equal-valued swaps are rejected, so plateaus cannot
cause oscillation and a second sweep over the result changes nothing.
"""

import bisect
from typing import List, Optional, Sequence, Tuple


class LocalSearchRefiner:

    def __init__(self, oracle, n: int, verbose: bool = False):
        self.oracle = oracle
        self.n = int(n)
        self.verbose = verbose

    def _first_improvement(self, current: List[int], value: float, outside: List[int]):
        for pos in range(len(current)):
            candidate = list(current)
            for out_idx, v in enumerate(outside):
                candidate[pos] = v
                cand_value = self.oracle.weight(candidate)
                if cand_value < value:
                    return pos, out_idx, cand_value
        return None

    def refine(self, subset: Sequence[int], value: Optional[float] = None) -> Tuple[List[int], float, int]:
        """Return (subset, value, swaps); the input comes back unchanged if no swap helps."""
        current = [int(v) for v in subset]
        if value is None:
            value = self.oracle.weight(current)
        inside = set(current)
        outside = [v for v in range(self.n) if v not in inside]

        swaps = 0
        while True:
            found = self._first_improvement(current, value, outside)
            if found is None:
                break
            pos, out_idx, new_value = found
            if self.verbose:
                print(f"[sweep] swap #{swaps + 1}: {value:.10g} -> {new_value:.10g}")
            dropped = current[pos]
            current[pos] = outside.pop(out_idx)
            bisect.insort(outside, dropped)
            value = new_value
            swaps += 1

        return current, value, swaps


def sweep(oracle, n: int, subset: Sequence[int], value: Optional[float] = None,
          verbose: bool = False) -> Tuple[List[int], float, int]:
    return LocalSearchRefiner(oracle, n, verbose=verbose).refine(subset, value)
