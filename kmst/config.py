from __future__ import annotations
from dataclasses import dataclass, fields, replace
import numbers
from typing import Optional

"""
Dataclass definition for discrete PSO hyperparameters.

All fields are optional (`None`) so that this file acts only as an override layer.
The concrete values for each profile (swarm size, iteration count, alpha
schedules, ...) live in `algorithm/constants.py` and are merged here by
`params_from_preset`.
"""


class InvalidConfigurationError(ValueError):
    """Raised before a run starts when the problem or the parameters are unusable."""


@dataclass(frozen=True)
class SwarmParams:
    swarm_size: Optional[int] = None
    iters: Optional[int] = None
    alpha_g_start: Optional[float] = None
    alpha_g_end: Optional[float] = None
    alpha_p_start: Optional[float] = None
    alpha_p_end: Optional[float] = None
    exploration_attempts: Optional[int] = None
    stagnation_limit: Optional[int] = None
    dense_threshold: Optional[int] = None
    seed: Optional[int] = None
    log_every: Optional[int] = None


REQUIRED_FIELDS = (
    "swarm_size", "iters",
    "alpha_g_start", "alpha_g_end", "alpha_p_start", "alpha_p_end",
    "exploration_attempts",
)


def require_params(p: SwarmParams) -> None:
    missing = [k for k, v in vars(p).items() if k in REQUIRED_FIELDS and v is None]
    if missing:
        raise InvalidConfigurationError(f"SwarmParams missing required fields: {missing}")


def params_from_preset(name: str = "FAST", **overrides) -> SwarmParams:
    """Build fully-specified params from a named preset plus explicit overrides.

    Overrides set to `None` are ignored, so argparse namespaces can be passed
    straight through.
    """
    from .algorithm.constants import PRESETS

    key = name.upper()
    if key not in PRESETS:
        valid = ", ".join(sorted(PRESETS))
        raise InvalidConfigurationError(f"Unknown preset '{name}'. Choose from: {valid}.")

    known = {f.name for f in fields(SwarmParams)}
    unknown = set(overrides) - known
    if unknown:
        raise InvalidConfigurationError(f"Unknown SwarmParams fields: {sorted(unknown)}")

    base = SwarmParams(**PRESETS[key])
    return replace(base, **{k: v for k, v in overrides.items() if v is not None})


def validate_problem(graph, k: int, params: SwarmParams) -> None:
    """Reject configurations that would leave the swarm undefined."""
    require_params(params)

    n = graph.num_vertices
    if n == 0:
        raise InvalidConfigurationError("graph is empty.")
    if not isinstance(k, numbers.Integral) or isinstance(k, bool) or k <= 0:
        raise InvalidConfigurationError(f"k must be a positive int, got {k!r}.")
    if k > n:
        raise InvalidConfigurationError(f"k={k} exceeds the number of vertices n={n}.")
    if params.swarm_size <= 0:
        raise InvalidConfigurationError("swarm_size must be > 0.")
    if params.iters < 0:
        raise InvalidConfigurationError("iters must be >= 0.")
    if params.exploration_attempts <= 0:
        raise InvalidConfigurationError("exploration_attempts must be > 0.")
    if params.stagnation_limit is not None and params.stagnation_limit <= 0:
        raise InvalidConfigurationError("stagnation_limit must be > 0 when set.")
    if params.dense_threshold is not None and params.dense_threshold < 0:
        raise InvalidConfigurationError("dense_threshold must be >= 0.")

    # Linear schedules: checking both endpoints covers every t in between.
    for label, ag, ap in (("start", params.alpha_g_start, params.alpha_p_start),
                          ("end", params.alpha_g_end, params.alpha_p_end)):
        if ag < 0 or ap < 0:
            raise InvalidConfigurationError(f"alpha values must be >= 0 (at {label}).")
        if ag + ap >= 1.0:
            raise InvalidConfigurationError(
                f"alpha_g + alpha_p must be < 1 so exploration stays possible (at {label}: {ag} + {ap})."
            )
