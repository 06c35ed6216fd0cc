"""Presets and constants for the discrete PSO k-MST solver."""


# ============= MST Oracle =============
# DENSE_PRIM_THRESHOLD: subsets smaller than this use the O(k^2) scan Prim,
#        larger ones the binary-heap Prim. Same totals, different constants.
DENSE_PRIM_THRESHOLD = 64


# ============= Transition =============
# EXPLORATION_ATTEMPTS: random draws used to build the exploration pool C.
#        Keeps each transition O(attempts) instead of O(n).
EXPLORATION_ATTEMPTS = 32

# Alpha schedule endpoints: global influence grows (exploration -> exploitation),
# personal influence shrinks. alpha_g + alpha_p < 1 keeps C reachable.
ALPHA_G_START = 0.2
ALPHA_G_END = 0.6
ALPHA_P_START = 0.4
ALPHA_P_END = 0.3


# ============= Reporting =============
LOG_EVERY = 10


# ============= Presets =============

# Quick smoke test: tiny swarm, short run, no stagnation stop.
QUICK_TEST = {
    'swarm_size': 8,
    'iters': 50,
    'alpha_g_start': ALPHA_G_START,
    'alpha_g_end': ALPHA_G_END,
    'alpha_p_start': ALPHA_P_START,
    'alpha_p_end': ALPHA_P_END,
    'exploration_attempts': 16,
}

# Default preset: moderate swarm, default schedule.
FAST = {
    'swarm_size': 30,
    'iters': 300,
    'alpha_g_start': ALPHA_G_START,
    'alpha_g_end': ALPHA_G_END,
    'alpha_p_start': ALPHA_P_START,
    'alpha_p_end': ALPHA_P_END,
    'exploration_attempts': EXPLORATION_ATTEMPTS,
}

# Balanced exploration: larger swarm, stops after a long plateau.
BALANCED = {
    'swarm_size': 50,
    'iters': 1000,
    'alpha_g_start': ALPHA_G_START,
    'alpha_g_end': 0.55,
    'alpha_p_start': ALPHA_P_START,
    'alpha_p_end': ALPHA_P_END,
    'exploration_attempts': EXPLORATION_ATTEMPTS,
    'stagnation_limit': 300,
}

# Intensive search: deep run, stronger pull towards the global best late on.
INTENSIVE = {
    'swarm_size': 80,
    'iters': 3000,
    'alpha_g_start': ALPHA_G_START,
    'alpha_g_end': 0.65,
    'alpha_p_start': ALPHA_P_START,
    'alpha_p_end': 0.25,
    'exploration_attempts': 2 * EXPLORATION_ATTEMPTS,
    'stagnation_limit': 800,
}


# Preset lookup helper for convenience in runners / scripts.
PRESETS = {
    'QUICK_TEST': QUICK_TEST,
    'FAST': FAST,
    'BALANCED': BALANCED,
    'INTENSIVE': INTENSIVE,
}
