"""Latency distributions used by the network models.

Every function draws from an explicit ``random.Random`` handle and keeps no
state of its own, so seeding the handle fixes the whole draw sequence.
"""
from __future__ import annotations

import math
from random import Random

# Inverse CDF of the standard normal at 0.95.
Z95 = 1.6448536269514722

TRUNCATED_NORMAL_ATTEMPTS = 10


def standard_normal(rng: Random) -> float:
    """Box-Muller draw. ``1 - u`` keeps the log argument in (0, 1]."""
    u = 1.0 - rng.random()
    v = 1.0 - rng.random()
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


def log_normal(rng: Random, median_ms: float, p95_ms: float) -> float:
    """Log-normal parameterised by its median and 95th percentile, floored at 1 ms."""
    mu = math.log(median_ms)
    sigma = (math.log(p95_ms) - mu) / Z95
    value = math.exp(mu + sigma * standard_normal(rng))
    return max(1.0, value)


def truncated_normal(
    rng: Random,
    mean: float,
    sd: float,
    min_value: float = 0.0,
    max_value: float = math.inf,
) -> float:
    for _ in range(TRUNCATED_NORMAL_ATTEMPTS):
        x = mean + sd * standard_normal(rng)
        if min_value <= x <= max_value:
            return x
    return min(max_value, max(min_value, mean))


def geometric_blocks(rng: Random, p: float) -> int:
    """Number of blocks until inclusion, counting from 1."""
    k = 1
    while rng.random() > p:
        k += 1
    return k


def gamma(rng: Random, shape: float, scale: float) -> float:
    """Marsaglia-Tsang gamma sampler."""
    if shape < 1:
        u = rng.random()
        return gamma(rng, shape + 1, scale) * u ** (1.0 / shape)

    d = shape - 1.0 / 3.0
    c = 1.0 / math.sqrt(9.0 * d)
    while True:
        x = standard_normal(rng)
        v = 1.0 + c * x
        if v <= 0:
            continue
        v = v * v * v
        u = rng.random()
        if u < 1.0 - 0.331 * x**4:
            return d * v * scale
        # log(0) is -inf, which always accepts
        if u == 0 or math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
            return d * v * scale


def maybe_spike(
    rng: Random,
    ms: float,
    spike_prob: float = 0.02,
    spike_min: float = 300.0,
    spike_max: float = 1200.0,
) -> float:
    """Occasionally add an incident delay drawn uniformly from [spike_min, spike_max]."""
    if rng.random() < spike_prob:
        return ms + (spike_min + rng.random() * (spike_max - spike_min))
    return ms
