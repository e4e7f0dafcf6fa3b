from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ledgerbench.metrics.models import MetricsBag, SummaryStatistic

Z95 = 1.96

AggregatedStats = dict[str, dict[str, dict[str, SummaryStatistic]]]


def summary_statistic(values: Sequence[float]) -> SummaryStatistic:
    """Mean, unbiased variance and a normal-approximation 95% interval."""
    samples = np.asarray(values, dtype=float)
    n = len(samples)
    if n == 0:
        msg = "cannot summarize an empty sample"
        raise ValueError(msg)
    mean = float(samples.mean())
    variance = float(samples.var(ddof=1)) if n >= 2 else 0.0
    std = math.sqrt(variance)
    half = Z95 * (std / math.sqrt(n))
    return SummaryStatistic(
        n=n,
        mean=mean,
        variance=variance,
        std=std,
        ci95=(mean - half, mean + half),
    )


def aggregate(bag: MetricsBag) -> AggregatedStats:
    """Reduce every bag entry to ``{section: {scope: {metric: SummaryStatistic}}}``."""
    stats: AggregatedStats = {}
    for key, metric, values in bag.items():
        if not values:
            continue
        scope_stats = stats.setdefault(key.section, {}).setdefault(key.scope, {})
        scope_stats[metric] = summary_statistic(values)
    return stats
