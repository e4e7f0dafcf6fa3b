from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from ledgerbench.metrics import AggregatedStats

SUMMARY_COLUMNS = [
    "section",
    "scope",
    "metric",
    "n",
    "mean",
    "variance",
    "std",
    "ci95_lower",
    "ci95_upper",
]


@dataclass(frozen=True, slots=True)
class Comparison:
    metric: str
    baseline_mean: float
    candidate_mean: float
    delta_pct: float | None
    overlapping: bool


def summary_frame(stats: AggregatedStats) -> pd.DataFrame:
    rows = [
        {
            "section": section,
            "scope": scope,
            "metric": metric,
            "n": stat.n,
            "mean": stat.mean,
            "variance": stat.variance,
            "std": stat.std,
            "ci95_lower": stat.ci95[0],
            "ci95_upper": stat.ci95[1],
        }
        for section, scopes in stats.items()
        for scope, metrics in scopes.items()
        for metric, stat in metrics.items()
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def compare_networks(
    stats: AggregatedStats,
    section: str,
    baseline: str,
    candidate: str,
) -> list[Comparison]:
    """Compare two scopes of one section metric by metric.

    ``overlapping`` is False when the two 95% intervals are disjoint.
    """
    comparisons: list[Comparison] = []
    frame = summary_frame(stats)
    if frame.empty:
        return comparisons
    frame = frame[frame["section"] == section]
    base = frame[frame["scope"] == baseline]
    cand = frame[frame["scope"] == candidate]
    merged = base.merge(cand, on="metric", suffixes=("_base", "_cand"))
    for row in merged.itertuples(index=False):
        base_mean = float(row.mean_base)
        cand_mean = float(row.mean_cand)
        delta = (cand_mean - base_mean) / base_mean * 100 if base_mean != 0 else None
        overlapping = row.ci95_lower_base <= row.ci95_upper_cand and row.ci95_lower_cand <= row.ci95_upper_base
        comparisons.append(
            Comparison(
                metric=row.metric,
                baseline_mean=base_mean,
                candidate_mean=cand_mean,
                delta_pct=delta,
                overlapping=bool(overlapping),
            )
        )
    return comparisons
