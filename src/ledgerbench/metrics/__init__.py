from __future__ import annotations

from ledgerbench.metrics.accumulator import MetricsAccumulator, distribution_stats
from ledgerbench.metrics.aggregator import AggregatedStats, aggregate, summary_statistic
from ledgerbench.metrics.models import (
    DistributionStats,
    MetricsBag,
    MetricSeries,
    SampleRecord,
    ScenarioKey,
    Summary,
    SummaryStatistic,
)

__all__ = [
    "AggregatedStats",
    "DistributionStats",
    "MetricSeries",
    "MetricsAccumulator",
    "MetricsBag",
    "SampleRecord",
    "ScenarioKey",
    "Summary",
    "SummaryStatistic",
    "aggregate",
    "distribution_stats",
    "summary_statistic",
]
