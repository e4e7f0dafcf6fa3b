from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from ledgerbench.metrics.models import DistributionStats, SampleRecord, Summary


def distribution_stats(values: Iterable[float]) -> DistributionStats | None:
    """Order statistics over ``values``; percentiles pick ``sorted[floor(n * q)]``."""
    ordered = np.sort(np.asarray(list(values), dtype=float))
    n = len(ordered)
    if n == 0:
        return None
    return DistributionStats(
        min=float(ordered[0]),
        max=float(ordered[-1]),
        mean=float(ordered.sum() / n),
        median=float(ordered[n // 2]),
        p95=float(ordered[math.floor(n * 0.95)]),
        p99=float(ordered[math.floor(n * 0.99)]),
        count=n,
    )


@dataclass(slots=True)
class MetricsAccumulator:
    _records: list[SampleRecord] = field(default_factory=list)

    def record(self, sample: SampleRecord) -> None:
        self._records.append(sample)

    @property
    def records(self) -> list[SampleRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def success_rate(self) -> float:
        total = len(self._records)
        if total == 0:
            return 0.0
        successful = sum(1 for r in self._records if r.success)
        return successful / total * 100.0

    def throughput(self) -> float:
        if len(self._records) < 2:
            return 0.0
        elapsed_sec = (self._records[-1].timestamp_ms - self._records[0].timestamp_ms) / 1000.0
        if elapsed_sec <= 0:
            return 0.0
        return len(self._records) / elapsed_sec

    def summarize(self) -> Summary:
        return Summary(
            total_operations=len(self._records),
            success_rate=self.success_rate(),
            latency=distribution_stats(r.latency_ms for r in self._records if r.latency_ms is not None),
            throughput=self.throughput(),
            gas=distribution_stats(r.gas_used for r in self._records if r.gas_used is not None),
            cpu=distribution_stats(r.cpu_time_ms for r in self._records if r.cpu_time_ms is not None),
        )
