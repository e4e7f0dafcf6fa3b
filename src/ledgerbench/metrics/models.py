from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator

from ledgerbench.config import NetworkKind, ScenarioKind


@dataclass(frozen=True, slots=True)
class SampleRecord:
    """Outcome of one simulated operation. ``None`` fields were not reported."""

    timestamp_ms: float
    success: bool
    latency_ms: float | None = None
    cpu_time_ms: float | None = None
    gas_used: float | None = None
    tx_id: str | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class DistributionStats:
    min: float
    max: float
    mean: float
    median: float
    p95: float
    p99: float
    count: int


@dataclass(frozen=True, slots=True)
class Summary:
    total_operations: int
    success_rate: float
    latency: DistributionStats | None
    throughput: float
    gas: DistributionStats | None
    cpu: DistributionStats | None


@dataclass(frozen=True, slots=True)
class SummaryStatistic:
    n: int
    mean: float
    variance: float
    std: float
    ci95: tuple[float, float]


@dataclass(frozen=True, slots=True)
class ScenarioKey:
    network: NetworkKind
    kind: ScenarioKind
    batch_size: int | None = None

    @property
    def section(self) -> str:
        return self.kind.value

    @property
    def scope(self) -> str:
        if self.batch_size is None:
            return self.network.value
        return f"{self.network.value}:batch_{self.batch_size}"


@dataclass(slots=True)
class MetricSeries:
    values: list[float] = field(default_factory=list)
    seeds: list[int] = field(default_factory=list)


@dataclass(slots=True)
class MetricsBag:
    """Per-replication metric values keyed by scenario, appended in replication order."""

    _series: dict[ScenarioKey, dict[str, MetricSeries]] = field(default_factory=dict)

    def push(self, key: ScenarioKey, metric: str, value: float | None, seed: int) -> bool:
        if value is None or math.isnan(value):
            return False
        series = self._series.setdefault(key, {}).setdefault(metric, MetricSeries())
        series.values.append(float(value))
        series.seeds.append(seed)
        return True

    def values(self, key: ScenarioKey, metric: str) -> list[float]:
        series = self._series.get(key, {}).get(metric)
        return list(series.values) if series else []

    def seeds(self, key: ScenarioKey, metric: str) -> list[int]:
        series = self._series.get(key, {}).get(metric)
        return list(series.seeds) if series else []

    def keys(self) -> list[ScenarioKey]:
        return list(self._series)

    def metrics(self, key: ScenarioKey) -> list[str]:
        return list(self._series.get(key, {}))

    def items(self) -> Iterator[tuple[ScenarioKey, str, list[float]]]:
        for key, by_metric in self._series.items():
            for metric, series in by_metric.items():
                yield key, metric, list(series.values)
