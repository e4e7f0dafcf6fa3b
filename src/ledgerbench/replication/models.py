from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ledgerbench.metrics import AggregatedStats, MetricsBag


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ReplicatedResult:
    run_id: str
    requested: int
    seeds: list[int]
    bag: MetricsBag
    stats: AggregatedStats = field(default_factory=dict)

    @property
    def completed(self) -> int:
        return len(self.seeds)

    @property
    def complete(self) -> bool:
        return self.completed == self.requested
