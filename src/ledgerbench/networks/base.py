from __future__ import annotations

from dataclasses import dataclass
from random import Random
from typing import Mapping, Protocol

from ledgerbench.config import NetworkKind


@dataclass(frozen=True, slots=True)
class LatencyBreakdown:
    """Per-phase delays (rounded ms) of one simulated confirmation plus total elapsed ms."""

    network: NetworkKind
    phases: Mapping[str, float]
    total_ms: float
    blocks_to_inclusion: int | None = None

    def phase_sum_ms(self) -> float:
        return float(sum(self.phases.values()))


class LatencyModel(Protocol):
    network: NetworkKind

    async def simulate(self, rng: Random) -> LatencyBreakdown:
        ...
