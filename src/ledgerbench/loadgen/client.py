from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass
from random import Random
from typing import Protocol

from ledgerbench.config import NetworkKind, SuiteConfig
from ledgerbench.networks import LatencyBreakdown, LatencyModel, model_for
from ledgerbench.sampling import elapsed_ms, now_ms


@dataclass(frozen=True, slots=True)
class OperationResult:
    tx_id: str
    latency_ms: float
    success: bool
    breakdown: LatencyBreakdown | None = None
    cpu_time_ms: float | None = None
    gas_used: float | None = None


class LedgerClient(Protocol):
    """Anything that can submit one operation and report how long it took to settle."""

    network: NetworkKind

    async def submit(self, rng: Random, op_index: int) -> OperationResult:
        ...


@dataclass(frozen=True, slots=True)
class SimulatedLedgerClient:
    network: NetworkKind
    model: LatencyModel
    gas_used: float = 0.0

    async def submit(self, rng: Random, op_index: int) -> OperationResult:
        start = now_ms()
        cpu_start = time.process_time()
        tx_id = hashlib.sha256(rng.randbytes(32)).hexdigest()
        breakdown = await self.model.simulate(rng)
        return OperationResult(
            tx_id=tx_id,
            latency_ms=elapsed_ms(start),
            success=True,
            breakdown=breakdown,
            cpu_time_ms=(time.process_time() - cpu_start) * 1000.0,
            gas_used=self.gas_used,
        )


def simulated_client(network: NetworkKind, config: SuiteConfig | None = None) -> SimulatedLedgerClient:
    config = config or SuiteConfig()
    gas_used = float(config.account_chain.gas_used) if network is NetworkKind.ACCOUNT_CHAIN else 0.0
    return SimulatedLedgerClient(network=network, model=model_for(network, config), gas_used=gas_used)


def simulated_clients(config: SuiteConfig) -> dict[NetworkKind, LedgerClient]:
    return {network: simulated_client(network, config) for network in config.networks}
