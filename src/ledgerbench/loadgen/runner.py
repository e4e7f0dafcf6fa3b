from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from random import Random
from typing import Mapping, Sequence

from ledgerbench.config import NetworkKind, ScenarioKind, SuiteConfig
from ledgerbench.loadgen.client import LedgerClient
from ledgerbench.metrics import MetricsAccumulator, SampleRecord, ScenarioKey, Summary
from ledgerbench.networks import LatencyBreakdown
from ledgerbench.sampling import now_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScenarioResult:
    key: ScenarioKey
    summary: Summary
    tps: float
    total_time_s: float
    breakdowns: list[LatencyBreakdown] = field(default_factory=list)
    records: list[SampleRecord] = field(default_factory=list)

    @property
    def avg_latency(self) -> float | None:
        return self.summary.latency.mean if self.summary.latency else None

    @property
    def p95_latency(self) -> float | None:
        return self.summary.latency.p95 if self.summary.latency else None


@dataclass(frozen=True, slots=True)
class SuiteResult:
    latency: list[ScenarioResult]
    throughput: list[ScenarioResult]
    scalability: list[ScenarioResult]

    def all(self) -> list[ScenarioResult]:
        return [*self.latency, *self.throughput, *self.scalability]


async def run_scenario(
    client: LedgerClient,
    rng: Random,
    key: ScenarioKey,
    operations: int,
) -> ScenarioResult:
    """Launch ``operations`` concurrent submissions and wait for all of them."""
    accumulator = MetricsAccumulator()
    breakdowns: list[LatencyBreakdown] = []
    started = now_ms()
    tasks = [
        asyncio.create_task(_submit_one(client, rng, i, accumulator, breakdowns))
        for i in range(operations)
    ]
    if tasks:
        await asyncio.gather(*tasks)
    total_time_s = (now_ms() - started) / 1000.0
    summary = accumulator.summarize()
    tps = summary.total_operations / total_time_s if total_time_s > 0 else 0.0
    logger.info(
        "%s %s: ops=%d failed=%d success=%.2f%% avg_latency=%s tps=%.2f",
        key.section,
        key.scope,
        summary.total_operations,
        sum(1 for record in accumulator.records if not record.success),
        summary.success_rate,
        f"{summary.latency.mean:.2f}ms" if summary.latency else "n/a",
        tps,
    )
    return ScenarioResult(
        key=key,
        summary=summary,
        tps=tps,
        total_time_s=total_time_s,
        breakdowns=breakdowns,
        records=accumulator.records,
    )


async def _submit_one(
    client: LedgerClient,
    rng: Random,
    op_index: int,
    accumulator: MetricsAccumulator,
    breakdowns: list[LatencyBreakdown],
) -> None:
    try:
        result = await client.submit(rng, op_index)
    except Exception as exc:
        logger.debug("%s operation %d failed: %s", client.network.value, op_index, exc)
        accumulator.record(SampleRecord(timestamp_ms=now_ms(), success=False, error=str(exc)))
        return
    if result.breakdown is not None:
        breakdowns.append(result.breakdown)
    accumulator.record(
        SampleRecord(
            timestamp_ms=now_ms(),
            success=result.success,
            latency_ms=result.latency_ms,
            cpu_time_ms=result.cpu_time_ms,
            gas_used=result.gas_used,
            tx_id=result.tx_id,
        )
    )


async def run_latency(
    clients: Mapping[NetworkKind, LedgerClient], rng: Random, iterations: int
) -> list[ScenarioResult]:
    results: list[ScenarioResult] = []
    for network, client in clients.items():
        key = ScenarioKey(network, ScenarioKind.LATENCY)
        results.append(await run_scenario(client, rng, key, iterations))
    return results


async def run_throughput(
    clients: Mapping[NetworkKind, LedgerClient], rng: Random, batch_size: int
) -> list[ScenarioResult]:
    results: list[ScenarioResult] = []
    for network, client in clients.items():
        key = ScenarioKey(network, ScenarioKind.THROUGHPUT)
        results.append(await run_scenario(client, rng, key, batch_size))
    return results


async def run_scalability(
    clients: Mapping[NetworkKind, LedgerClient], rng: Random, batch_sizes: Sequence[int]
) -> list[ScenarioResult]:
    results: list[ScenarioResult] = []
    for network, client in clients.items():
        for batch_size in batch_sizes:
            key = ScenarioKey(network, ScenarioKind.SCALABILITY, batch_size)
            results.append(await run_scenario(client, rng, key, batch_size))
    return results


async def run_suite(
    clients: Mapping[NetworkKind, LedgerClient],
    rng: Random,
    config: SuiteConfig,
) -> SuiteResult:
    """One full workload: latency, throughput, then scalability, strictly in sequence."""
    latency = await run_latency(clients, rng, config.iterations)
    throughput = await run_throughput(clients, rng, config.batch_size)
    scalability = await run_scalability(clients, rng, config.batch_sizes)
    return SuiteResult(latency=latency, throughput=throughput, scalability=scalability)
