from __future__ import annotations

import logging
import uuid
from random import Random
from typing import Awaitable, Callable, Mapping

from ledgerbench.config import NetworkKind, ScenarioKind, SuiteConfig
from ledgerbench.errors import ReplicationError
from ledgerbench.loadgen.client import LedgerClient, simulated_clients
from ledgerbench.loadgen.runner import ScenarioResult, SuiteResult, run_suite
from ledgerbench.metrics import MetricsBag, aggregate
from ledgerbench.replication.models import ReplicatedResult, RunState
from ledgerbench.sampling import with_seed

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], Awaitable[None]]

SCENARIO_METRICS: dict[ScenarioKind, tuple[str, ...]] = {
    ScenarioKind.LATENCY: ("avgLatency", "p95Latency", "successRate"),
    ScenarioKind.THROUGHPUT: ("tps", "avgLatency", "successRate"),
    ScenarioKind.SCALABILITY: ("tps", "avgLatency", "successRate"),
}


def _new_run_id() -> str:
    return uuid.uuid4().hex


def extract_metric(result: ScenarioResult, metric: str) -> float | None:
    if metric == "avgLatency":
        return result.avg_latency
    if metric == "p95Latency":
        return result.p95_latency
    if metric == "successRate":
        return result.summary.success_rate
    if metric == "tps":
        return result.tps
    msg = f"Unknown metric: {metric}"
    raise ValueError(msg)


def collect(bag: MetricsBag, suite: SuiteResult, seed: int) -> None:
    for result in suite.all():
        for metric in SCENARIO_METRICS[result.key.kind]:
            bag.push(result.key, metric, extract_metric(result, metric), seed)


class ReplicationOrchestrator:
    """Runs ``config.replications`` independently seeded suites, one after another."""

    def __init__(
        self,
        config: SuiteConfig,
        clients: Mapping[NetworkKind, LedgerClient] | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        config.validate()
        self.config = config
        self.clients = dict(clients) if clients is not None else simulated_clients(config)
        self.progress = progress
        self.state = RunState.IDLE
        self.current: int | None = None

    async def run(self) -> ReplicatedResult:
        run_id = self.config.run_id or _new_run_id()
        bag = MetricsBag()
        completed: list[int] = []
        seeds = self.config.seeds()
        total = len(seeds)
        logger.info("Running replicated suite: %d seeds (start=%d)", total, self.config.seed_start)
        for index, seed in enumerate(seeds):
            self.state = RunState.RUNNING
            self.current = index
            logger.info("Replication %d/%d (seed=%d)", index + 1, total, seed)
            try:
                suite = await with_seed(seed, self._replicate)
            except Exception as exc:
                self.state = RunState.FAILED
                logger.error("Replication %d/%d (seed=%d) failed: %s", index + 1, total, seed, exc)
                partial = ReplicatedResult(run_id, total, completed, bag, aggregate(bag))
                raise ReplicationError(index, seed, exc, partial) from exc
            collect(bag, suite, seed)
            completed.append(seed)
            if self.progress:
                await self.progress(index + 1, total)
        self.state = RunState.AGGREGATING
        stats = aggregate(bag)
        self.state = RunState.DONE
        self.current = None
        return ReplicatedResult(run_id, total, completed, bag, stats)

    async def _replicate(self, rng: Random) -> SuiteResult:
        return await run_suite(self.clients, rng, self.config)


async def run_replicated_suite(
    config: SuiteConfig,
    clients: Mapping[NetworkKind, LedgerClient] | None = None,
    progress: ProgressCallback | None = None,
) -> ReplicatedResult:
    return await ReplicationOrchestrator(config, clients, progress).run()
