from __future__ import annotations

import logging
from random import Random

import pytest

from ledgerbench.config import (
    AccountChainParams,
    ClockMode,
    DagLedgerParams,
    NetworkKind,
    ScenarioKind,
    SuiteConfig,
)
from ledgerbench.errors import ConfigError, OperationError, ReplicationError
from ledgerbench.loadgen.client import OperationResult, simulated_clients
from ledgerbench.loadgen.runner import SuiteResult, run_suite
from ledgerbench.metrics import ScenarioKey
from ledgerbench.replication import ReplicationOrchestrator, RunState, run_replicated_suite
from ledgerbench.sampling import run_in_virtual_time, run_with_clock, with_seed
from ledgerbench.sampling.seeding import active_source


def _small_config(**overrides: object) -> SuiteConfig:
    values: dict[str, object] = {
        "replications": 5,
        "iterations": 10,
        "seed_start": 1,
        "batch_size": 20,
        "batch_sizes": (10, 100),
    }
    values.update(overrides)
    return SuiteConfig(**values)  # type: ignore[arg-type]


def test_account_chain_latency_samples_per_replication() -> None:
    result = run_in_virtual_time(run_replicated_suite(_small_config()))
    key = ScenarioKey(NetworkKind.ACCOUNT_CHAIN, ScenarioKind.LATENCY)
    samples = result.bag.values(key, "avgLatency")
    assert len(samples) == 5
    assert all(value >= 24001 for value in samples)
    assert result.seeds == [1, 2, 3, 4, 5]
    assert result.complete
    stat = result.stats["latency"]["account_chain"]["avgLatency"]
    assert stat.n == 5
    assert stat.ci95[0] <= stat.mean <= stat.ci95[1]


def test_scalability_entries_keyed_by_batch_size() -> None:
    config = _small_config(replications=3)
    result = run_in_virtual_time(run_replicated_suite(config))
    for network in config.networks:
        keys = [
            key for key in result.bag.keys()
            if key.network is network and key.kind is ScenarioKind.SCALABILITY
        ]
        assert sorted(key.batch_size for key in keys) == [10, 100]
        for key in keys:
            for metric in ("tps", "avgLatency", "successRate"):
                assert len(result.bag.values(key, metric)) == 3
    assert set(result.stats["scalability"]) == {
        "account_chain:batch_10",
        "account_chain:batch_100",
        "dag_ledger:batch_10",
        "dag_ledger:batch_100",
    }


def test_every_section_reports_its_metrics() -> None:
    result = run_in_virtual_time(run_replicated_suite(_small_config(replications=2)))
    assert set(result.stats["latency"]["dag_ledger"]) == {"avgLatency", "p95Latency", "successRate"}
    assert set(result.stats["throughput"]["account_chain"]) == {"tps", "avgLatency", "successRate"}
    assert result.stats["throughput"]["dag_ledger"]["successRate"].mean == 100.0
    assert result.stats["throughput"]["account_chain"]["tps"].mean > 0


def _sampled_latencies(suite: SuiteResult) -> list[float | None]:
    return [record.latency_ms for result in suite.all() for record in result.records]


def test_same_seed_reproduces_sampled_latencies() -> None:
    config = _small_config()
    clients = simulated_clients(config)

    async def one(seed: int) -> SuiteResult:
        async def body(rng: Random) -> SuiteResult:
            return await run_suite(clients, rng, config)

        return await with_seed(seed, body)

    first = run_in_virtual_time(one(3))
    second = run_in_virtual_time(one(3))
    other = run_in_virtual_time(one(4))
    assert _sampled_latencies(first) == _sampled_latencies(second)
    assert [r.tx_id for res in first.all() for r in res.records] == [
        r.tx_id for res in second.all() for r in res.records
    ]
    assert _sampled_latencies(first) != _sampled_latencies(other)


class _FlakyClient:
    network = NetworkKind.DAG_LEDGER

    async def submit(self, rng: Random, op_index: int) -> OperationResult:
        if op_index % 2:
            raise OperationError(f"operation {op_index} rejected")
        return OperationResult(tx_id=f"tx-{op_index}", latency_ms=50.0, success=True)


def test_failed_operations_are_recorded_not_raised() -> None:
    config = _small_config(replications=2, networks=(NetworkKind.DAG_LEDGER,))
    result = run_in_virtual_time(run_replicated_suite(config, {NetworkKind.DAG_LEDGER: _FlakyClient()}))
    latency = result.stats["latency"]["dag_ledger"]
    assert latency["successRate"].mean == 50.0
    assert latency["avgLatency"].mean == 50.0
    assert result.complete


def test_failed_operations_are_counted_not_logged_one_by_one(caplog: pytest.LogCaptureFixture) -> None:
    config = _small_config(replications=1, networks=(NetworkKind.DAG_LEDGER,))
    with caplog.at_level(logging.INFO, logger="ledgerbench.loadgen.runner"):
        run_in_virtual_time(run_replicated_suite(config, {NetworkKind.DAG_LEDGER: _FlakyClient()}))
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert any("latency dag_ledger: ops=10 failed=5 " in r.getMessage() for r in caplog.records)


class _FailingOrchestrator(ReplicationOrchestrator):
    async def _replicate(self, rng: Random) -> SuiteResult:
        if self.current == 1:
            raise RuntimeError("disk full")
        return await super()._replicate(rng)


def test_replication_failure_reports_seed_and_keeps_partial_results() -> None:
    before = active_source()
    orchestrator = _FailingOrchestrator(_small_config(replications=3, seed_start=10))
    with pytest.raises(ReplicationError) as info:
        run_in_virtual_time(orchestrator.run())
    error = info.value
    assert error.seed == 11
    assert error.index == 1
    assert isinstance(error.cause, RuntimeError)
    assert "seed=11" in str(error)
    assert error.partial is not None
    assert error.partial.seeds == [10]
    assert not error.partial.complete
    assert error.partial.stats["latency"]["account_chain"]["avgLatency"].n == 1
    assert orchestrator.state is RunState.FAILED
    assert active_source() is before


def test_orchestrator_state_and_progress() -> None:
    seen: list[tuple[int, int]] = []

    async def progress(done: int, total: int) -> None:
        seen.append((done, total))

    orchestrator = ReplicationOrchestrator(_small_config(replications=2), progress=progress)
    assert orchestrator.state is RunState.IDLE
    run_in_virtual_time(orchestrator.run())
    assert orchestrator.state is RunState.DONE
    assert seen == [(1, 2), (2, 2)]


def test_invalid_config_is_rejected() -> None:
    with pytest.raises(ConfigError):
        ReplicationOrchestrator(_small_config(replications=0))


def test_never_including_chain_is_rejected_before_running() -> None:
    config = _small_config(account_chain=AccountChainParams(inclusion_prob_per_block=0.0))
    with pytest.raises(ConfigError, match="inclusion_prob_per_block"):
        ReplicationOrchestrator(config)


def test_suite_runs_on_the_wall_clock() -> None:
    config = _small_config(
        replications=2,
        iterations=3,
        batch_size=3,
        batch_sizes=(2,),
        clock=ClockMode.WALL,
        account_chain=AccountChainParams(
            rtt_median_ms=1.0, rtt_p95_ms=2.0, spike_prob=0.0, block_time_ms=1.0
        ),
        dag_ledger=DagLedgerParams(
            gossip_median_ms=1.0,
            gossip_p95_ms=2.0,
            spike_prob=0.0,
            solid_mean_ms=1.0,
            solid_sd_ms=0.5,
            solid_min_ms=0.0,
            solid_max_ms=2.0,
            confirm_shape=1.0,
            confirm_scale_ms=1.0,
        ),
    )
    result = run_with_clock(run_replicated_suite(config), config.clock)
    assert result.complete
    assert result.seeds == [1, 2]
    key = ScenarioKey(NetworkKind.ACCOUNT_CHAIN, ScenarioKind.LATENCY)
    # at least the rtt floor of 1 ms plus one 1 ms block and one confirmation block
    assert all(value >= 3 for value in result.bag.values(key, "avgLatency"))
    assert result.stats["throughput"]["dag_ledger"]["successRate"].mean == 100
