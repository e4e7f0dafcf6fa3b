from __future__ import annotations

from pathlib import Path

import pytest

from ledgerbench.config import SuiteConfig
from ledgerbench.replication import run_replicated_suite
from ledgerbench.sampling import run_in_virtual_time
from ledgerbench.storage import Storage


def test_save_and_load_run(tmp_path: Path) -> None:
    config = SuiteConfig(replications=2, iterations=3, batch_size=4, batch_sizes=(2,), run_id="run-1")
    result = run_in_virtual_time(run_replicated_suite(config))
    storage = Storage(tmp_path / "bench.duckdb")
    assert not storage.run_exists("run-1")

    storage.save_run(config, result)

    assert storage.run_exists("run-1")
    meta = storage.load_run_meta("run-1")
    assert meta is not None
    assert meta["completed_seeds"] == [1, 2]
    summary = storage.load_summary("run-1")
    expected_rows = sum(len(metrics) for scopes in result.stats.values() for metrics in scopes.values())
    assert len(summary) == expected_rows
    assert set(summary["section"]) == {"latency", "throughput", "scalability"}
    samples = storage.load_samples("run-1")
    assert len(samples) == expected_rows * 2
    assert set(samples["seed"]) == {1, 2}
    assert list(storage.list_runs()["run_id"]) == ["run-1"]


def test_duplicate_run_is_rejected(tmp_path: Path) -> None:
    config = SuiteConfig(replications=1, iterations=1, batch_size=1, batch_sizes=(1,), run_id="dup")
    result = run_in_virtual_time(run_replicated_suite(config))
    storage = Storage(tmp_path / "bench.duckdb")
    storage.save_run(config, result)
    with pytest.raises(ValueError, match="already exists"):
        storage.save_run(config, result)


def test_missing_run_meta(tmp_path: Path) -> None:
    assert Storage(tmp_path / "bench.duckdb").load_run_meta("nope") is None
