from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from ledgerbench.cli import main
from ledgerbench.storage import Storage

ENV_VARS = ("BENCH_REPLICATIONS", "BENCH_SEED_START", "TEST_ITERATIONS", "BATCH_SIZE", "BATCH_SIZES")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_cli_runs_and_stores(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    db = tmp_path / "cli.duckdb"
    code = main(
        [
            "--replications", "2",
            "--iterations", "3",
            "--batch-size", "4",
            "--batch-sizes", "2,5",
            "--network", "dag_ledger",
            "--db", str(db),
            "--log-dir", str(tmp_path / "logs"),
        ]
    )
    assert code == 0
    out = capsys.readouterr().out
    assert "LATENCY (CI95 normal)" in out
    assert "dag_ledger:batch_5" in out
    assert "Run complete:" in out
    assert len(Storage(db).list_runs()) == 1
    assert list((tmp_path / "logs").glob("*.log"))


def test_cli_env_defaults(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("BENCH_REPLICATIONS", "1")
    monkeypatch.setenv("TEST_ITERATIONS", "2")
    monkeypatch.setenv("BATCH_SIZE", "2")
    monkeypatch.setenv("BATCH_SIZES", "1")
    assert main(["--no-store"]) == 0
    assert "(n=1)" in capsys.readouterr().out


def test_cli_rejects_invalid_config() -> None:
    assert main(["--replications", "0", "--no-store"]) == 2
