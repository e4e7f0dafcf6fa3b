from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import duckdb
import pandas as pd

from ledgerbench.config import SuiteConfig
from ledgerbench.replication import ReplicatedResult


@dataclass(slots=True)
class Storage:
    db_path: Path

    def __post_init__(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> duckdb.DuckDBPyConnection:
        return duckdb.connect(str(self.db_path))

    def _init_schema(self) -> None:
        with self._connect() as con:
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS run_meta (
                    run_id TEXT PRIMARY KEY,
                    created_at TIMESTAMP,
                    config_json TEXT,
                    notes TEXT
                );
                """
            )
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS replication_samples (
                    run_id TEXT,
                    section TEXT,
                    scope TEXT,
                    metric TEXT,
                    replication INTEGER,
                    seed INTEGER,
                    value DOUBLE
                );
                """
            )
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS summary_stats (
                    run_id TEXT,
                    section TEXT,
                    scope TEXT,
                    metric TEXT,
                    n INTEGER,
                    mean DOUBLE,
                    variance DOUBLE,
                    std DOUBLE,
                    ci95_lower DOUBLE,
                    ci95_upper DOUBLE
                );
                """
            )

    def run_exists(self, run_id: str) -> bool:
        with self._connect() as con:
            result = con.execute(
                "SELECT COUNT(*) FROM run_meta WHERE run_id = ?",
                [run_id],
            ).fetchone()
            return bool(result and result[0] > 0)

    def save_run(self, config: SuiteConfig, result: ReplicatedResult) -> None:
        run_id = result.run_id
        if self.run_exists(run_id):
            msg = f"Run {run_id} already exists"
            raise ValueError(msg)
        meta = dict(config.to_metadata())
        meta["run_id"] = run_id
        meta["completed_seeds"] = list(result.seeds)
        with self._connect() as con:
            con.execute(
                "INSERT INTO run_meta VALUES (?, ?, ?, ?)",
                [run_id, config.created_at, json.dumps(meta), config.notes],
            )
            samples_df = pd.DataFrame(
                [
                    {
                        "run_id": run_id,
                        "section": key.section,
                        "scope": key.scope,
                        "metric": metric,
                        "replication": replication,
                        "seed": seed,
                        "value": value,
                    }
                    for key in result.bag.keys()
                    for metric in result.bag.metrics(key)
                    for replication, (seed, value) in enumerate(
                        zip(result.bag.seeds(key, metric), result.bag.values(key, metric))
                    )
                ]
            )
            if not samples_df.empty:
                con.execute("INSERT INTO replication_samples SELECT * FROM samples_df")
            stats_df = pd.DataFrame(
                [
                    {
                        "run_id": run_id,
                        "section": section,
                        "scope": scope,
                        "metric": metric,
                        "n": stat.n,
                        "mean": stat.mean,
                        "variance": stat.variance,
                        "std": stat.std,
                        "ci95_lower": stat.ci95[0],
                        "ci95_upper": stat.ci95[1],
                    }
                    for section, scopes in result.stats.items()
                    for scope, metrics in scopes.items()
                    for metric, stat in metrics.items()
                ]
            )
            if not stats_df.empty:
                con.execute("INSERT INTO summary_stats SELECT * FROM stats_df")

    def list_runs(self) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT run_id, created_at, notes FROM run_meta ORDER BY created_at DESC"
            ).fetchdf()

    def load_run_meta(self, run_id: str) -> dict[str, object] | None:
        with self._connect() as con:
            row = con.execute(
                "SELECT config_json FROM run_meta WHERE run_id = ?",
                [run_id],
            ).fetchone()
            if not row:
                return None
            return json.loads(row[0])

    def load_samples(self, run_id: str) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT * FROM replication_samples WHERE run_id = ? "
                "ORDER BY section, scope, metric, replication",
                [run_id],
            ).fetchdf()

    def load_summary(self, run_id: str) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT * FROM summary_stats WHERE run_id = ? ORDER BY section, scope, metric",
                [run_id],
            ).fetchdf()
