from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from ledgerbench.config import ClockMode, NetworkKind, SuiteConfig, parse_batch_sizes
from ledgerbench.errors import ConfigError, ReplicationError
from ledgerbench.logs import configure_logging
from ledgerbench.metrics import AggregatedStats
from ledgerbench.replication import ReplicatedResult, run_replicated_suite
from ledgerbench.sampling import run_with_clock
from ledgerbench.storage import Storage, default_storage

logger = logging.getLogger(__name__)

UNITS = {"avgLatency": " ms", "p95Latency": " ms", "successRate": " %", "tps": " TPS"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Replicated DLT confirmation benchmark (simulated)")
    parser.add_argument("--replications", type=int, default=None)
    parser.add_argument("--seed-start", type=int, default=None)
    parser.add_argument("--iterations", type=int, default=None)
    parser.add_argument("--batch-size", type=int, default=None)
    parser.add_argument("--batch-sizes", type=parse_batch_sizes, default=None, help="e.g. 10,100,1000")
    parser.add_argument(
        "--network",
        action="append",
        choices=[n.value for n in NetworkKind],
        help="Network to benchmark (repeatable, default: all)",
    )
    parser.add_argument("--clock", choices=[c.value for c in ClockMode], default=ClockMode.VIRTUAL.value)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-dir", type=Path, default=None)
    parser.add_argument("--db", type=Path, default=None, help="DuckDB file for results")
    parser.add_argument("--no-store", action="store_true")
    parser.add_argument("--notes", default="")
    return parser


def build_config(args: argparse.Namespace) -> SuiteConfig:
    networks = tuple(NetworkKind(n) for n in args.network) if args.network else None
    return SuiteConfig.from_env(
        os.environ,
        replications=args.replications,
        seed_start=args.seed_start,
        iterations=args.iterations,
        batch_size=args.batch_size,
        batch_sizes=args.batch_sizes,
        networks=networks,
        clock=ClockMode(args.clock),
        notes=args.notes,
    )


def format_stats(stats: AggregatedStats) -> list[str]:
    lines: list[str] = []
    for section, scopes in stats.items():
        lines.append(f"\n{section.upper()} (CI95 normal)")
        lines.append("-" * 70)
        for scope, metrics in scopes.items():
            lines.append(f"  > {scope}")
            for metric, s in metrics.items():
                unit = UNITS.get(metric, "")
                lo, hi = s.ci95
                lines.append(
                    f"    - {metric}: mean={s.mean:.2f}{unit}, var={s.variance:.2f}, "
                    f"CI95=[{lo:.2f}, {hi:.2f}]{unit} (n={s.n})"
                )
    return lines


def _store(storage: Storage, config: SuiteConfig, result: ReplicatedResult) -> None:
    storage.save_run(config, result)
    logger.info("Stored run %s in %s", result.run_id, storage.db_path)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level.upper(), args.log_dir)
    try:
        config = build_config(args)
        config.validate()
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    storage = None
    if not args.no_store:
        storage = Storage(args.db) if args.db else default_storage()

    try:
        result = run_with_clock(run_replicated_suite(config), config.clock)
    except ReplicationError as exc:
        logger.error("Replicated suite failed at seed %d: %r", exc.seed, exc.cause)
        if storage is not None and exc.partial is not None and exc.partial.completed:
            _store(storage, config, exc.partial)
        return 1

    for line in format_stats(result.stats):
        print(line)
    if storage is not None:
        _store(storage, config, result)
    print(f"Run complete: {result.run_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
