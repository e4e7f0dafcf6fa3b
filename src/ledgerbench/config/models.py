from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from ledgerbench.errors import ConfigError


class NetworkKind(str, Enum):
    ACCOUNT_CHAIN = "account_chain"
    DAG_LEDGER = "dag_ledger"


class ScenarioKind(str, Enum):
    LATENCY = "latency"
    THROUGHPUT = "throughput"
    SCALABILITY = "scalability"


class ClockMode(str, Enum):
    VIRTUAL = "virtual"
    WALL = "wall"


@dataclass(frozen=True, slots=True)
class AccountChainParams:
    rtt_median_ms: float = 90.0
    rtt_p95_ms: float = 250.0
    spike_prob: float = 0.01
    spike_min_ms: float = 400.0
    spike_max_ms: float = 1500.0
    inclusion_prob_per_block: float = 0.8
    block_time_ms: float = 12000.0
    soft_confirm_blocks: int = 1
    gas_used: int = 21000

    def validate(self) -> None:
        _require_positive("account_chain", rtt_median_ms=self.rtt_median_ms, rtt_p95_ms=self.rtt_p95_ms)
        _require_spike("account_chain", self.spike_prob, self.spike_min_ms, self.spike_max_ms)
        if not 0 < self.inclusion_prob_per_block <= 1:
            msg = f"account_chain.inclusion_prob_per_block must be in (0, 1], got {self.inclusion_prob_per_block}"
            raise ConfigError(msg)
        if self.block_time_ms < 0:
            msg = f"account_chain.block_time_ms must be >= 0, got {self.block_time_ms}"
            raise ConfigError(msg)
        if self.soft_confirm_blocks < 0:
            msg = f"account_chain.soft_confirm_blocks must be >= 0, got {self.soft_confirm_blocks}"
            raise ConfigError(msg)


@dataclass(frozen=True, slots=True)
class DagLedgerParams:
    gossip_median_ms: float = 70.0
    gossip_p95_ms: float = 180.0
    spike_prob: float = 0.01
    spike_min_ms: float = 200.0
    spike_max_ms: float = 800.0
    solid_mean_ms: float = 180.0
    solid_sd_ms: float = 60.0
    solid_min_ms: float = 80.0
    solid_max_ms: float = 400.0
    confirm_shape: float = 3.0
    confirm_scale_ms: float = 270.0

    def validate(self) -> None:
        _require_positive(
            "dag_ledger",
            gossip_median_ms=self.gossip_median_ms,
            gossip_p95_ms=self.gossip_p95_ms,
            confirm_shape=self.confirm_shape,
            confirm_scale_ms=self.confirm_scale_ms,
        )
        _require_spike("dag_ledger", self.spike_prob, self.spike_min_ms, self.spike_max_ms)
        if self.solid_sd_ms < 0:
            msg = f"dag_ledger.solid_sd_ms must be >= 0, got {self.solid_sd_ms}"
            raise ConfigError(msg)
        if self.solid_min_ms > self.solid_max_ms:
            msg = f"dag_ledger.solid_min_ms {self.solid_min_ms} exceeds solid_max_ms {self.solid_max_ms}"
            raise ConfigError(msg)


DEFAULT_BATCH_SIZES: tuple[int, ...] = (10, 100, 1000, 10000)


@dataclass(frozen=True, slots=True)
class SuiteConfig:
    iterations: int = 100
    batch_size: int = 1000
    batch_sizes: tuple[int, ...] = DEFAULT_BATCH_SIZES
    replications: int = 30
    seed_start: int = 1
    networks: tuple[NetworkKind, ...] = (NetworkKind.ACCOUNT_CHAIN, NetworkKind.DAG_LEDGER)
    clock: ClockMode = ClockMode.VIRTUAL
    account_chain: AccountChainParams = field(default_factory=AccountChainParams)
    dag_ledger: DagLedgerParams = field(default_factory=DagLedgerParams)
    run_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    notes: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str], **overrides: Any) -> SuiteConfig:
        values: dict[str, Any] = {}
        if environ.get("BENCH_REPLICATIONS"):
            values["replications"] = _parse_int("BENCH_REPLICATIONS", environ["BENCH_REPLICATIONS"])
        if environ.get("BENCH_SEED_START"):
            values["seed_start"] = _parse_int("BENCH_SEED_START", environ["BENCH_SEED_START"])
        if environ.get("TEST_ITERATIONS"):
            values["iterations"] = _parse_int("TEST_ITERATIONS", environ["TEST_ITERATIONS"])
        if environ.get("BATCH_SIZE"):
            values["batch_size"] = _parse_int("BATCH_SIZE", environ["BATCH_SIZE"])
        if environ.get("BATCH_SIZES"):
            values["batch_sizes"] = parse_batch_sizes(environ["BATCH_SIZES"])
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def validate(self) -> None:
        for name, value in (
            ("replications", self.replications),
            ("iterations", self.iterations),
            ("batch_size", self.batch_size),
        ):
            if value < 1:
                msg = f"{name} must be >= 1, got {value}"
                raise ConfigError(msg)
        if not self.batch_sizes:
            msg = "batch_sizes must not be empty"
            raise ConfigError(msg)
        if any(size < 1 for size in self.batch_sizes):
            msg = f"batch sizes must be >= 1, got {list(self.batch_sizes)}"
            raise ConfigError(msg)
        if not self.networks:
            msg = "at least one network is required"
            raise ConfigError(msg)
        self.account_chain.validate()
        self.dag_ledger.validate()

    def seeds(self) -> list[int]:
        return [self.seed_start + i for i in range(self.replications)]

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "run_id": self.run_id or "",
            "created_at": self.created_at.isoformat(),
            "iterations": self.iterations,
            "batch_size": self.batch_size,
            "batch_sizes": list(self.batch_sizes),
            "replications": self.replications,
            "seed_start": self.seed_start,
            "networks": [network.value for network in self.networks],
            "clock": self.clock.value,
            "notes": self.notes,
            "account_chain": {
                "rtt_median_ms": self.account_chain.rtt_median_ms,
                "rtt_p95_ms": self.account_chain.rtt_p95_ms,
                "spike_prob": self.account_chain.spike_prob,
                "spike_min_ms": self.account_chain.spike_min_ms,
                "spike_max_ms": self.account_chain.spike_max_ms,
                "inclusion_prob_per_block": self.account_chain.inclusion_prob_per_block,
                "block_time_ms": self.account_chain.block_time_ms,
                "soft_confirm_blocks": self.account_chain.soft_confirm_blocks,
                "gas_used": self.account_chain.gas_used,
            },
            "dag_ledger": {
                "gossip_median_ms": self.dag_ledger.gossip_median_ms,
                "gossip_p95_ms": self.dag_ledger.gossip_p95_ms,
                "spike_prob": self.dag_ledger.spike_prob,
                "spike_min_ms": self.dag_ledger.spike_min_ms,
                "spike_max_ms": self.dag_ledger.spike_max_ms,
                "solid_mean_ms": self.dag_ledger.solid_mean_ms,
                "solid_sd_ms": self.dag_ledger.solid_sd_ms,
                "solid_min_ms": self.dag_ledger.solid_min_ms,
                "solid_max_ms": self.dag_ledger.solid_max_ms,
                "confirm_shape": self.dag_ledger.confirm_shape,
                "confirm_scale_ms": self.dag_ledger.confirm_scale_ms,
            },
        }


def parse_batch_sizes(raw: str) -> tuple[int, ...]:
    parts = [part.strip() for part in raw.split(",") if part.strip()]
    return tuple(_parse_int("BATCH_SIZES", part) for part in parts)


def _require_positive(section: str, **values: float) -> None:
    for name, value in values.items():
        if not value > 0:
            msg = f"{section}.{name} must be > 0, got {value}"
            raise ConfigError(msg)


def _require_spike(section: str, prob: float, low: float, high: float) -> None:
    if not 0 <= prob <= 1:
        msg = f"{section}.spike_prob must be in [0, 1], got {prob}"
        raise ConfigError(msg)
    if low > high:
        msg = f"{section}.spike_min_ms {low} exceeds spike_max_ms {high}"
        raise ConfigError(msg)


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ConfigError(msg) from None
