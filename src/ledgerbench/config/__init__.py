from __future__ import annotations

from ledgerbench.config.models import (
    DEFAULT_BATCH_SIZES,
    AccountChainParams,
    ClockMode,
    DagLedgerParams,
    NetworkKind,
    ScenarioKind,
    SuiteConfig,
    parse_batch_sizes,
)

__all__ = [
    "DEFAULT_BATCH_SIZES",
    "AccountChainParams",
    "ClockMode",
    "DagLedgerParams",
    "NetworkKind",
    "ScenarioKind",
    "SuiteConfig",
    "parse_batch_sizes",
]
