from __future__ import annotations

from ledgerbench.replication.models import ReplicatedResult, RunState
from ledgerbench.replication.orchestrator import (
    SCENARIO_METRICS,
    ReplicationOrchestrator,
    collect,
    extract_metric,
    run_replicated_suite,
)

__all__ = [
    "SCENARIO_METRICS",
    "ReplicatedResult",
    "ReplicationOrchestrator",
    "RunState",
    "collect",
    "extract_metric",
    "run_replicated_suite",
]
