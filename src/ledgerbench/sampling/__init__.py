from __future__ import annotations

from ledgerbench.sampling.clock import (
    VirtualTimeEventLoop,
    elapsed_ms,
    now_ms,
    run_in_virtual_time,
    run_in_wall_time,
    run_with_clock,
    wait_ms,
)
from ledgerbench.sampling.distributions import (
    gamma,
    geometric_blocks,
    log_normal,
    maybe_spike,
    standard_normal,
    truncated_normal,
)
from ledgerbench.sampling.seeding import with_seed

__all__ = [
    "VirtualTimeEventLoop",
    "elapsed_ms",
    "gamma",
    "geometric_blocks",
    "log_normal",
    "maybe_spike",
    "now_ms",
    "run_in_virtual_time",
    "run_in_wall_time",
    "run_with_clock",
    "standard_normal",
    "truncated_normal",
    "wait_ms",
    "with_seed",
]
