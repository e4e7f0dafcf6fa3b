from __future__ import annotations

from dataclasses import dataclass, field
from random import Random

from ledgerbench.config import DagLedgerParams, NetworkKind
from ledgerbench.networks.base import LatencyBreakdown
from ledgerbench.sampling import elapsed_ms, gamma, log_normal, maybe_spike, now_ms, truncated_normal, wait_ms


@dataclass(frozen=True, slots=True)
class DagLedgerModel:
    """Feeless DAG ledger: gossip, solidification, then milestone confirmation."""

    params: DagLedgerParams = field(default_factory=DagLedgerParams)
    network: NetworkKind = NetworkKind.DAG_LEDGER

    async def simulate(self, rng: Random) -> LatencyBreakdown:
        p = self.params
        start = now_ms()

        gossip = log_normal(rng, p.gossip_median_ms, p.gossip_p95_ms)
        gossip = maybe_spike(rng, gossip, p.spike_prob, p.spike_min_ms, p.spike_max_ms)
        await wait_ms(gossip)

        solid = truncated_normal(rng, p.solid_mean_ms, p.solid_sd_ms, p.solid_min_ms, p.solid_max_ms)
        await wait_ms(solid)

        confirm = gamma(rng, p.confirm_shape, p.confirm_scale_ms)
        await wait_ms(confirm)

        return LatencyBreakdown(
            network=self.network,
            phases={
                "gossip": round(gossip),
                "solidification": round(solid),
                "confirmation": round(confirm),
            },
            total_ms=elapsed_ms(start),
        )
