from __future__ import annotations

from dataclasses import dataclass, field
from random import Random

from ledgerbench.config import AccountChainParams, NetworkKind
from ledgerbench.networks.base import LatencyBreakdown
from ledgerbench.sampling import elapsed_ms, geometric_blocks, log_normal, maybe_spike, now_ms, wait_ms


@dataclass(frozen=True, slots=True)
class AccountChainModel:
    """Account-based chain: network RTT, blocks until inclusion, then soft confirmation."""

    params: AccountChainParams = field(default_factory=AccountChainParams)
    network: NetworkKind = NetworkKind.ACCOUNT_CHAIN

    async def simulate(self, rng: Random) -> LatencyBreakdown:
        p = self.params
        start = now_ms()

        rtt = log_normal(rng, p.rtt_median_ms, p.rtt_p95_ms)
        rtt = maybe_spike(rng, rtt, p.spike_prob, p.spike_min_ms, p.spike_max_ms)
        await wait_ms(rtt)

        blocks = geometric_blocks(rng, p.inclusion_prob_per_block)
        inclusion = blocks * p.block_time_ms
        await wait_ms(inclusion)

        confirmation = p.soft_confirm_blocks * p.block_time_ms
        await wait_ms(confirmation)

        return LatencyBreakdown(
            network=self.network,
            phases={
                "rtt": round(rtt),
                "inclusion": inclusion,
                "confirmation": confirmation,
            },
            total_ms=elapsed_ms(start),
            blocks_to_inclusion=blocks,
        )
