from __future__ import annotations

from ledgerbench.config import NetworkKind, SuiteConfig
from ledgerbench.networks.account_chain import AccountChainModel
from ledgerbench.networks.base import LatencyModel
from ledgerbench.networks.dag_ledger import DagLedgerModel


def model_for(network: NetworkKind, config: SuiteConfig | None = None) -> LatencyModel:
    config = config or SuiteConfig()
    if network is NetworkKind.ACCOUNT_CHAIN:
        return AccountChainModel(config.account_chain)
    if network is NetworkKind.DAG_LEDGER:
        return DagLedgerModel(config.dag_ledger)
    msg = f"Unsupported network: {network}"
    raise ValueError(msg)
