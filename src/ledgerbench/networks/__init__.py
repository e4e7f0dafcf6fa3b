from __future__ import annotations

from ledgerbench.networks.account_chain import AccountChainModel
from ledgerbench.networks.base import LatencyBreakdown, LatencyModel
from ledgerbench.networks.dag_ledger import DagLedgerModel
from ledgerbench.networks.factory import model_for

__all__ = ["AccountChainModel", "DagLedgerModel", "LatencyBreakdown", "LatencyModel", "model_for"]
