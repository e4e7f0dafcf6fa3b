from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgerbench.replication.models import ReplicatedResult


class LedgerBenchError(Exception):
    """Base class for errors raised by ledgerbench."""


class ConfigError(LedgerBenchError, ValueError):
    pass


class OperationError(LedgerBenchError):
    """A simulated (or real) ledger operation failed in a recoverable way."""


class ReplicationError(LedgerBenchError):
    def __init__(
        self,
        index: int,
        seed: int,
        cause: BaseException,
        partial: ReplicatedResult | None = None,
    ) -> None:
        super().__init__(f"replication {index} (seed={seed}) failed: {cause!r}")
        self.index = index
        self.seed = seed
        self.cause = cause
        self.partial = partial
