from __future__ import annotations

from pathlib import Path

from ledgerbench.storage.duckdb_store import Storage


def default_storage() -> Storage:
    return Storage(Path(".ledgerbench/ledgerbench.duckdb"))


__all__ = ["Storage", "default_storage"]
