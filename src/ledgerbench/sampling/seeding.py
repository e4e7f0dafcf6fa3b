"""Seeded random sources scoped to one replication.

Samplers take their ``Random`` handle explicitly. ``active_source`` is for
collaborators that are not handed one, such as a custom ``LedgerClient`` that
wraps code drawing its own randomness: inside ``with_seed`` it returns the
replication's seeded source.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from random import Random
from typing import Awaitable, Callable, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_process_source = Random()
_active_source: ContextVar[Random] = ContextVar("ledgerbench_random_source", default=_process_source)


def active_source() -> Random:
    """Random source installed for the current scope."""
    return _active_source.get()


@contextmanager
def installed(rng: Random) -> Iterator[Random]:
    token = _active_source.set(rng)
    try:
        yield rng
    finally:
        _active_source.reset(token)


async def with_seed(seed: int, fn: Callable[[Random], Awaitable[T]]) -> T:
    """Run ``fn`` with a fresh source seeded from ``seed``.

    The source is passed to ``fn`` and installed as the active source for the
    duration of the call. The previous source is back in place on every exit
    path, including when ``fn`` raises. Callers must not overlap two scopes.
    """
    rng = Random(seed)
    logger.debug("installing random source seed=%s", seed)
    with installed(rng):
        return await fn(rng)
