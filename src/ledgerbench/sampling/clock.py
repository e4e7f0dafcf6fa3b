"""Virtual time for simulated ledger delays.

Simulated waits are plain ``asyncio.sleep`` calls. On ``VirtualTimeEventLoop``
the loop clock jumps straight to the next scheduled timer whenever nothing else
is runnable, so a batch of operations that each wait tens of seconds completes
instantly while every ``loop.time()`` reading stays consistent with the delays.
"""
from __future__ import annotations

import asyncio
import selectors
from typing import Any, Callable, Coroutine, TypeVar

from ledgerbench.config import ClockMode

T = TypeVar("T")


class _VirtualTimeSelector(selectors.DefaultSelector):
    def __init__(self, advance: Callable[[float], None]) -> None:
        super().__init__()
        self._advance = advance

    def select(self, timeout: float | None = None) -> list[tuple[selectors.SelectorKey, int]]:
        # No timers pending: genuinely wait for I/O.
        if timeout is None or timeout <= 0:
            return super().select(timeout)
        events = super().select(0)
        if not events:
            self._advance(timeout)
        return events


class VirtualTimeEventLoop(asyncio.SelectorEventLoop):
    def __init__(self) -> None:
        self._virtual_now = 0.0
        super().__init__(_VirtualTimeSelector(self._advance))

    def time(self) -> float:
        return self._virtual_now

    def _advance(self, seconds: float) -> None:
        self._virtual_now += seconds


def run_in_virtual_time(main: Coroutine[Any, Any, T]) -> T:
    with asyncio.Runner(loop_factory=VirtualTimeEventLoop) as runner:
        return runner.run(main)


def run_in_wall_time(main: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(main)


def run_with_clock(main: Coroutine[Any, Any, T], clock: ClockMode) -> T:
    if clock is ClockMode.WALL:
        return run_in_wall_time(main)
    return run_in_virtual_time(main)


def now_ms() -> float:
    """Current loop time in milliseconds."""
    return asyncio.get_running_loop().time() * 1000.0


def elapsed_ms(start_ms: float) -> float:
    """Milliseconds since ``start_ms``, at microsecond resolution."""
    return round(now_ms() - start_ms, 3)


async def wait_ms(ms: float) -> None:
    await asyncio.sleep(ms / 1000.0)
