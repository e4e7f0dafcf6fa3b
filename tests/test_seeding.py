from __future__ import annotations

from random import Random

import pytest

from ledgerbench.sampling import run_in_virtual_time, with_seed
from ledgerbench.sampling.seeding import active_source, installed


def test_with_seed_installs_seeded_source() -> None:
    async def body(rng: Random) -> tuple[bool, list[float]]:
        return active_source() is rng, [rng.random() for _ in range(3)]

    is_active, draws = run_in_virtual_time(with_seed(17, body))
    reference = Random(17)
    assert is_active
    assert draws == [reference.random() for _ in range(3)]


def test_with_seed_restores_source_when_fn_raises() -> None:
    async def boom(rng: Random) -> None:
        rng.random()
        raise RuntimeError("boom")

    async def scenario() -> list[float]:
        with installed(Random(99)):
            with pytest.raises(RuntimeError, match="boom"):
                await with_seed(7, boom)
            return [active_source().random() for _ in range(3)]

    reference = Random(99)
    expected = [reference.random() for _ in range(3)]
    assert run_in_virtual_time(scenario()) == expected


def test_with_seed_does_not_leak_into_caller_scope() -> None:
    before = active_source()

    async def body(rng: Random) -> None:
        assert active_source() is rng

    async def scenario() -> bool:
        outer = active_source()
        await with_seed(1, body)
        return active_source() is outer

    assert run_in_virtual_time(scenario())
    assert active_source() is before
