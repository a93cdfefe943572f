"""
Tests for per-key asyncio locks
"""
import asyncio

import pytest

from app.utils.locks import KeyedLocks


@pytest.mark.asyncio
async def test_same_key_is_exclusive():
    locks = KeyedLocks()
    order = []

    async def worker(tag):
        async with locks.hold("1"):
            order.append(f"{tag}-in")
            await asyncio.sleep(0)
            order.append(f"{tag}-out")

    await asyncio.gather(worker("a"), worker("b"))

    assert order == ["a-in", "a-out", "b-in", "b-out"]


@pytest.mark.asyncio
async def test_different_keys_do_not_block():
    locks = KeyedLocks()

    async with locks.hold("1"):
        await asyncio.wait_for(_enter(locks, "2"), timeout=1)


async def _enter(locks, key):
    async with locks.hold(key):
        return True


@pytest.mark.asyncio
async def test_registry_drops_released_keys():
    locks = KeyedLocks()

    async with locks.hold("1"):
        assert locks.active_keys() == {"1"}

    assert locks.active_keys() == set()


@pytest.mark.asyncio
async def test_lock_released_on_error():
    locks = KeyedLocks()

    with pytest.raises(RuntimeError):
        async with locks.hold("1"):
            raise RuntimeError("boom")

    assert locks.active_keys() == set()
    await asyncio.wait_for(_enter(locks, "1"), timeout=1)
