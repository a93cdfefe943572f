"""Per-key asyncio locks so that operations on one index set run one at a time."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLocks:
    """
    Hands out one asyncio.Lock per key. A key's lock is dropped once nobody holds or waits on it,
    so the registry only grows with the number of keys in flight. Not reentrant.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def active_keys(self) -> set[str]:
        """Keys currently held or awaited."""
        return set(self._locks)
