"""
Per-key mutual exclusion for the inventory process.

Decrements of the same event are serialized; different events never contend.
The lock only covers one process; the row lock (SELECT ... FOR UPDATE) taken
inside the critical section covers every inventory replica.
"""

from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, DefaultDict, Hashable

import anyio

from booking_pipeline.platform.logging.loguru_io import Logger


class KeyedLock:
    def __init__(self) -> None:
        self._locks: DefaultDict[Hashable, anyio.Lock] = defaultdict(anyio.Lock)
        self._waiters: DefaultDict[Hashable, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        self._waiters[key] += 1
        lock = self._locks[key]
        try:
            async with lock:
                Logger.base.debug(f'🔒 [LOCK] Acquired key={key}')
                yield
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                # Last holder drops the entry so idle keys do not accumulate
                del self._waiters[key]
                del self._locks[key]

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return bool(lock and lock.locked())

    def __len__(self) -> int:
        return len(self._locks)
