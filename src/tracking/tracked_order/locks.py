"""Per-order lock arena.

Serializes the read-modify-write sequences that touch one tracked order and
its checkpoints. Locks are created on first use and live as long as the arena.
"""

import asyncio
from contextlib import asynccontextmanager


class OrderLockArena:
    def __init__(self):
        self._locks: dict[int, asyncio.Lock] = {}

    def lock_for(self, tracked_order_id: int) -> asyncio.Lock:
        lock = self._locks.get(tracked_order_id)
        if lock is None:
            lock = self._locks[tracked_order_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, tracked_order_id: int):
        async with self.lock_for(tracked_order_id):
            yield

    def __len__(self) -> int:
        return len(self._locks)
