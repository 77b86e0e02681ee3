"""Keyed asyncio locks

Serializes coroutines that work on the same entity key (invoice id,
customer/month pair) while letting unrelated keys run concurrently.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional


class _KeyEntry:
    __slots__ = ("lock", "owner", "users")

    def __init__(self):
        self.lock = asyncio.Lock()
        self.owner: Optional[asyncio.Task] = None
        self.users = 0


class KeyedLock:
    """
    One asyncio.Lock per key, alive only while someone holds or waits for it

    Re-entrant per task: a task already holding a key may hold it again
    (e.g. a use case wrapping a repository call that locks the same key).
    """

    def __init__(self):
        self._entries: Dict[str, _KeyEntry] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        task = asyncio.current_task()
        entry = self._entries.get(key)
        if entry is not None and entry.owner is task:
            yield
            return

        if entry is None:
            entry = self._entries[key] = _KeyEntry()
        entry.users += 1
        try:
            async with entry.lock:
                entry.owner = task
                try:
                    yield
                finally:
                    entry.owner = None
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]

    def locked(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)
