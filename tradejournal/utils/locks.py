"""
Keyed asyncio locks.

One lock per key, created on first use and dropped once no task holds or
waits on it. Used to serialize work on the same currency pair or the same
account within a worker process.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable, Iterable, List


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class KeyedLock:
    """
    Registry of asyncio locks keyed by an arbitrary hashable.

    Usage:
        locks = KeyedLock()
        async with locks.hold(("USD", "INR")):
            ...
        async with locks.hold_many([account_a, account_b]):
            ...
    """

    def __init__(self):
        self._entries: Dict[Hashable, _Entry] = {}
        self._registry_lock = asyncio.Lock()

    async def _checkout(self, key: Hashable) -> _Entry:
        async with self._registry_lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.users += 1
            return entry

    def _checkin(self, key: Hashable, entry: _Entry) -> None:
        entry.users -= 1
        # Waiters are counted in users, so an idle entry has nobody queued
        if entry.users == 0 and self._entries.get(key) is entry:
            del self._entries[key]

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for a single key."""
        entry = await self._checkout(key)
        try:
            async with entry.lock:
                yield
        finally:
            self._checkin(key, entry)

    @asynccontextmanager
    async def hold_many(self, keys: Iterable[Hashable]) -> AsyncIterator[None]:
        """
        Hold the locks for several keys.

        Keys are de-duplicated and acquired in sorted (string) order so two
        callers locking the same pair of keys cannot deadlock.
        """
        ordered = sorted(set(keys), key=str)
        checked_out: List[tuple] = []
        acquired: List[_Entry] = []
        try:
            for key in ordered:
                entry = await self._checkout(key)
                checked_out.append((key, entry))
                await entry.lock.acquire()
                acquired.append(entry)
            yield
        finally:
            for entry in reversed(acquired):
                entry.lock.release()
            for key, entry in checked_out:
                self._checkin(key, entry)

    def __len__(self) -> int:
        return len(self._entries)
