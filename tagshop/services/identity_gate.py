"""Identity Gate — keyed asyncio lock serializing transactions per identity.

Invariants:
    - At most one holder per identity at a time; other identities never wait
    - Lock entries exist only while some task holds or waits on them
    - Single event loop: the bookkeeping dicts need no extra locking
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class IdentityGate:
    """Per-identity mutex. Use `async with gate.hold(identity):`."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, identity: str) -> AsyncIterator[None]:
        lock = self._locks.get(identity)
        if lock is None:
            lock = self._locks[identity] = asyncio.Lock()
        self._users[identity] = self._users.get(identity, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[identity] -= 1
            if self._users[identity] == 0:
                del self._users[identity]
                del self._locks[identity]

    def is_busy(self, identity: str) -> bool:
        return identity in self._locks

    def __len__(self) -> int:
        return len(self._locks)
