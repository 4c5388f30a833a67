"""
Upstream session registry.

Maps a client-chosen conversation ID to the Agent Engine session created for
it, so every turn of a conversation reuses the same upstream context.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)

SessionFactory = Callable[[str], Awaitable[str]]


class SessionStore(Protocol):
    """Storage for conversation ID -> upstream session ID mappings."""

    def get(self, conversation_id: str) -> str | None:
        ...

    def set_if_absent(self, conversation_id: str, session_id: str) -> str:
        """Insert unless present. Returns the value now stored."""
        ...

    def set(self, conversation_id: str, session_id: str) -> None:
        ...

    def delete(self, conversation_id: str) -> None:
        ...

    def clear(self) -> None:
        ...

    def __len__(self) -> int:
        ...


@dataclass
class _Entry:
    session_id: str
    expires_at: float | None


class InMemorySessionStore:
    """
    Process-local session store with TTL expiry and LRU eviction.

    Args:
        ttl_seconds: Lifetime of an entry; None keeps entries until evicted
        max_entries: Entries beyond this count evict the least recently used
        clock: Monotonic time source
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()

    def _expires_at(self) -> float | None:
        if self.ttl_seconds is None:
            return None
        return self._clock() + self.ttl_seconds

    def get(self, conversation_id: str) -> str | None:
        entry = self._entries.get(conversation_id)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._entries[conversation_id]
            logger.debug("Session for %s expired", conversation_id)
            return None
        self._entries.move_to_end(conversation_id)
        return entry.session_id

    def set_if_absent(self, conversation_id: str, session_id: str) -> str:
        existing = self.get(conversation_id)
        if existing is not None:
            return existing
        self.set(conversation_id, session_id)
        return session_id

    def set(self, conversation_id: str, session_id: str) -> None:
        self._entries[conversation_id] = _Entry(session_id, self._expires_at())
        self._entries.move_to_end(conversation_id)
        self._evict()

    def _evict(self) -> None:
        if self.max_entries is None:
            return
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted session for %s", evicted)

    def delete(self, conversation_id: str) -> None:
        self._entries.pop(conversation_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class SessionRegistry:
    """
    Lazily creates and caches one upstream session per conversation.

    Concurrent first requests for the same conversation share a per-key lock,
    so only one upstream session is created.
    """

    def __init__(self, factory: SessionFactory, store: SessionStore | None = None) -> None:
        self.factory = factory
        self.store: SessionStore = store if store is not None else InMemorySessionStore()
        # conversation id -> (lock, number of holders and waiters)
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _locked(self, conversation_id: str) -> AsyncIterator[None]:
        lock, users = self._locks.get(conversation_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[conversation_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            _, users = self._locks[conversation_id]
            if users > 1:
                self._locks[conversation_id] = (lock, users - 1)
            else:
                del self._locks[conversation_id]

    async def get_or_create(self, conversation_id: str) -> str:
        """Return the cached upstream session, creating one if needed."""
        session_id = self.store.get(conversation_id)
        if session_id is not None:
            logger.debug("Using existing session %s for %s", session_id, conversation_id)
            return session_id

        async with self._locked(conversation_id):
            session_id = self.store.get(conversation_id)
            if session_id is not None:
                return session_id
            created = await self.factory(conversation_id)
            session_id = self.store.set_if_absent(conversation_id, created)
        logger.info("Created session %s for conversation %s", session_id, conversation_id)
        return session_id

    async def create(self, conversation_id: str) -> str:
        """Create a fresh upstream session, replacing any cached one."""
        async with self._locked(conversation_id):
            session_id = await self.factory(conversation_id)
            self.store.set(conversation_id, session_id)
        logger.info("Created session %s for conversation %s", session_id, conversation_id)
        return session_id

    def get(self, conversation_id: str) -> str | None:
        return self.store.get(conversation_id)

    def forget(self, conversation_id: str) -> None:
        self.store.delete(conversation_id)

    def clear(self) -> None:
        self.store.clear()
