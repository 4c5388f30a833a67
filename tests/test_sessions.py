"""
Tests for the upstream session registry.
"""
import asyncio

import pytest

from core.exceptions import UpstreamError
from core.sessions import InMemorySessionStore, SessionRegistry
from server.state import (
    configure_session_registry,
    get_session_registry,
    set_session_registry,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestInMemorySessionStore:
    def test_ttl_expiry(self):
        clock = FakeClock()
        store = InMemorySessionStore(ttl_seconds=10, clock=clock)
        store.set("c1", "s1")

        clock.now = 9.9
        assert store.get("c1") == "s1"
        clock.now = 10.0
        assert store.get("c1") is None
        assert len(store) == 0

    def test_lru_eviction(self):
        store = InMemorySessionStore(max_entries=2)
        store.set("a", "1")
        store.set("b", "2")
        store.get("a")
        store.set("c", "3")

        assert store.get("b") is None
        assert store.get("a") == "1"
        assert store.get("c") == "3"

    def test_set_if_absent_keeps_existing(self):
        store = InMemorySessionStore()

        assert store.set_if_absent("c1", "first") == "first"
        assert store.set_if_absent("c1", "second") == "first"

    def test_delete_and_clear(self):
        store = InMemorySessionStore()
        store.set("a", "1")
        store.set("b", "2")

        store.delete("a")
        store.delete("missing")
        assert len(store) == 1
        store.clear()
        assert len(store) == 0


class TestSessionRegistry:
    @pytest.mark.asyncio
    async def test_get_or_create_reuses(self):
        created = []

        async def factory(conversation_id):
            created.append(conversation_id)
            return f"adk-{len(created)}"

        registry = SessionRegistry(factory)

        first = await registry.get_or_create("c1")
        second = await registry.get_or_create("c1")
        other = await registry.get_or_create("c2")

        assert first == second == "adk-1"
        assert other == "adk-2"
        assert created == ["c1", "c2"]

    @pytest.mark.asyncio
    async def test_concurrent_first_requests_create_one_session(self):
        calls = 0

        async def slow_factory(conversation_id):
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return f"adk-{calls}"

        registry = SessionRegistry(slow_factory)

        results = await asyncio.gather(*(registry.get_or_create("c1") for _ in range(5)))

        assert calls == 1
        assert set(results) == {"adk-1"}

    @pytest.mark.asyncio
    async def test_create_always_replaces(self):
        counter = iter(range(1, 10))

        async def factory(conversation_id):
            return f"adk-{next(counter)}"

        registry = SessionRegistry(factory)
        await registry.get_or_create("c1")

        fresh = await registry.create("c1")

        assert fresh == "adk-2"
        assert await registry.get_or_create("c1") == "adk-2"

    @pytest.mark.asyncio
    async def test_factory_failure_is_not_cached(self):
        attempts = 0

        async def flaky(conversation_id):
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise UpstreamError("temporary")
            return "adk-ok"

        registry = SessionRegistry(flaky)

        with pytest.raises(UpstreamError):
            await registry.get_or_create("c1")
        assert registry.get("c1") is None
        assert await registry.get_or_create("c1") == "adk-ok"

    @pytest.mark.asyncio
    async def test_expired_session_is_recreated(self):
        clock = FakeClock()
        created = []

        async def factory(conversation_id):
            created.append(conversation_id)
            return f"adk-{len(created)}"

        registry = SessionRegistry(factory, InMemorySessionStore(ttl_seconds=5, clock=clock))
        await registry.get_or_create("c1")
        clock.now = 6

        assert await registry.get_or_create("c1") == "adk-2"

    @pytest.mark.asyncio
    async def test_forget_and_clear(self):
        async def factory(conversation_id):
            return "adk"

        registry = SessionRegistry(factory)
        await registry.get_or_create("a")
        await registry.get_or_create("b")

        registry.forget("a")
        assert registry.get("a") is None
        registry.clear()
        assert registry.get("b") is None

    @pytest.mark.asyncio
    async def test_arrival_after_failed_creation_waits_for_retry(self):
        gates = [asyncio.Event() for _ in range(3)]
        attempts = 0

        async def factory(conversation_id):
            nonlocal attempts
            attempts += 1
            attempt = attempts
            await gates[attempt - 1].wait()
            if attempt == 1:
                raise UpstreamError("temporary")
            return f"adk-{attempt}"

        registry = SessionRegistry(factory)
        first = asyncio.create_task(registry.get_or_create("c1"))
        second = asyncio.create_task(registry.get_or_create("c1"))
        while attempts < 1:
            await asyncio.sleep(0)

        gates[0].set()
        with pytest.raises(UpstreamError):
            await first
        while attempts < 2:
            await asyncio.sleep(0)
        third = asyncio.create_task(registry.get_or_create("c1"))
        await asyncio.sleep(0)
        gates[1].set()
        gates[2].set()

        assert await second == "adk-2"
        assert await third == "adk-2"
        assert attempts == 2
        assert not registry._locks

    def test_empty_store_passed_in_is_used(self):
        async def factory(conversation_id):
            return "adk"

        store = InMemorySessionStore(ttl_seconds=5, max_entries=1)

        assert SessionRegistry(factory, store).store is store


def test_configured_registry_applies_reuse_policy():
    previous = get_session_registry()
    try:
        registry = configure_session_registry(ttl_seconds=5, max_sessions=1)

        assert get_session_registry() is registry
        assert registry.store.ttl_seconds == 5
        assert registry.store.max_entries == 1
    finally:
        set_session_registry(previous)
