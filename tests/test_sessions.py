"""
Tests for the server-side session store and sweeper.
"""

import asyncio

import pytest

from botdash.core.sessions import MemorySessionStore, sweep_sessions_forever


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemorySessionStore(ttl_seconds=60, clock=clock)


class TestMemorySessionStore:
    """Test session creation, lookup and expiry."""

    def test_create_and_get(self, store):
        session = store.create(user_id=7)
        assert session.user_id == 7
        assert store.get(session.session_id) is session

    def test_session_ids_are_unique(self, store):
        ids = {store.create(user_id=1).session_id for _ in range(50)}
        assert len(ids) == 50

    def test_unknown_session(self, store):
        assert store.get("does-not-exist") is None

    def test_delete(self, store):
        session = store.create(user_id=1)
        store.delete(session.session_id)
        assert store.get(session.session_id) is None
        # Deleting twice is harmless
        store.delete(session.session_id)

    def test_expired_session_evicted_on_get(self, store, clock):
        session = store.create(user_id=1)
        clock.now += 61
        assert store.get(session.session_id) is None
        assert len(store) == 0

    def test_cleanup_expired(self, store, clock):
        old = store.create(user_id=1)
        clock.now += 30
        fresh = store.create(user_id=2)
        clock.now += 31

        assert store.cleanup_expired() == 1
        assert store.get(old.session_id) is None
        assert store.get(fresh.session_id) is fresh
        assert store.cleanup_expired() == 0


class TestSessionSweeper:
    """Test the background sweep loop."""

    @pytest.mark.asyncio
    async def test_sweeper_evicts_until_cancelled(self, store, clock):
        store.create(user_id=1)
        clock.now += 120

        task = asyncio.create_task(sweep_sessions_forever(store, interval_seconds=0.01))
        await asyncio.sleep(0.05)
        assert len(store) == 0

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
