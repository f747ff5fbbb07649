"""Unit tests for SessionMemory and SessionStore."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import pytest
from services.session_memory import SessionMemory, SessionStore, short_session_id


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestSessionMemory:
    """Test suite for SessionMemory."""

    def test_starts_empty(self):
        assert len(SessionMemory()) == 0

    def test_appends_preserve_call_order(self):
        memory = SessionMemory()
        memory.append_user("hi")
        memory.append_assistant("hello")

        assert memory.messages() == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]

    def test_appends_do_not_trim(self):
        memory = SessionMemory(max_turns=30)
        for i in range(32):
            memory.append_user(f"message {i}")

        assert len(memory) == 32

    def test_trim_keeps_latest_turns(self):
        memory = SessionMemory(max_turns=30)
        for i in range(16):
            memory.append_user(f"Query {i}")
            memory.append_assistant(f"Response {i}")

        memory.trim()

        assert len(memory) == 30
        assert memory.messages()[0] == {"role": "user", "content": "Query 1"}
        assert memory.messages()[-1] == {"role": "assistant", "content": "Response 15"}

    def test_reset(self):
        memory = SessionMemory()
        memory.append_user("hi")

        memory.reset()

        assert memory.messages() == []

    def test_turns_returns_copy(self):
        memory = SessionMemory()
        memory.append_user("hi")

        memory.turns().clear()

        assert len(memory) == 1


class TestSessionStore:
    """Test suite for SessionStore."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def store(self, clock):
        return SessionStore(ttl_seconds=100, max_turns=30, clock=clock)

    def test_session_ids_are_unique(self, store):
        assert store.new_session_id() != store.new_session_id()
        assert store.new_session_id().startswith("sess_")

    def test_unknown_session(self, store):
        assert store.get("sess_unknown") is None
        assert store.get(None) is None
        assert not store.is_active("sess_unknown")

    def test_get_or_create_is_lazy_and_stable(self, store):
        assert len(store) == 0

        memory = store.get_or_create("sess_a")
        memory.append_user("hi")

        assert len(store) == 1
        assert store.get_or_create("sess_a") is memory
        assert store.is_active("sess_a")

    def test_sessions_are_isolated(self, store):
        store.get_or_create("sess_a").append_user("from a")

        assert len(store.get_or_create("sess_b")) == 0

    def test_idle_session_expires(self, store, clock):
        store.get_or_create("sess_a").append_user("hi")

        clock.now = 101

        assert store.get("sess_a") is None
        assert len(store) == 0
        assert len(store.get_or_create("sess_a")) == 0

    def test_access_extends_lifetime(self, store, clock):
        store.get_or_create("sess_a")

        clock.now = 90
        assert store.get("sess_a") is not None
        clock.now = 180

        assert store.get("sess_a") is not None

    def test_purge_expired_counts_evictions(self, store, clock):
        store.get_or_create("sess_a")
        clock.now = 50
        store.get_or_create("sess_b")
        clock.now = 120

        assert store.purge_expired() == 1
        assert store.is_active("sess_b")


def test_short_session_id():
    assert short_session_id("sess_0123456789abcdef") == "sess_01234567"
    assert short_session_id(None) == "-"
    assert short_session_id("") == "-"
