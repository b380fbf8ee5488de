"""Tests for the in-memory store backend"""

import threading

import pytest

from zklock.core.exceptions import NodeExistsError, NoNodeError, StoreError
from zklock.store.memory import MemoryStore


class TestCreate:
    """Test node creation"""

    def test_create_returns_path(self, store):
        assert store.create("/locks") == "/locks"
        assert store.exists("/locks")

    def test_create_existing_raises(self, store):
        store.create("/locks")
        with pytest.raises(NodeExistsError) as exc_info:
            store.create("/locks")
        assert exc_info.value.path == "/locks"
        assert exc_info.value.operation == "create"

    def test_create_without_parent_raises(self, store):
        with pytest.raises(NoNodeError):
            store.create("/a/b")

    def test_create_makepath_creates_ancestors(self, store):
        store.create("/a/b/c", makepath=True)
        assert store.exists("/a")
        assert store.exists("/a/b")
        assert store.exists("/a/b/c")

    def test_create_bare_root_raises_exists(self, store):
        with pytest.raises(NodeExistsError):
            store.create("/")

    def test_sequential_names_are_zero_padded_and_increasing(self, store):
        store.create("/locks")
        first = store.create("/locks/job.", sequential=True)
        second = store.create("/locks/job.", sequential=True)
        assert first == "/locks/job.0000000000"
        assert second == "/locks/job.0000000001"

    def test_sequence_counter_is_per_parent(self, store):
        store.create("/a")
        store.create("/b")
        assert store.create("/a/x.", sequential=True) == "/a/x.0000000000"
        assert store.create("/b/x.", sequential=True) == "/b/x.0000000000"
        assert store.create("/a/y.", sequential=True) == "/a/y.0000000001"

    def test_sequence_not_reused_after_delete(self, store):
        store.create("/locks")
        first = store.create("/locks/job.", sequential=True)
        store.delete(first)
        assert store.create("/locks/job.", sequential=True) == "/locks/job.0000000001"

    def test_payload_is_kept(self, store):
        store.create("/locks")
        path = store.create("/locks/job.", b'{"pid": 1}', sequential=True)
        assert store.read_data(path) == b'{"pid": 1}'

    def test_concurrent_sequential_creates_are_unique(self):
        store = MemoryStore()
        store.create("/locks")
        paths = []
        paths_lock = threading.Lock()

        def _create():
            path = store.create("/locks/job.", sequential=True)
            with paths_lock:
                paths.append(path)

        threads = [threading.Thread(target=_create) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(set(paths)) == 20


class TestReadOperations:
    """Test list and stat"""

    def test_list_children_only_direct(self, store):
        store.create("/a/b/c", makepath=True)
        store.create("/a/d")
        assert sorted(store.list_children("/a")) == ["b", "d"]

    def test_list_children_of_bare_root(self, store):
        store.create("/a")
        store.create("/b")
        assert sorted(store.list_children("/")) == ["a", "b"]

    def test_list_children_missing_raises(self, store):
        with pytest.raises(NoNodeError):
            store.list_children("/missing")

    def test_stat_reports_creation_time(self, store, clock):
        store.create("/a")
        clock.advance(5)
        store.create("/b")
        assert store.stat("/b").created_ms - store.stat("/a").created_ms == 5000

    def test_stat_missing_returns_none(self, store):
        assert store.stat("/missing") is None


class TestDelete:
    """Test node deletion"""

    def test_delete_removes_node(self, store):
        store.create("/a")
        store.delete("/a")
        assert store.stat("/a") is None

    def test_delete_missing_raises_no_node(self, store):
        with pytest.raises(NoNodeError):
            store.delete("/missing")

    def test_delete_with_children_raises(self, store):
        store.create("/a/b", makepath=True)
        with pytest.raises(StoreError):
            store.delete("/a")
        assert store.exists("/a")
