"""Pytest configuration and fixtures for zklock tests"""
import json

import pytest

from zklock.store.memory import MemoryStore

START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when told to"""

    def __init__(self, start_ms: int = START_MS):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


@pytest.fixture
def clock():
    """A fake clock shared by the store and the election"""
    return FakeClock()


@pytest.fixture
def store(clock):
    """An empty in-memory store stamped by the fake clock"""
    return MemoryStore(clock=clock)


@pytest.fixture
def config_file(tmp_path):
    """Return a writer that dumps a dict to a JSON config file and returns its path"""
    def _write(data, name="zklock.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the user's ZKLOCK_* variables, ~/.zklock.json and .env out of tests"""
    monkeypatch.delenv("ZKLOCK_CONFIG", raising=False)
    monkeypatch.delenv("ZKLOCK_ENV", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
