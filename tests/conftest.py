"""Shared fixtures for valkey_memo tests."""

import pytest

from valkey_memo import InMemoryStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CallCounter:
    """Deterministic target function that counts its invocations."""

    def __init__(self, result_fn=None):
        self.calls = []
        self._result_fn = result_fn or (lambda *args, **kwargs: {"args": list(args), "kwargs": kwargs})

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self._result_fn(*args, **kwargs)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryStore(clock=clock)


@pytest.fixture
def counter():
    return CallCounter()
