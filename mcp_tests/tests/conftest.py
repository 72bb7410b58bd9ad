import pytest

import core.cache as cache_mod


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def clock(monkeypatch):
    """Fake monotonic clock for the cache store; set clock["now"] in milliseconds."""
    t = {"now": 0.0}

    def fake_monotonic():
        return t["now"] / 1000.0

    monkeypatch.setattr(cache_mod.time, "monotonic", fake_monotonic)
    return t
