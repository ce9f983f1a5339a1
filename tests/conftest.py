"""Shared pytest fixtures for zjsidebar tests."""

import logging

import pytest

from zjsidebar.models.events import PaneUpdate, TabUpdate
from zjsidebar.models.tabs import PaneManifest, TabInfo, TabSnapshot
from zjsidebar.services.alert_engine import AlertEngine
from zjsidebar.services.collapse_store import MemoryCollapseStore


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int = 1) -> int:
        self.now += millis
        return self.now


def make_tabs(count: int = 3, active: int = 0, names=None) -> tuple:
    """Tabs at positions 0..count-1 with ``active`` selected."""
    names = names or [f"Tab #{i + 1}" for i in range(count)]
    return tuple(TabInfo(position=i, name=names[i], active=i == active) for i in range(count))


@pytest.fixture(autouse=True)
def isolated_state_dir(tmp_path, monkeypatch):
    """Keep every test away from the user's real collapse record."""
    state_dir = tmp_path / "state"
    monkeypatch.setenv("ZJSIDEBAR_STATE_DIR", str(state_dir))
    return state_dir


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo handlers and level that CLI invocations attach to the package logger."""
    logger = logging.getLogger("zjsidebar")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return MemoryCollapseStore()


@pytest.fixture
def engine():
    """Alert engine tracking tabs 0..2 with tab 0 active."""
    engine = AlertEngine()
    engine.sync_tabs(TabSnapshot(tabs=make_tabs(3, active=0)))
    return engine


@pytest.fixture
def tab_update():
    return TabUpdate(make_tabs(3, active=0))


@pytest.fixture
def pane_update():
    # pane ids 10, 11, 12 live in tabs 0, 1, 2; tab 2 also holds pane 20
    return PaneUpdate(PaneManifest({0: (10,), 1: (11,), 2: (12, 20)}))
