"""Shared fixtures for the algoreplay test suite."""

import pytest

from algoreplay.graph import Graph
from algoreplay.engine import PlaybackController, Recorder


@pytest.fixture
def path_graph():
    """0 — 1 — 2 — 3, unit weights."""
    return Graph(4, [(0, 1, 1), (1, 2, 1), (2, 3, 1)])


@pytest.fixture
def tree_graph():
    """0 → {1, 2}, 1 → 3, 2 → 4."""
    return Graph(5, [(0, 1, 1), (0, 2, 1), (1, 3, 1), (2, 4, 1)])


@pytest.fixture
def weighted_graph():
    """The cheap route 0 → 2 → 1 → 3 (cost 4) beats the direct 0 → 1 hop."""
    return Graph(4, [(0, 1, 4), (0, 2, 1), (2, 1, 2), (1, 3, 1)])


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def controller(recorder):
    """Fast controller: speed 100 in coarse mode = one 0.1 ms unit per snapshot."""
    ctl = PlaybackController(sink=recorder, speed=100, delay_mode="coarse", time_unit=0.0001)
    yield ctl
    ctl.stop()


@pytest.fixture
def slow_controller(recorder):
    """Two seconds between snapshots, so a test can act between them."""
    ctl = PlaybackController(sink=recorder, speed=1, delay_mode="coarse", time_unit=0.02)
    yield ctl
    ctl.stop()
