"""
recorder.py — Run Recorder & Analytics
========================================
A Recorder is a RenderSink that keeps every snapshot it is handed, so a
run can be polled incrementally, replayed, exported, and summed up into
the metrics card.

Usage (live, behind a PlaybackController):
    rec = Recorder()
    ctl = PlaybackController(sink=rec)
    rec.attach("bfs", graph_input)
    ctl.start("bfs", graph_input)
    …
    rec.since(12)                   # snapshots 12, 13, … delivered so far
    rec.get_metrics()

Usage (whole run, synchronously):
    metrics = Recorder().record("merge", [5, 3, 8, 1])
"""

import logging
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Union

from algoreplay.graph import Graph
from algoreplay.inputs import GraphInput
from algoreplay.algorithms import (
    AlgoInfo, AlgorithmId, RunInput, create_stepper, get_algorithm,
)
from algoreplay.algorithms.step import GraphSnapshot, Snapshot, SortSnapshot
from algoreplay.engine.controller import RenderSink

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass: what the analytics card renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:        str             = ""
    algo_label:      str             = ""
    total_steps:     int             = 0        # snapshots delivered, terminal included
    finished:        bool            = False    # terminal snapshot seen?
    wall_time_ms:    float           = 0.0      # attach → last snapshot
    # sorting only
    sorted_ok:       Optional[bool]  = None
    # graph only
    nodes_visited:   int             = 0
    path_length:     int             = 0        # edges on the path / in the tree
    path_cost:       float           = 0.0      # summed weight of those edges
    path_found:      bool            = False


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder(RenderSink):
    """
    Attributes:
        snapshots : Every snapshot delivered since the last clear(), in order.
    """

    def __init__(self):
        self.snapshots:    List[Snapshot]        = []
        self._lock:        threading.Lock        = threading.Lock()
        self._info:        Optional[AlgoInfo]    = None
        self._input:       Optional[RunInput]    = None
        self._started:     float                 = 0.0
        self._last:        float                 = 0.0

    # ------------------------------------------------------------------
    # RenderSink
    # ------------------------------------------------------------------
    def render(self, snapshot: Snapshot) -> None:
        with self._lock:
            self.snapshots.append(snapshot)
            self._last = time.monotonic()

    def clear(self) -> None:
        with self._lock:
            self.snapshots = []
            self._started = self._last = time.monotonic()

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def attach(self, algorithm_id: Union[AlgorithmId, str], data: RunInput) -> None:
        """Remember which run is being recorded (for metrics and export)."""
        info = get_algorithm(algorithm_id)
        with self._lock:
            self._info = info
            self._input = data

    def record(self, algorithm_id: Union[AlgorithmId, str], data: RunInput, **options: Any) -> RunMetrics:
        """Drain a fresh stepper synchronously, recording every snapshot."""
        stepper = create_stepper(algorithm_id, data, **options)
        self.attach(algorithm_id, data)
        self.clear()
        for snap in stepper:
            self.render(snap)
        metrics = self.get_metrics()
        logger.info("recorded %s: %d snapshot(s) in %.2f ms",
                    metrics.algo_key, metrics.total_steps, metrics.wall_time_ms)
        return metrics

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def since(self, index: int = 0) -> List[Snapshot]:
        with self._lock:
            return list(self.snapshots[max(0, index):])

    def __len__(self) -> int:
        with self._lock:
            return len(self.snapshots)

    @property
    def last(self) -> Optional[Snapshot]:
        with self._lock:
            return self.snapshots[-1] if self.snapshots else None

    def get_metrics(self) -> RunMetrics:
        with self._lock:
            steps = list(self.snapshots)
            info = self._info
            data = self._input
            wall_ms = (self._last - self._started) * 1000

        last = steps[-1] if steps else None
        m = RunMetrics(
            algo_key=info.key if info else "",
            algo_label=info.label if info else "",
            total_steps=len(steps),
            finished=bool(last and last.terminal),
            wall_time_ms=round(wall_ms, 2),
        )
        if isinstance(last, SortSnapshot):
            m.sorted_ok = all(a <= b for a, b in zip(last.values, last.values[1:]))
        elif isinstance(last, GraphSnapshot):
            self._graph_metrics(m, info, last, _as_graph(data))
        return m

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        metrics = self.get_metrics()
        with self._lock:
            steps = list(self.snapshots)
            data = self._input
        return {
            "algorithm": metrics.algo_key,
            "input":     _input_to_dict(data),
            "metrics":   asdict(metrics),
            "steps":     [s.to_dict() for s in steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _graph_metrics(m: RunMetrics, info: Optional[AlgoInfo], last: GraphSnapshot,
                       graph: Optional[Graph]) -> None:
        m.nodes_visited = len(last.visited)
        f = last.frontier
        if info is not None and info.id in (AlgorithmId.PRIM, AlgorithmId.KRUSKAL):
            pairs = [(f[i], f[i + 1]) for i in range(0, len(f) - 1, 2)]
        else:
            # frontier is the path only on a terminal snapshot of a targeted search
            if not last.terminal or not last.active:
                return
            pairs = list(zip(f, f[1:]))
        m.path_found = bool(f)
        m.path_length = len(pairs)
        if graph is not None:
            m.path_cost = float(sum(graph.weight_between(a, b) or 0 for a, b in pairs))


def _as_graph(data: Optional[RunInput]) -> Optional[Graph]:
    if isinstance(data, GraphInput):
        return data.graph
    if isinstance(data, Graph):
        return data
    if isinstance(data, dict):
        return GraphInput.from_dict(data).graph
    return None


def _input_to_dict(data: Optional[RunInput]) -> Any:
    if isinstance(data, GraphInput):
        d = data.graph.to_dict()
        d.update(start=data.start, end=data.target)
        return d
    if isinstance(data, Graph):
        return data.to_dict()
    if isinstance(data, dict) or data is None:
        return data
    return list(data)


__all__ = [
    "Recorder",
    "RunMetrics",
]
