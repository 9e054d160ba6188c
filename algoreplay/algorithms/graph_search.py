"""
graph_search.py — Search Steppers
==================================
BFS, DFS, Dijkstra and A*, each as an explicit state machine.

Snapshot cadence:
  • BFS / DFS       – one per vertex dequeued / popped and visited
  • Dijkstra / A*   – one per vertex settled, one per improving relaxation
  • all             – one terminal snapshot; with a target it carries the
                      parent-pointer path (start … target) as `frontier`

Neighbour expansion is deferred to the NEXT call after a vertex's
snapshot, so each snapshot shows the state right after the dequeue, not
after its neighbours were pushed.

Ties always fall back to adjacency-list insertion order: BFS/DFS by
construction, the heap-based ones through an insertion counter in the
heap key.
"""

import heapq
import itertools
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

from algoreplay.control import ExecutionControl
from algoreplay.graph import Graph
from algoreplay.algorithms.base import GraphStepper
from algoreplay.algorithms.step import GraphSnapshot

INF = float("inf")


# ---------------------------------------------------------------------------
# Breadth-first search
# ---------------------------------------------------------------------------
class BFSStepper(GraphStepper):
    """Vertices are marked visited when discovered (enqueued), FIFO order."""

    key   = "bfs"
    label = "Breadth-First Search"

    def __init__(
        self,
        graph: Graph,
        start: int = 0,
        target: Optional[int] = None,
        control: Optional[ExecutionControl] = None,
    ):
        super().__init__(graph, start, target, control)
        self._queue:  Deque[int]    = deque([self.start])
        self._expand: Optional[int] = None
        self._sb.visit(self.start)
        self._parent[self.start] = None

    def _advance(self) -> GraphSnapshot:
        if self._expand is not None:
            u, self._expand = self._expand, None
            for v, _w in self.graph.neighbours(u):
                if self._sb.visit(v):
                    self._parent[v] = u
                    self._queue.append(v)

        if self._reached or not self._queue:
            return self._finish_search(line=9)

        u = self._queue.popleft()
        self._sb.frontier.append(u)
        if u == self.target:
            self._reached = True
        else:
            self._expand = u
        return self._emit(active=(u,), line=3)


# ---------------------------------------------------------------------------
# Depth-first search
# ---------------------------------------------------------------------------
class DFSStepper(GraphStepper):
    """
    Vertices are marked visited when popped.  Neighbours go on the stack
    in reverse adjacency order so they come off it in adjacency order.
    Stale stack entries (already visited) are dropped without a snapshot.
    """

    key   = "dfs"
    label = "Depth-First Search"

    def __init__(
        self,
        graph: Graph,
        start: int = 0,
        target: Optional[int] = None,
        control: Optional[ExecutionControl] = None,
    ):
        super().__init__(graph, start, target, control)
        # (vertex, vertex that pushed it)
        self._stack:  List[Tuple[int, Optional[int]]] = [(self.start, None)]
        self._expand: Optional[int] = None

    def _advance(self) -> GraphSnapshot:
        if self._expand is not None:
            u, self._expand = self._expand, None
            for v, _w in reversed(self.graph.neighbours(u)):
                if not self._sb.is_visited(v):
                    self._stack.append((v, u))

        while self._stack and not self._reached:
            u, pushed_by = self._stack.pop()
            if self._sb.is_visited(u):
                continue
            self._sb.visit(u)
            self._parent[u] = pushed_by
            self._sb.frontier.append(u)
            if u == self.target:
                self._reached = True
            else:
                self._expand = u
            return self._emit(active=(u,), line=5)

        return self._finish_search(line=9)


# ---------------------------------------------------------------------------
# Dijkstra & A*
# ---------------------------------------------------------------------------
class _BestFirstStepper(GraphStepper):
    """
    Min-heap of (priority, insertion_no, vertex) with lazy deletion.
    `_priority` is the only difference between Dijkstra and A*.
    """

    def __init__(
        self,
        graph: Graph,
        start: int = 0,
        target: Optional[int] = None,
        control: Optional[ExecutionControl] = None,
    ):
        super().__init__(graph, start, target, control)
        self._dist:     Dict[int, float]              = {self.start: 0}
        self._heap:     List[Tuple[float, int, int]]  = []
        self._counter:  itertools.count               = itertools.count()
        self._relaxing: Optional[int]                 = None
        self._cursor:   int                           = 0
        self._parent[self.start] = None
        self._push(self.start, 0)

    def _priority(self, vertex: int, dist: float) -> float:
        return dist

    def _push(self, vertex: int, dist: float) -> None:
        heapq.heappush(self._heap, (self._priority(vertex, dist), next(self._counter), vertex))

    @property
    def distances(self) -> Dict[int, float]:
        """Best distances known so far (copy)."""
        return dict(self._dist)

    def _advance(self) -> GraphSnapshot:
        # 1. keep scanning the settled vertex's neighbours; stop at the next improvement
        if self._relaxing is not None:
            u = self._relaxing
            nbrs = self.graph.neighbours(u)
            while self._cursor < len(nbrs):
                v, w = nbrs[self._cursor]
                self._cursor += 1
                if self._sb.is_visited(v):
                    continue
                cand = self._dist[u] + w
                if cand < self._dist.get(v, INF):
                    self._dist[v] = cand
                    self._parent[v] = u
                    self._push(v, cand)
                    return self._emit(active=(u, v), line=8)
            self._relaxing = None

        # 2. settle the next vertex, skipping stale entries
        while self._heap and not self._reached:
            _, _, u = heapq.heappop(self._heap)
            if self._sb.is_visited(u):
                continue
            self._sb.visit(u)
            self._sb.frontier.append(u)
            if u == self.target:
                self._reached = True
            else:
                self._relaxing = u
                self._cursor = 0
            return self._emit(active=(u,), line=5)

        return self._finish_search(line=9)


class DijkstraStepper(_BestFirstStepper):
    key   = "dijkstra"
    label = "Dijkstra's Algorithm"


def constant_heuristic(vertex: int, target: int) -> float:
    """
    Placeholder h(n) = 1.0 for every vertex.  Not admissible on general
    weighted graphs, so A* may return a non-shortest path when weights
    vary.  Kept on purpose: vertices carry no coordinates to estimate from.
    """
    return 1.0


def zero_heuristic(vertex: int, target: int) -> float:
    """h = 0 turns A* back into Dijkstra."""
    return 0.0


HEURISTICS: Dict[str, Callable[[int, int], float]] = {
    "constant": constant_heuristic,
    "zero":     zero_heuristic,
}


class AStarStepper(_BestFirstStepper):
    """A* ordered by g + h.  A target vertex is mandatory."""

    key             = "astar"
    label           = "A* Algorithm"
    requires_target = True

    def __init__(
        self,
        graph: Graph,
        start: int = 0,
        target: Optional[int] = None,
        control: Optional[ExecutionControl] = None,
        heuristic: Callable[[int, int], float] = constant_heuristic,
    ):
        # _priority runs during super().__init__ (start gets pushed there)
        self._heuristic = heuristic
        super().__init__(graph, start, target, control)

    def _priority(self, vertex: int, dist: float) -> float:
        return dist + self._heuristic(vertex, self.target)


__all__ = [
    "BFSStepper",
    "DFSStepper",
    "DijkstraStepper",
    "AStarStepper",
    "HEURISTICS",
    "constant_heuristic",
    "zero_heuristic",
]
