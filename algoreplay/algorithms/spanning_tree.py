"""
spanning_tree.py — Minimum Spanning Tree Steppers
==================================================
Prim grows one tree out of the start vertex; Kruskal merges a forest
edge by edge.  For both, `frontier` holds the tree edges accepted so
far, flattened as u, v, u, v, …

Either run stops once the tree has N−1 edges or its work source (heap /
sorted edge list) runs dry, whichever comes first.  On a disconnected
graph Prim spans only the start vertex's component and Kruskal returns
a spanning forest.
"""

import heapq
import itertools
from typing import Dict, List, Optional, Tuple

from algoreplay.control import ExecutionControl
from algoreplay.graph import Edge, Graph
from algoreplay.algorithms.base import GraphStepper
from algoreplay.algorithms.step import GraphSnapshot


# ---------------------------------------------------------------------------
# Prim
# ---------------------------------------------------------------------------
class PrimStepper(GraphStepper):
    """Lazy Prim: heap of (weight, insertion_no, vertex, parent)."""

    key   = "prim"
    label = "Prim's Algorithm"

    def __init__(
        self,
        graph: Graph,
        start: int = 0,
        target: Optional[int] = None,
        control: Optional[ExecutionControl] = None,
    ):
        # a spanning tree has no destination; the target is accepted and ignored
        super().__init__(graph, start, None, control)
        self._heap:    List[Tuple[int, int, int, Optional[int]]] = []
        self._counter: itertools.count                           = itertools.count()
        self._key:     Dict[int, int]                            = {self.start: 0}
        self._expand:  Optional[int]                             = None
        heapq.heappush(self._heap, (0, next(self._counter), self.start, None))

    @property
    def tree_edges(self) -> List[Tuple[int, int]]:
        f = self._sb.frontier
        return [(f[i], f[i + 1]) for i in range(0, len(f), 2)]

    def _advance(self) -> GraphSnapshot:
        if self._expand is not None:
            u, self._expand = self._expand, None
            for v, w in self.graph.neighbours(u):
                if not self._sb.is_visited(v) and w < self._key.get(v, float("inf")):
                    self._key[v] = w
                    heapq.heappush(self._heap, (w, next(self._counter), v, u))

        n = len(self.graph)
        while self._heap and len(self._sb.visited) < n:
            _, _, u, p = heapq.heappop(self._heap)
            if self._sb.is_visited(u):
                continue
            self._sb.visit(u)
            if p is not None:
                self._sb.frontier.extend((p, u))
            self._expand = u
            return self._emit(active=(u,) if p is None else (p, u), line=5)

        return self._finish(line=9)


# ---------------------------------------------------------------------------
# Kruskal
# ---------------------------------------------------------------------------
class KruskalStepper(GraphStepper):
    """
    Edges are stable-sorted by weight once, up front.  Rejected edges
    (both endpoints already in one set) are skipped without a snapshot.
    """

    key   = "kruskal"
    label = "Kruskal's Algorithm"

    def __init__(
        self,
        graph: Graph,
        start: int = 0,
        target: Optional[int] = None,
        control: Optional[ExecutionControl] = None,
    ):
        super().__init__(graph, start, None, control)
        self._edges:    List[Edge] = sorted(graph.edges, key=lambda e: e.weight)
        self._cursor:   int        = 0
        self._accepted: int        = 0
        self._uf:       List[int]  = list(range(len(graph)))
        self._weight:   int        = 0

    def _find(self, x: int) -> int:
        root = x
        while self._uf[root] != root:
            root = self._uf[root]
        while self._uf[x] != root:
            self._uf[x], x = root, self._uf[x]
        return root

    def _union(self, a: int, b: int) -> bool:
        ra, rb = self._find(a), self._find(b)
        if ra == rb:
            return False
        self._uf[rb] = ra
        return True

    @property
    def total_weight(self) -> int:
        """Summed weight of the edges accepted so far."""
        return self._weight

    def _advance(self) -> GraphSnapshot:
        target_edges = len(self.graph) - 1
        while self._accepted < target_edges and self._cursor < len(self._edges):
            u, v, w = self._edges[self._cursor]
            self._cursor += 1
            if not self._union(u, v):
                continue
            self._accepted += 1
            self._weight += w
            self._sb.visit(u)
            self._sb.visit(v)
            self._sb.frontier.extend((u, v))
            return self._emit(active=(u, v), line=6)

        return self._finish(line=7)


__all__ = [
    "PrimStepper",
    "KruskalStepper",
]
