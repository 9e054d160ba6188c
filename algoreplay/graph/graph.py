"""
graph.py — Graph Container & Generator
=======================================
Single source of truth for a graph run.  Steppers read adjacency from
this object; nothing writes to it after construction.

Responsibilities:
  1. Validation                   (vertex count, endpoints, weights)
  2. Adjacency queries            (neighbours, weight_between)
  3. Graph-generation factory     (random, seeded)
  4. Serialisation round-trip     (to_dict / from_dict)

Design decisions:
  - Vertices are the ints 0 .. vertex_count-1; no separate node objects.
  - Undirected: every edge (u, v, w) adds v to adj[u] AND u to adj[v],
    both with weight w, in edge-insertion order.  That order is the
    tie-breaker every traversal uses, so it is never re-sorted.
  - Immutable: edges are a tuple and `neighbours` hands out tuples.
"""

import random
from numbers import Real
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from algoreplay.errors import InvalidInputError


class Edge(NamedTuple):
    u:      int
    v:      int
    weight: float = 1


class Graph:
    """
    Attributes:
        vertex_count : Number of vertices (ids 0 .. vertex_count-1).
        edges        : Tuple of Edge in insertion order.
        _adj         : [vertex] → ((neighbour, weight), …)
    """

    def __init__(self, vertex_count: int, edges: Iterable[Sequence] = ()):
        if isinstance(vertex_count, bool) or not isinstance(vertex_count, int):
            raise InvalidInputError(f"Vertex count must be an integer (got {vertex_count!r})")
        if vertex_count < 1:
            raise InvalidInputError("Graph must have at least one vertex")

        self.vertex_count: int = vertex_count
        self.edges: Tuple[Edge, ...] = tuple(self._check_edge(e) for e in edges)

        adj: List[List[Tuple[int, float]]] = [[] for _ in range(vertex_count)]
        for u, v, w in self.edges:
            adj[u].append((v, w))
            adj[v].append((u, w))
        self._adj: Tuple[Tuple[Tuple[int, float], ...], ...] = tuple(tuple(a) for a in adj)

    # ==================================================================
    # VALIDATION
    # ==================================================================
    def _check_edge(self, raw: Sequence) -> Edge:
        try:
            parts = tuple(raw)
        except TypeError:
            raise InvalidInputError(f"Edge must be a (u, v, weight) triple (got {raw!r})") from None
        if len(parts) == 2:
            parts = parts + (1,)
        if len(parts) != 3:
            raise InvalidInputError(f"Edge must be a (u, v, weight) triple (got {raw!r})")

        u, v, w = parts
        u = self.check_vertex(u, "edge endpoint")
        v = self.check_vertex(v, "edge endpoint")
        if u == v:
            raise InvalidInputError(f"Self-loop on vertex {u} is not allowed")
        if isinstance(w, bool) or not isinstance(w, Real) or not w > 0:
            raise InvalidInputError(f"Edge ({u}, {v}) weight must be a positive number (got {w!r})")
        return Edge(u, v, w)

    def check_vertex(self, vertex: Any, what: str = "vertex") -> int:
        """Return `vertex` if it is a valid id, else raise InvalidInputError."""
        if isinstance(vertex, bool) or not isinstance(vertex, int):
            raise InvalidInputError(f"{what.capitalize()} must be an integer (got {vertex!r})")
        if not 0 <= vertex < self.vertex_count:
            raise InvalidInputError(
                f"{what.capitalize()} {vertex} is out of range 0..{self.vertex_count - 1}"
            )
        return vertex

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, vertex: int) -> Tuple[Tuple[int, float], ...]:
        """Return ((neighbour, weight), …) in edge-insertion order."""
        return self._adj[vertex]

    def weight_between(self, a: int, b: int) -> Optional[float]:
        """Weight of the lightest edge linking a and b, or None."""
        weights = [w for nbr, w in self._adj[a] if nbr == b]
        return min(weights) if weights else None

    def has_edge(self, a: int, b: int) -> bool:
        return self.weight_between(a, b) is not None

    def vertices(self) -> range:
        return range(self.vertex_count)

    def __len__(self) -> int:
        return self.vertex_count

    def __repr__(self) -> str:
        return f"Graph(vertex_count={self.vertex_count}, edges={len(self.edges)})"

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> Dict[str, Any]:
        return {
            "vertices": self.vertex_count,
            "edges": [[e.u, e.v, e.weight] for e in self.edges],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Graph":
        if "vertices" not in d:
            raise InvalidInputError("Graph payload needs a 'vertices' count")
        return cls(d["vertices"], d.get("edges", []))

    # ==================================================================
    # GENERATOR
    # ==================================================================
    @classmethod
    def generate_random(
        cls,
        vertices: int,
        edges: int,
        max_weight: int = 10,
        seed: Optional[int] = None,
    ) -> "Graph":
        """
        Pick min(edges, V·(V-1)/2) distinct vertex pairs at random and give
        each a weight in 1..max_weight.  Same seed → same graph.
        """
        if vertices < 1:
            raise InvalidInputError("Graph must have at least one vertex")
        if edges < 0:
            raise InvalidInputError("Edge count must not be negative")
        if max_weight < 1:
            raise InvalidInputError("Maximum edge weight must be at least 1")

        rng = random.Random(seed)
        possible = [(i, j) for i in range(vertices) for j in range(i + 1, vertices)]
        rng.shuffle(possible)
        chosen = possible[: min(edges, len(possible))]
        return cls(vertices, [(u, v, rng.randint(1, max_weight)) for u, v in chosen])
