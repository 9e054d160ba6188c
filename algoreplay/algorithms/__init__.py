"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the engine can run.

    from algoreplay.algorithms import AlgorithmId, create_stepper, describe

REGISTRY maps each AlgorithmId to an AlgoInfo card:
    {
        AlgorithmId.BUBBLE: AlgoInfo(key, label, kind, stepper, pseudocode, …),
        …
    }

The id set is closed: create_stepper() dispatches on the enum, so an
identifier that is not a member is rejected up front instead of failing
somewhere inside a run.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Type, Union

from algoreplay.control import ExecutionControl
from algoreplay.errors import InvalidInputError
from algoreplay.graph import Graph
from algoreplay.inputs import GraphInput
from algoreplay.algorithms import pseudocode as pc
from algoreplay.algorithms.base import AlgorithmStepper, GraphStepper, SortStepper
from algoreplay.algorithms.graph_search import AStarStepper, BFSStepper, DFSStepper, DijkstraStepper
from algoreplay.algorithms.sorting import (
    BubbleSortStepper, CountingSortStepper, HeapSortStepper, InsertionSortStepper,
    MergeSortStepper, QuickSortStepper, RadixSortStepper, SelectionSortStepper, ShellSortStepper,
)
from algoreplay.algorithms.spanning_tree import KruskalStepper, PrimStepper
from algoreplay.algorithms.step import GraphSnapshot, Snapshot, SortSnapshot, StepResult, NO_PROGRESS

logger = logging.getLogger(__name__)


class AlgorithmId(Enum):
    BUBBLE    = "bubble"
    SELECTION = "selection"
    INSERTION = "insertion"
    MERGE     = "merge"
    QUICK     = "quick"
    HEAP      = "heap"
    SHELL     = "shell"
    COUNTING  = "counting"
    RADIX     = "radix"
    BFS       = "bfs"
    DFS       = "dfs"
    DIJKSTRA  = "dijkstra"
    ASTAR     = "astar"
    PRIM      = "prim"
    KRUSKAL   = "kruskal"


class AlgorithmKind(Enum):
    SORTING = "sorting"
    GRAPH   = "graph"


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    id:                AlgorithmId
    label:             str                          # human label, e.g. "Breadth-First Search"
    kind:              AlgorithmKind
    stepper:           Type[AlgorithmStepper]
    pseudocode:        List[str]                    # lines for the side-panel
    steps:             List[str] = field(default_factory=list)   # plain-language outline
    complexity_time:   str      = ""
    complexity_space:  str      = ""
    description:       str      = ""
    requires_target:   bool     = False             # A* only

    @property
    def key(self) -> str:
        return self.id.value

    def to_dict(self) -> Dict[str, Any]:
        """The info card, as served to clients."""
        return {
            "id":               self.key,
            "kind":             self.kind.value,
            "name":             self.label,
            "time_complexity":  self.complexity_time,
            "space_complexity": self.complexity_space,
            "description":      self.description,
            "steps":            list(self.steps),
            "requires_target":  self.requires_target,
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
_S = AlgorithmKind.SORTING
_G = AlgorithmKind.GRAPH

REGISTRY: Dict[AlgorithmId, AlgoInfo] = {

    AlgorithmId.BUBBLE: AlgoInfo(
        AlgorithmId.BUBBLE, "Bubble Sort", _S, BubbleSortStepper, pc.BUBBLE,
        steps=[
            "Compare adjacent elements",
            "Swap if they are in the wrong order",
            "Repeat until the list is sorted",
        ],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Bubble sort repeatedly steps through the list, compares adjacent elements "
                    "and swaps them if they are in the wrong order.",
    ),

    AlgorithmId.SELECTION: AlgoInfo(
        AlgorithmId.SELECTION, "Selection Sort", _S, SelectionSortStepper, pc.SELECTION,
        steps=[
            "Find the minimum element in the unsorted array",
            "Swap it with the first element of the unsorted array",
            "Move the boundary of the sorted array one element to the right",
        ],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Selection sort divides the input list into a sorted and an unsorted sublist. "
                    "It repeatedly finds the minimum element of the unsorted part and moves it "
                    "to the sorted part.",
    ),

    AlgorithmId.INSERTION: AlgoInfo(
        AlgorithmId.INSERTION, "Insertion Sort", _S, InsertionSortStepper, pc.INSERTION,
        steps=[
            "Start with the second element",
            "Compare it with the previous elements",
            "Insert it in the correct position",
        ],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Insertion sort builds the final sorted array one item at a time, inserting "
                    "each element into its correct position in the sorted part.",
    ),

    AlgorithmId.MERGE: AlgoInfo(
        AlgorithmId.MERGE, "Merge Sort", _S, MergeSortStepper, pc.MERGE,
        steps=[
            "Divide the array into two halves",
            "Recursively sort each half",
            "Merge the two sorted halves",
        ],
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Merge sort divides the array into two halves, recursively sorts them, "
                    "and then merges the two sorted halves.",
    ),

    AlgorithmId.QUICK: AlgoInfo(
        AlgorithmId.QUICK, "Quick Sort", _S, QuickSortStepper, pc.QUICK,
        steps=[
            "Pick a pivot element",
            "Partition the array around the pivot",
            "Recursively sort the subarrays",
        ],
        complexity_time="O(n log n)", complexity_space="O(log n)",
        description="Quick sort picks a pivot element and partitions the array around it, "
                    "then recursively sorts the subarrays.",
    ),

    AlgorithmId.HEAP: AlgoInfo(
        AlgorithmId.HEAP, "Heap Sort", _S, HeapSortStepper, pc.HEAP,
        steps=[
            "Build a max heap from the array",
            "Swap the root with the last element",
            "Heapify the reduced heap",
        ],
        complexity_time="O(n log n)", complexity_space="O(1)",
        description="Heap sort builds a max heap from the array and repeatedly extracts the "
                    "maximum element from the heap.",
    ),

    AlgorithmId.SHELL: AlgoInfo(
        AlgorithmId.SHELL, "Shell Sort", _S, ShellSortStepper, pc.SHELL,
        steps=[
            "Start with a large gap and halve it each pass",
            "Insertion-sort the elements that are one gap apart",
            "Finish with an ordinary insertion sort (gap 1)",
        ],
        complexity_time="O(n log² n)", complexity_space="O(1)",
        description="An optimization of insertion sort that allows the exchange of items "
                    "that are far apart.",
    ),

    AlgorithmId.COUNTING: AlgoInfo(
        AlgorithmId.COUNTING, "Counting Sort", _S, CountingSortStepper, pc.COUNTING,
        steps=[
            "Count the frequency of each element",
            "Calculate the cumulative count",
            "Place the elements in their correct positions",
        ],
        complexity_time="O(n + k)", complexity_space="O(n + k)",
        description="Counting sort is a non-comparison sort that counts how many times each "
                    "distinct key value occurs.",
    ),

    AlgorithmId.RADIX: AlgoInfo(
        AlgorithmId.RADIX, "Radix Sort", _S, RadixSortStepper, pc.RADIX,
        steps=[
            "Sort the numbers by the least significant digit",
            "Continue sorting by each more significant digit",
            "The final result is a sorted array",
        ],
        complexity_time="O(d * (n + k))", complexity_space="O(n + k)",
        description="Radix sort processes individual digits, using a stable counting sort "
                    "per digit. Non-negative values only.",
    ),

    AlgorithmId.BFS: AlgoInfo(
        AlgorithmId.BFS, "Breadth-First Search", _G, BFSStepper, pc.BFS,
        steps=[
            "Start from the source vertex",
            "Visit all adjacent vertices",
            "Move to the next level of vertices",
            "Repeat until all vertices are visited",
        ],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="BFS explores all the vertices at the present depth level before moving on "
                    "to vertices at the next depth level.",
    ),

    AlgorithmId.DFS: AlgoInfo(
        AlgorithmId.DFS, "Depth-First Search", _G, DFSStepper, pc.DFS,
        steps=[
            "Start from the source vertex",
            "Visit an unvisited adjacent vertex",
            "Continue until no more unvisited vertices",
            "Backtrack and repeat",
        ],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="DFS explores as far as possible along each branch before backtracking.",
    ),

    AlgorithmId.DIJKSTRA: AlgoInfo(
        AlgorithmId.DIJKSTRA, "Dijkstra's Algorithm", _G, DijkstraStepper, pc.DIJKSTRA,
        steps=[
            "Initialize distances to infinity",
            "Set source distance to 0",
            "Visit the closest unvisited vertex",
            "Update distances to adjacent vertices",
            "Repeat until all vertices are visited",
        ],
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="Dijkstra's algorithm finds the shortest path from a source vertex to all "
                    "other vertices in a weighted graph.",
    ),

    AlgorithmId.ASTAR: AlgoInfo(
        AlgorithmId.ASTAR, "A* Algorithm", _G, AStarStepper, pc.ASTAR,
        steps=[
            "Initialize distances and heuristic values",
            "Visit the vertex with lowest f(n) = g(n) + h(n)",
            "Update distances and heuristic values",
            "Repeat until target vertex is reached",
        ],
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="A* finds a path from a source vertex to a target vertex, guided by a "
                    "heuristic function.",
        requires_target=True,
    ),

    AlgorithmId.PRIM: AlgoInfo(
        AlgorithmId.PRIM, "Prim's Algorithm", _G, PrimStepper, pc.PRIM,
        steps=[
            "Start from an arbitrary vertex",
            "Add the least weight edge from the tree to the remaining vertices",
            "Repeat until all vertices are included",
        ],
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="Prim's algorithm finds a minimum spanning tree in a weighted graph.",
    ),

    AlgorithmId.KRUSKAL: AlgoInfo(
        AlgorithmId.KRUSKAL, "Kruskal's Algorithm", _G, KruskalStepper, pc.KRUSKAL,
        steps=[
            "Sort all edges by weight",
            "Add the least weight edge that does not form a cycle",
            "Repeat until all vertices are included",
        ],
        complexity_time="O(E log V)", complexity_space="O(V)",
        description="Kruskal's algorithm finds a minimum spanning tree in a weighted graph.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def resolve_id(algorithm_id: Union[AlgorithmId, str]) -> AlgorithmId:
    """Accept an AlgorithmId or its string key; anything else is InvalidInputError."""
    if isinstance(algorithm_id, AlgorithmId):
        return algorithm_id
    try:
        return AlgorithmId(algorithm_id)
    except ValueError:
        raise InvalidInputError(f"Unknown algorithm: {algorithm_id!r}") from None


def get_algorithm(algorithm_id: Union[AlgorithmId, str]) -> AlgoInfo:
    return REGISTRY[resolve_id(algorithm_id)]


def list_algorithms(kind: Optional[AlgorithmKind] = None) -> List[AlgoInfo]:
    """All registered algorithms in declaration order, optionally filtered by kind."""
    return [a for a in REGISTRY.values() if kind is None or a.kind is kind]


def describe(algorithm_id: Union[AlgorithmId, str]) -> Dict[str, Any]:
    """{name, time_complexity, space_complexity, description, steps} for one algorithm."""
    card = get_algorithm(algorithm_id).to_dict()
    return {k: card[k] for k in ("name", "time_complexity", "space_complexity", "description", "steps")}


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------
RunInput = Union[Sequence[int], Graph, GraphInput, Mapping]


def _graph_input(data: RunInput) -> GraphInput:
    if isinstance(data, GraphInput):
        return data
    if isinstance(data, Graph):
        return GraphInput(data)
    if isinstance(data, Mapping):
        return GraphInput.from_dict(data)
    raise InvalidInputError(f"Graph algorithms need a graph input, got {type(data).__name__}")


def create_stepper(
    algorithm_id: Union[AlgorithmId, str],
    data: RunInput,
    control: Optional[ExecutionControl] = None,
    **options: Any,
) -> AlgorithmStepper:
    """
    Build a fresh, unstarted stepper.

    Sorting ids take a sequence of ints.  Graph ids take a GraphInput, a
    bare Graph (start 0, no target) or a dict in Graph.to_dict() form with
    optional "start" and "end"/"target".  Extra keyword options go to the
    stepper's constructor (A*'s `heuristic`, for instance).
    """
    info = get_algorithm(algorithm_id)
    if info.kind is AlgorithmKind.SORTING:
        if isinstance(data, (Graph, GraphInput, Mapping)):
            raise InvalidInputError(f"{info.label} needs an array input")
        stepper = info.stepper(data, control=control, **options)
    else:
        gi = _graph_input(data)
        stepper = info.stepper(gi.graph, gi.start, gi.target, control=control, **options)
    logger.debug("created %s stepper", info.key)
    return stepper


__all__ = [
    "AlgorithmId",
    "AlgorithmKind",
    "AlgoInfo",
    "REGISTRY",
    "resolve_id",
    "get_algorithm",
    "list_algorithms",
    "describe",
    "create_stepper",
    "RunInput",
    "AlgorithmStepper",
    "SortStepper",
    "GraphStepper",
    "Snapshot",
    "SortSnapshot",
    "GraphSnapshot",
    "StepResult",
    "NO_PROGRESS",
]
