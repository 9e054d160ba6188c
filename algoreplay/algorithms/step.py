"""
step.py — Algorithm Step Snapshots
===================================
Every stepper hands out snapshots.  A snapshot is a frozen-in-time
picture of everything the render layer needs for one frame:

    • SortSnapshot  – the full array, the indices under comparison /
                      relocation, and whether this is the terminal frame
    • GraphSnapshot – visitation order, the path / tree built so far,
                      the vertices being examined right now

Design decisions:
  - Snapshots are frozen dataclasses holding tuples only.  The stepper
    is the only writer of its working buffer; snapshots are copies, so
    a renderer can never alias (or corrupt) live algorithm state.
  - `step_number` and `pseudocode_line` ride along on every snapshot so
    the pseudocode panel can follow the run without re-deriving it.
  - StepResult is what next() returns.  `StepResult(None, False)` is the
    "no progress" answer given while the run is paused.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, NamedTuple, Optional, Tuple, Union


def _unique(indices: Iterable[int]) -> Tuple[int, ...]:
    """Drop repeats but keep first-seen order: (2, 5, 2) → (2, 5)."""
    seen = []
    for i in indices:
        if i not in seen:
            seen.append(i)
    return tuple(seen)


@dataclass(frozen=True)
class SortSnapshot:
    """
    Attributes:
        values          : Full array state at this instant.
        highlighted     : Indices under comparison / mutation (0–3, no repeats).
        terminal        : True on the very last snapshot of the run only.
        step_number     : 0-based index of this snapshot in the run.
        pseudocode_line : Line of the algorithm's pseudocode executing now (-1 = none).
    """

    values:           Tuple[int, ...]
    highlighted:      Tuple[int, ...]   = ()
    terminal:         bool              = False
    step_number:      int               = 0
    pseudocode_line:  int               = -1

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["values"] = list(self.values)
        d["highlighted"] = list(self.highlighted)
        return d


@dataclass(frozen=True)
class GraphSnapshot:
    """
    Attributes:
        visited         : Vertex ids in visitation order (no duplicates, append-only).
        frontier        : Path / tree / solution built so far.  For the MST
                          family this is the tree edges flattened as u, v pairs.
        active          : 0–2 vertex ids being examined right now.
        terminal        : True on the very last snapshot of the run only.
        step_number     : 0-based index of this snapshot in the run.
        pseudocode_line : Line of the algorithm's pseudocode executing now (-1 = none).
    """

    visited:          Tuple[int, ...]   = ()
    frontier:         Tuple[int, ...]   = ()
    active:           Tuple[int, ...]   = ()
    terminal:         bool              = False
    step_number:      int               = 0
    pseudocode_line:  int               = -1

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        for key in ("visited", "frontier", "active"):
            d[key] = list(d[key])
        return d


Snapshot = Union[SortSnapshot, GraphSnapshot]


class StepResult(NamedTuple):
    snapshot: Optional[Snapshot]
    finished: bool

    @property
    def progressed(self) -> bool:
        return self.snapshot is not None


NO_PROGRESS = StepResult(None, False)


# ---------------------------------------------------------------------------
# Convenience builder so graph steppers don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class GraphStepBuilder:
    """
    Mutable scratch-pad that graph steppers use to construct snapshots.

    Usage inside a stepper:
        sb = GraphStepBuilder()
        sb.visit(3)
        sb.frontier.append(3)
        return sb.build(step_number=7, active=(3,), pseudocode_line=5)
    """

    def __init__(self):
        self.reset()

    def reset(self):
        self.visited:   list = []
        self.frontier:  list = []
        self._seen:     set  = set()

    # -- helpers --
    def visit(self, vertex: int) -> bool:
        """Append to `visited` unless already there.  Returns True if new."""
        if vertex in self._seen:
            return False
        self._seen.add(vertex)
        self.visited.append(vertex)
        return True

    def is_visited(self, vertex: int) -> bool:
        return vertex in self._seen

    def build(
        self,
        step_number: int,
        active: Tuple[int, ...] = (),
        terminal: bool = False,
        pseudocode_line: int = -1,
        frontier: Optional[Iterable[int]] = None,
    ) -> GraphSnapshot:
        return GraphSnapshot(
            visited=tuple(self.visited),
            frontier=tuple(self.frontier if frontier is None else frontier),
            active=_unique(active),
            terminal=terminal,
            step_number=step_number,
            pseudocode_line=pseudocode_line,
        )


__all__ = [
    "SortSnapshot",
    "GraphSnapshot",
    "Snapshot",
    "StepResult",
    "NO_PROGRESS",
    "GraphStepBuilder",
]
