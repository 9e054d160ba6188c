"""
base.py — Suspendable Stepper Base Classes
===========================================
An AlgorithmStepper is one run of one algorithm, unrolled into an
explicit state machine.  Every variant keeps its loop indices, phase
name and work stacks as plain instance fields, so a call to next() can
always pick up where the previous one left off, whichever thread makes
it.

Contract of next():
    1. Finished already?   → hand back the terminal snapshot again.
    2. Control STOPPED?    → build one synthetic terminal snapshot from
                             the state right now; finished from here on.
    3. Control PAUSED?     → wait up to `timeout` seconds; if still paused,
                             return NO_PROGRESS without touching state.
    4. Otherwise           → _advance() exactly one unit of work and
                             return the snapshot describing it.

Subclasses implement two hooks:
    _advance()          – do one unit, return its snapshot (terminal when done)
    _cancel_snapshot()  – terminal snapshot reflecting the current state
"""

import logging
import threading
from abc import ABC, abstractmethod
from numbers import Integral
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from algoreplay.control import ExecutionControl, RunState
from algoreplay.errors import InvalidInputError
from algoreplay.graph import Graph
from algoreplay.algorithms.step import (
    GraphSnapshot, GraphStepBuilder, Snapshot, SortSnapshot, StepResult, NO_PROGRESS, _unique,
)

logger = logging.getLogger(__name__)


class AlgorithmStepper(ABC):
    """
    Attributes:
        key       : Registry key of the algorithm (set by subclasses).
        control   : The ExecutionControl consulted before every step.
        snapshot  : Last snapshot handed out (None before the first pull).
    """

    key: str = ""

    def __init__(self, control: Optional[ExecutionControl] = None):
        self.control:    ExecutionControl   = control or ExecutionControl()
        self.snapshot:   Optional[Snapshot] = None
        self._finished:  bool              = False
        self._step_no:   int               = 0
        self._lock:      threading.Lock     = threading.Lock()

    # ------------------------------------------------------------------
    # Pull interface
    # ------------------------------------------------------------------
    def next(self, timeout: Optional[float] = 0.0) -> StepResult:
        with self._lock:
            if self._finished:
                return StepResult(self.snapshot, True)

            state = self.control.wait_while_paused(timeout)
            if state is RunState.PAUSED:
                return NO_PROGRESS

            if state is RunState.STOPPED:
                snap = self._cancel_snapshot()
                logger.debug("%s cancelled after %d snapshot(s)", self.key, self._step_no)
            else:
                snap = self._advance()

            self._step_no += 1
            self.snapshot = snap
            if snap.terminal:
                self._finished = True
            return StepResult(snap, self._finished)

    def __iter__(self) -> Iterator[Snapshot]:
        """Yield snapshots until the terminal one, blocking through pauses."""
        while True:
            result = self.next(timeout=None)
            if result.snapshot is not None:
                yield result.snapshot
            if result.finished:
                return

    # ------------------------------------------------------------------
    # Transport mirrors (the control decides; the stepper only reads it)
    # ------------------------------------------------------------------
    def pause(self) -> None:
        self.control.pause()

    def resume(self) -> None:
        self.control.resume()

    def stop(self) -> None:
        self.control.stop()

    @property
    def is_finished(self) -> bool:
        return self._finished

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _advance(self) -> Snapshot:
        ...

    @abstractmethod
    def _cancel_snapshot(self) -> Snapshot:
        ...


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
class SortStepper(AlgorithmStepper):
    """
    Base for the array steppers.  Owns a private copy of the input in
    `_values`; snapshots only ever carry tuple copies of it.
    """

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(control)
        self._values: List[int] = validate_array(values)
        self._n:      int       = len(self._values)

    def _emit(self, *highlighted: int, line: int = -1) -> SortSnapshot:
        return SortSnapshot(
            values=tuple(self._values),
            highlighted=_unique(highlighted),
            step_number=self._step_no,
            pseudocode_line=line,
        )

    def _finish(self, line: int = -1) -> SortSnapshot:
        return SortSnapshot(
            values=tuple(self._values),
            highlighted=(),
            terminal=True,
            step_number=self._step_no,
            pseudocode_line=line,
        )

    def _swap(self, a: int, b: int) -> None:
        self._values[a], self._values[b] = self._values[b], self._values[a]

    def _cancel_snapshot(self) -> SortSnapshot:
        return self._finish()


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------
class GraphStepper(AlgorithmStepper):
    """
    Base for the graph steppers.  The Graph is validated and immutable;
    the stepper's own state is the GraphStepBuilder (visited / frontier),
    the parent pointers, and whatever queue / stack / heap the variant needs.
    """

    requires_target: bool = False
    label:           str  = ""

    def __init__(
        self,
        graph: Graph,
        start: int = 0,
        target: Optional[int] = None,
        control: Optional[ExecutionControl] = None,
    ):
        super().__init__(control)
        if not isinstance(graph, Graph):
            raise InvalidInputError(f"Expected a Graph, got {type(graph).__name__}")
        self.graph:  Graph         = graph
        self.start:  int           = graph.check_vertex(start, "start vertex")
        self.target: Optional[int] = None if target is None else graph.check_vertex(target, "target vertex")
        if self.requires_target and self.target is None:
            raise InvalidInputError(f"A target vertex must be specified for {self.label or self.key}")

        self._sb:      GraphStepBuilder          = GraphStepBuilder()
        self._parent:  Dict[int, Optional[int]]  = {}
        self._reached: bool                      = False

    def _emit(self, active: Tuple[int, ...] = (), line: int = -1) -> GraphSnapshot:
        return self._sb.build(self._step_no, active=active, pseudocode_line=line)

    def _finish(self, line: int = -1) -> GraphSnapshot:
        return self._sb.build(self._step_no, terminal=True, pseudocode_line=line)

    def _finish_search(self, line: int = -1) -> GraphSnapshot:
        """Terminal snapshot for the path searches: the parent-pointer path if a target was given."""
        if self.target is None:
            return self._finish(line)
        path = self._path_to(self.target)
        return self._sb.build(
            self._step_no,
            active=(self.target,) if path else (),
            terminal=True,
            pseudocode_line=line,
            frontier=path,
        )

    def _path_to(self, target: int) -> List[int]:
        """Walk parent pointers target → start, then reverse.  [] if never reached."""
        if target not in self._parent:
            return []
        path = []
        cur: Optional[int] = target
        while cur is not None:
            path.append(cur)
            cur = self._parent[cur]
        path.reverse()
        return path

    def _cancel_snapshot(self) -> GraphSnapshot:
        return self._finish()


def validate_array(values: Sequence[int]) -> List[int]:
    """Copy `values` into a fresh list of ints or raise InvalidInputError."""
    if values is None or isinstance(values, (str, bytes)):
        raise InvalidInputError("Array input must be a sequence of integers")
    try:
        copied = list(values)
    except TypeError:
        raise InvalidInputError("Array input must be a sequence of integers") from None
    if not copied:
        raise InvalidInputError("Array must not be empty")
    for v in copied:
        if isinstance(v, bool) or not isinstance(v, Integral):
            raise InvalidInputError(f"All values must be valid integers (got {v!r})")
    return [int(v) for v in copied]


__all__ = [
    "AlgorithmStepper",
    "SortStepper",
    "GraphStepper",
    "validate_array",
]
