"""
sorting.py — Sorting Steppers
==============================
Nine array steppers, each an explicit state machine over a private copy
of the input.  One call to _advance() = one comparison OR one
relocation, and every snapshot shows a permutation of the input:

  • bubble / selection / quick / heap relocate by swapping
  • insertion / shell move the key down by (gapped) adjacent swaps
  • merge lays the segment out as  merged + rest-of-L + rest-of-R
  • counting / radix fill still-empty output slots with the
    not-yet-placed source elements while the output is being built

The `_phase` field names the state the next call resumes in; the
other underscore fields are the loop cursors a recursive textbook
version would keep on the call stack.
"""

from typing import List, Optional, Sequence, Tuple

from algoreplay.config import get_config
from algoreplay.control import ExecutionControl
from algoreplay.errors import InvalidInputError
from algoreplay.algorithms.base import SortStepper
from algoreplay.algorithms.step import SortSnapshot


# ---------------------------------------------------------------------------
# Bubble
# ---------------------------------------------------------------------------
class BubbleSortStepper(SortStepper):
    key = "bubble"

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(values, control)
        self._i     = 0
        self._j     = 0
        self._phase = "compare"

    def _advance(self) -> SortSnapshot:
        while True:
            if self._phase == "swap":
                j = self._j
                self._swap(j, j + 1)
                self._j += 1
                self._phase = "compare"
                return self._emit(j, j + 1, line=5)

            if self._i >= self._n - 1:
                return self._finish()
            if self._j >= self._n - self._i - 1:
                self._i += 1
                self._j = 0
                continue

            j = self._j
            if self._values[j] > self._values[j + 1]:
                self._phase = "swap"
            else:
                self._j += 1
            return self._emit(j, j + 1, line=4)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------
class SelectionSortStepper(SortStepper):
    key = "selection"

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(values, control)
        self._i     = 0
        self._j     = 1
        self._min   = 0
        self._phase = "compare"

    def _advance(self) -> SortSnapshot:
        if self._i >= self._n:
            return self._finish()

        if self._phase == "new_min":
            j = self._j
            self._min = j
            self._j += 1
            self._phase = "compare"
            return self._emit(self._i, j, self._min, line=6)

        if self._j < self._n:
            i, j, m = self._i, self._j, self._min
            if self._values[j] < self._values[m]:
                self._phase = "new_min"
            else:
                self._j += 1
            return self._emit(i, j, m, line=5)

        # inner scan done: move the minimum into place
        i, m = self._i, self._min
        self._swap(i, m)
        self._i += 1
        self._j = self._i + 1
        self._min = self._i
        return self._emit(i, m, line=7)


# ---------------------------------------------------------------------------
# Insertion & Shell  (gapped insertion; insertion is the gap-1 case)
# ---------------------------------------------------------------------------
class _GappedInsertionStepper(SortStepper):
    compare_line = -1
    swap_line    = -1

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(values, control)
        self._gaps:  List[int] = self._gap_sequence()
        self._g     = 0
        self._gap   = self._gaps[0] if self._gaps else 0
        self._i     = self._gap
        self._j     = self._gap
        self._phase = "compare"

    def _gap_sequence(self) -> List[int]:
        raise NotImplementedError

    def _advance(self) -> SortSnapshot:
        while True:
            gap = self._gap
            if self._phase == "swap":
                j = self._j
                self._swap(j - gap, j)
                self._j -= gap
                self._phase = "compare"
                return self._emit(j - gap, j, line=self.swap_line)

            if self._g >= len(self._gaps):
                return self._finish()
            if self._i >= self._n:
                self._g += 1
                if self._g < len(self._gaps):
                    self._gap = self._gaps[self._g]
                    self._i = self._j = self._gap
                continue
            if self._j < gap:
                self._i += 1
                self._j = self._i
                continue

            j = self._j
            if self._values[j - gap] > self._values[j]:
                self._phase = "swap"
            else:
                self._i += 1
                self._j = self._i
            return self._emit(j - gap, j, line=self.compare_line)


class InsertionSortStepper(_GappedInsertionStepper):
    key          = "insertion"
    compare_line = 3
    swap_line    = 4

    def _gap_sequence(self) -> List[int]:
        return [1]


class ShellSortStepper(_GappedInsertionStepper):
    key          = "shell"
    compare_line = 5
    swap_line    = 6

    def _gap_sequence(self) -> List[int]:
        gaps = []
        gap = self._n // 2
        while gap > 0:
            gaps.append(gap)
            gap //= 2
        return gaps


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------
class MergeSortStepper(SortStepper):
    """
    Top-down merge sort.  Which segments get merged, and in what order,
    depends only on the length, so the whole recursion is flattened up
    front into `_merges`; the data-dependent part is one merge at a time.
    """

    key = "merge"

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(values, control)
        self._merges: List[Tuple[int, int, int]] = []
        self._plan(0, self._n - 1)
        self._t      = 0
        self._left:  List[int] = []
        self._right: List[int] = []
        self._li     = 0
        self._ri     = 0
        self._k      = 0
        self._r      = 0
        self._phase  = "load"

    def _plan(self, l: int, r: int) -> None:
        if l < r:
            m = (l + r) // 2
            self._plan(l, m)
            self._plan(m + 1, r)
            self._merges.append((l, m, r))

    def _advance(self) -> SortSnapshot:
        while True:
            if self._phase == "load":
                if self._t >= len(self._merges):
                    return self._finish()
                l, m, r = self._merges[self._t]
                self._left = self._values[l:m + 1]
                self._right = self._values[m + 1:r + 1]
                self._li = self._ri = 0
                self._k, self._r = l, r
                self._phase = "compare"
                continue

            left_rest = len(self._left) - self._li
            right_rest = len(self._right) - self._ri

            if self._phase == "compare":
                if left_rest and right_rest:
                    self._phase = "place"
                    # L[li] sits at k, R[ri] right after the rest of L
                    return self._emit(self._k, self._k + left_rest, line=9)
                if left_rest or right_rest:
                    self._phase = "drain"
                else:
                    self._t += 1
                    self._phase = "load"
                continue

            if self._phase == "place":
                take_left = self._left[self._li] <= self._right[self._ri]
                if take_left:
                    taken = self._left[self._li]
                    self._li += 1
                else:
                    taken = self._right[self._ri]
                    self._ri += 1
                self._values[self._k:self._r + 1] = (
                    [taken] + self._left[self._li:] + self._right[self._ri:]
                )
                self._k += 1
                self._phase = "compare"
                return self._emit(self._k - 1, line=10 if take_left else 11)

            # drain: one run is empty, the other is already in place
            if left_rest:
                self._li += 1
                line = 12
            else:
                self._ri += 1
                line = 13
            self._k += 1
            self._phase = "compare"
            return self._emit(self._k - 1, line=line)


# ---------------------------------------------------------------------------
# Quick  (Lomuto, last element as pivot)
# ---------------------------------------------------------------------------
class QuickSortStepper(SortStepper):
    key = "quick"

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(values, control)
        # pending (low, high) ranges; top of stack is partitioned next
        self._ranges: List[Tuple[int, int]] = [(0, self._n - 1)]
        self._low   = 0
        self._high  = 0
        self._pivot = 0
        self._i     = 0
        self._j     = 0
        self._phase = "pick"

    def _advance(self) -> SortSnapshot:
        while True:
            if self._phase == "pick":
                if not self._ranges:
                    return self._finish()
                low, high = self._ranges.pop()
                if low >= high:
                    continue
                self._low, self._high = low, high
                self._pivot = self._values[high]
                self._i = low - 1
                self._j = low
                self._phase = "compare"
                continue

            if self._phase == "swap":
                self._i += 1
                i, j = self._i, self._j
                self._swap(i, j)
                self._j += 1
                self._phase = "compare"
                return self._emit(i, j, line=10)

            if self._j < self._high:
                j = self._j
                if self._values[j] < self._pivot:
                    self._phase = "swap"
                else:
                    self._j += 1
                return self._emit(j, self._high, line=9)

            p = self._i + 1
            self._swap(p, self._high)
            # left part first: push it last
            self._ranges.append((p + 1, self._high))
            self._ranges.append((self._low, p - 1))
            self._phase = "pick"
            return self._emit(p, self._high, line=11)


# ---------------------------------------------------------------------------
# Heap
# ---------------------------------------------------------------------------
class HeapSortStepper(SortStepper):
    key = "heap"

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(values, control)
        self._stage    = "build"
        self._build_i  = self._n // 2 - 1
        self._end      = self._n - 1
        # sift-down cursor
        self._sifting  = False
        self._size     = 0
        self._node     = 0
        self._largest  = 0
        self._sift_phase = "left"

    def _start_sift(self, size: int, node: int) -> None:
        self._sifting = True
        self._size = size
        self._node = self._largest = node
        self._sift_phase = "left"

    def _sift_step(self) -> Optional[SortSnapshot]:
        """One comparison or swap of the current sift-down; None once it settles."""
        while True:
            if self._sift_phase in ("left", "right"):
                offset, line = (1, 8) if self._sift_phase == "left" else (2, 9)
                self._sift_phase = "right" if self._sift_phase == "left" else "swap"
                child = 2 * self._node + offset
                if child < self._size:
                    largest = self._largest
                    if self._values[child] > self._values[largest]:
                        self._largest = child
                    return self._emit(largest, child, line=line)
                continue

            if self._largest != self._node:
                node, largest = self._node, self._largest
                self._swap(node, largest)
                self._node = largest
                self._sift_phase = "left"
                return self._emit(node, largest, line=11)
            self._sifting = False
            return None

    def _advance(self) -> SortSnapshot:
        while True:
            if self._sifting:
                snap = self._sift_step()
                if snap is not None:
                    return snap
                continue

            if self._stage == "build":
                if self._build_i >= 0:
                    self._start_sift(self._n, self._build_i)
                    self._build_i -= 1
                else:
                    self._stage = "extract"
                continue

            if self._end > 0:
                end = self._end
                self._swap(0, end)
                self._start_sift(end, 0)
                self._end -= 1
                return self._emit(0, end, line=3)
            return self._finish()


# ---------------------------------------------------------------------------
# Counting & Radix  (distribution passes)
# ---------------------------------------------------------------------------
class _DistributionSortStepper(SortStepper):
    """
    One or more stable counting passes.  Subclasses say how many passes
    there are, how many buckets a pass has, and which bucket a value
    falls in during the current pass.
    """

    count_line = -1
    place_line = -1

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(values, control)
        self._pass    = 0
        self._source: List[int] = []
        self._count:  List[int] = []
        self._output: List[Optional[int]] = []
        self._i       = 0
        self._phase   = "begin"

    def _pass_total(self) -> int:
        raise NotImplementedError

    def _bucket_total(self) -> int:
        raise NotImplementedError

    def _bucket(self, value: int) -> int:
        raise NotImplementedError

    def _show_partial(self, unplaced: List[int]) -> None:
        rest = iter(unplaced)
        self._values = [v if v is not None else next(rest) for v in self._output]

    def _advance(self) -> SortSnapshot:
        while True:
            if self._phase == "begin":
                if self._pass >= self._pass_total():
                    return self._finish()
                self._source = list(self._values)
                self._count = [0] * self._bucket_total()
                self._output = [None] * self._n
                self._i = 0
                self._phase = "count"
                continue

            if self._phase == "count":
                if self._i < self._n:
                    i = self._i
                    self._count[self._bucket(self._source[i])] += 1
                    self._i += 1
                    return self._emit(i, line=self.count_line)
                for b in range(1, len(self._count)):
                    self._count[b] += self._count[b - 1]
                self._i = self._n - 1
                self._phase = "place"
                continue

            # place, right to left so equal keys keep their order
            if self._i >= 0:
                i = self._i
                value = self._source[i]
                bucket = self._bucket(value)
                pos = self._count[bucket] - 1
                self._output[pos] = value
                self._count[bucket] -= 1
                self._i -= 1
                self._show_partial(self._source[:i])
                return self._emit(pos, line=self.place_line)

            self._pass += 1
            self._phase = "begin"


class CountingSortStepper(_DistributionSortStepper):
    key        = "counting"
    count_line = 2
    place_line = 5

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(values, control)
        self._min = min(self._values)
        self._max = max(self._values)
        cap = get_config().get("inputs", {}).get("max_counting_range", 100000)
        if self._max - self._min + 1 > cap:
            raise InvalidInputError(
                f"Counting sort value range {self._min}..{self._max} exceeds {cap} buckets"
            )

    def _pass_total(self) -> int:
        return 1

    def _bucket_total(self) -> int:
        return self._max - self._min + 1

    def _bucket(self, value: int) -> int:
        return value - self._min


class RadixSortStepper(_DistributionSortStepper):
    """LSD radix sort, base 10; one pass per digit of the maximum."""

    key        = "radix"
    count_line = 3
    place_line = 6

    def __init__(self, values: Sequence[int], control: Optional[ExecutionControl] = None):
        super().__init__(values, control)
        if min(self._values) < 0:
            raise InvalidInputError("Radix sort requires non-negative integers")
        self._digits = len(str(max(self._values)))

    def _pass_total(self) -> int:
        return self._digits

    def _bucket_total(self) -> int:
        return 10

    def _bucket(self, value: int) -> int:
        return (value // 10 ** self._pass) % 10


__all__ = [
    "BubbleSortStepper",
    "SelectionSortStepper",
    "InsertionSortStepper",
    "MergeSortStepper",
    "QuickSortStepper",
    "HeapSortStepper",
    "ShellSortStepper",
    "CountingSortStepper",
    "RadixSortStepper",
]
