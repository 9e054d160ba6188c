"""Tests for the sorting steppers and the stepper pull contract."""

import threading
from unittest.mock import patch

import pytest

from algoreplay.control import ExecutionControl
from algoreplay.errors import InvalidInputError
from algoreplay.algorithms import AlgorithmId, AlgorithmKind, create_stepper, list_algorithms
from algoreplay.algorithms.pseudocode import LISTINGS
from algoreplay.algorithms.sorting import (
    BubbleSortStepper, CountingSortStepper, MergeSortStepper, RadixSortStepper,
)
from algoreplay.algorithms.step import NO_PROGRESS

SORT_IDS = [a.key for a in list_algorithms(AlgorithmKind.SORTING)]

ARRAYS = [
    [5, 3, 8, 1],
    [1, 2, 3, 4, 5, 6],
    [9, 7, 5, 3, 1],
    [4, 4, 2, 2, 9, 0, 4],
    [42],
    [2, 1],
    [31, 415, 9, 26, 5, 35, 89, 79, 3, 23, 84, 62],
]


# --- every sort, every array ---

class TestAllSorts:
    @pytest.mark.parametrize("key", SORT_IDS)
    @pytest.mark.parametrize("values", ARRAYS)
    def test_ends_sorted(self, key, values):
        snaps = list(create_stepper(key, values))
        assert list(snaps[-1].values) == sorted(values)
        assert snaps[-1].highlighted == ()

    @pytest.mark.parametrize("key", SORT_IDS)
    @pytest.mark.parametrize("values", ARRAYS)
    def test_only_last_snapshot_is_terminal(self, key, values):
        snaps = list(create_stepper(key, values))
        assert snaps[-1].terminal
        assert not any(s.terminal for s in snaps[:-1])

    @pytest.mark.parametrize("key", SORT_IDS)
    @pytest.mark.parametrize("values", ARRAYS)
    def test_every_snapshot_is_a_permutation(self, key, values):
        for snap in create_stepper(key, values):
            assert sorted(snap.values) == sorted(values)

    @pytest.mark.parametrize("key", SORT_IDS)
    def test_highlights_in_range_and_unique(self, key):
        values = ARRAYS[-1]
        for snap in create_stepper(key, values):
            assert len(snap.highlighted) <= 3
            assert len(set(snap.highlighted)) == len(snap.highlighted)
            assert all(0 <= i < len(values) for i in snap.highlighted)

    @pytest.mark.parametrize("key", SORT_IDS)
    def test_step_numbers_are_consecutive(self, key):
        snaps = list(create_stepper(key, ARRAYS[0]))
        assert [s.step_number for s in snaps] == list(range(len(snaps)))

    @pytest.mark.parametrize("key", SORT_IDS)
    def test_pseudocode_lines_point_into_listing(self, key):
        listing = LISTINGS[key]
        for snap in create_stepper(key, ARRAYS[-1]):
            assert snap.pseudocode_line == -1 or 0 <= snap.pseudocode_line < len(listing)

    @pytest.mark.parametrize("key", SORT_IDS)
    def test_input_is_not_mutated(self, key):
        values = [3, 1, 2]
        list(create_stepper(key, values))
        assert values == [3, 1, 2]

    @pytest.mark.parametrize("key", SORT_IDS)
    def test_empty_input_rejected(self, key):
        with pytest.raises(InvalidInputError):
            create_stepper(key, [])


# --- concrete sequences ---

class TestBubble:
    def test_first_snapshot_compares_first_pair(self):
        first = BubbleSortStepper([5, 3, 8, 1]).next().snapshot
        assert first.values == (5, 3, 8, 1)
        assert first.highlighted == (0, 1)
        assert first.pseudocode_line == 4

    def test_second_snapshot_is_the_swap(self):
        s = BubbleSortStepper([5, 3, 8, 1])
        s.next()
        swap = s.next().snapshot
        assert swap.values == (3, 5, 8, 1)
        assert swap.highlighted == (0, 1)
        assert swap.pseudocode_line == 5

    def test_terminal_snapshot(self):
        snaps = list(BubbleSortStepper([5, 3, 8, 1]))
        assert snaps[-1].values == (1, 3, 5, 8)
        assert snaps[-1].highlighted == ()

    def test_sorted_input_only_compares(self):
        snaps = list(BubbleSortStepper([1, 2, 3]))
        # 2 + 1 comparisons, then the terminal frame
        assert len(snaps) == 4
        assert all(s.pseudocode_line == 4 for s in snaps[:-1])

    def test_single_element_is_immediately_terminal(self):
        snaps = list(BubbleSortStepper([7]))
        assert len(snaps) == 1
        assert snaps[0].terminal


class TestMerge:
    def test_compare_highlights_both_run_heads(self):
        first = MergeSortStepper([2, 1]).next().snapshot
        assert first.highlighted == (0, 1)
        assert first.pseudocode_line == 9

    def test_place_takes_right_head(self):
        s = MergeSortStepper([2, 1])
        s.next()
        placed = s.next().snapshot
        assert placed.values == (1, 2)
        assert placed.pseudocode_line == 11


class TestDistributionSorts:
    def test_counting_handles_negatives(self):
        snaps = list(CountingSortStepper([3, -2, 0, -2, 7]))
        assert snaps[-1].values == (-2, -2, 0, 3, 7)

    def test_radix_rejects_negatives(self):
        with pytest.raises(InvalidInputError):
            RadixSortStepper([3, -1, 2])

    def test_radix_runs_one_pass_per_digit(self):
        values = [170, 45, 75, 90, 802, 24, 2, 66]
        snaps = list(RadixSortStepper(values))
        # each pass: n count frames + n place frames; 3 digits; plus terminal
        assert len(snaps) == 3 * 2 * len(values) + 1
        assert list(snaps[-1].values) == sorted(values)


class TestInputValidation:
    @pytest.mark.parametrize("bad", [None, "5,3,1", b"\x01", 12, [1, "2"], [1.5, 2], [True, False]])
    def test_rejects_non_integer_arrays(self, bad):
        with pytest.raises(InvalidInputError):
            BubbleSortStepper(bad)

    def test_accepts_tuples(self):
        snaps = list(BubbleSortStepper((2, 1)))
        assert snaps[-1].values == (1, 2)


# --- pull contract ---

class TestPullContract:
    def test_next_after_finish_returns_final_snapshot(self):
        s = BubbleSortStepper([2, 1])
        final = list(s)[-1]
        again = s.next()
        assert again.finished
        assert again.snapshot is final
        assert s.next().snapshot is final

    def test_paused_next_does_not_advance(self):
        paused = BubbleSortStepper([5, 3, 8, 1])
        twin = BubbleSortStepper([5, 3, 8, 1])
        for _ in range(3):
            paused.next()
            twin.next()

        paused.pause()
        assert paused.next() == NO_PROGRESS
        assert paused.next() == NO_PROGRESS
        paused.resume()

        assert paused.next().snapshot == twin.next().snapshot

    def test_stop_emits_one_terminal_snapshot(self):
        s = BubbleSortStepper([5, 3, 8, 1])
        s.next()
        s.next()
        s.stop()
        result = s.next()
        assert result.finished
        assert result.snapshot.terminal
        assert result.snapshot.values == (3, 5, 8, 1)
        assert result.snapshot.highlighted == ()
        assert s.next().snapshot is result.snapshot

    def test_stop_before_first_step(self):
        s = create_stepper(AlgorithmId.QUICK, [3, 2, 1])
        s.stop()
        snaps = list(s)
        assert len(snaps) == 1
        assert snaps[0].terminal
        assert snaps[0].values == (3, 2, 1)

    def test_blocking_next_wakes_on_resume(self):
        control = ExecutionControl()
        control.pause()
        s = BubbleSortStepper([2, 1], control=control)
        results = []

        t = threading.Thread(target=lambda: results.append(s.next(timeout=None)))
        t.start()
        t.join(0.05)
        assert t.is_alive()

        control.resume()
        t.join(2)
        assert not t.is_alive()
        assert results[0].snapshot.highlighted == (0, 1)

    def test_blocking_next_wakes_on_stop(self):
        control = ExecutionControl()
        control.pause()
        s = BubbleSortStepper([2, 1], control=control)
        results = []

        t = threading.Thread(target=lambda: results.append(s.next(timeout=None)))
        t.start()
        control.stop()
        t.join(2)
        assert results[0].finished

    def test_shared_control_pauses_its_stepper(self):
        control = ExecutionControl()
        s = create_stepper("heap", [4, 1, 3], control=control)
        assert s.control is control
        control.pause()
        assert not s.next().progressed


class TestCountingRange:
    def test_wide_range_rejected_at_construction(self):
        with pytest.raises(InvalidInputError, match="exceeds"):
            CountingSortStepper([0, 10 ** 11])

    @patch("algoreplay.algorithms.sorting.get_config",
           return_value={"inputs": {"max_counting_range": 5}})
    def test_cap_from_config(self, mock_config):
        assert list(CountingSortStepper([3, 7]))[-1].values == (3, 7)
        with pytest.raises(InvalidInputError):
            CountingSortStepper([3, 8])
