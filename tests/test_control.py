"""Tests for ExecutionControl: transitions and cross-thread wake-ups."""

import threading
import time

from algoreplay.control import ExecutionControl, RunState


class TestTransitions:
    def test_starts_running(self):
        c = ExecutionControl()
        assert c.state is RunState.RUNNING
        assert not c.is_paused
        assert not c.is_stopped

    def test_pause_and_resume(self):
        c = ExecutionControl()
        assert c.pause() is True
        assert c.is_paused
        assert c.resume() is True
        assert c.state is RunState.RUNNING

    def test_pause_twice_is_a_no_op(self):
        c = ExecutionControl()
        c.pause()
        assert c.pause() is False
        assert c.is_paused

    def test_resume_while_running_is_a_no_op(self):
        assert ExecutionControl().resume() is False

    def test_stop_is_one_way(self):
        c = ExecutionControl()
        assert c.stop() is True
        assert c.resume() is False
        assert c.pause() is False
        assert c.is_stopped

    def test_stop_twice(self):
        c = ExecutionControl()
        c.stop()
        assert c.stop() is False
        assert c.state is RunState.STOPPED

    def test_repr_names_state(self):
        c = ExecutionControl()
        c.pause()
        assert "paused" in repr(c)


class TestWaitWhilePaused:
    def test_returns_immediately_when_running(self):
        assert ExecutionControl().wait_while_paused(None) is RunState.RUNNING

    def test_zero_timeout_only_looks(self):
        c = ExecutionControl()
        c.pause()
        t0 = time.monotonic()
        assert c.wait_while_paused(0) is RunState.PAUSED
        assert time.monotonic() - t0 < 0.5

    def test_times_out_while_paused(self):
        c = ExecutionControl()
        c.pause()
        assert c.wait_while_paused(0.02) is RunState.PAUSED

    def test_resume_wakes_waiter(self):
        c = ExecutionControl()
        c.pause()
        seen = []
        t = threading.Thread(target=lambda: seen.append(c.wait_while_paused(None)))
        t.start()
        t.join(0.05)
        assert t.is_alive()

        c.resume()
        t.join(2)
        assert seen == [RunState.RUNNING]

    def test_stop_wakes_waiter(self):
        c = ExecutionControl()
        c.pause()
        seen = []
        t = threading.Thread(target=lambda: seen.append(c.wait_while_paused(None)))
        t.start()
        c.stop()
        t.join(2)
        assert seen == [RunState.STOPPED]
