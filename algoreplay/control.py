"""
control.py — Pause / Resume / Stop Token
=========================================
ExecutionControl is the flag a driver shares with a running stepper.

State machine:
    RUNNING  →  pause()   →  PAUSED
    PAUSED   →  resume()  →  RUNNING
    any      →  stop()    →  STOPPED     (one-way)

Only the driver writes; the stepper only reads, at the suspension point
in front of every step.  All reads and writes go through one
threading.Condition, so a transition that lands "between" two
suspension checks is never torn, and a paused reader sleeps on the
condition instead of spinning.
"""

import threading
from enum import Enum
from typing import Optional


class RunState(Enum):
    RUNNING = "running"
    PAUSED  = "paused"
    STOPPED = "stopped"


class ExecutionControl:

    def __init__(self):
        self._cond:  threading.Condition = threading.Condition()
        self._state: RunState            = RunState.RUNNING

    # ------------------------------------------------------------------
    # Driver side
    # ------------------------------------------------------------------
    def pause(self) -> bool:
        """RUNNING → PAUSED.  Returns True if the state changed."""
        with self._cond:
            if self._state is not RunState.RUNNING:
                return False
            self._state = RunState.PAUSED
            self._cond.notify_all()
            return True

    def resume(self) -> bool:
        """PAUSED → RUNNING.  Returns True if the state changed."""
        with self._cond:
            if self._state is not RunState.PAUSED:
                return False
            self._state = RunState.RUNNING
            self._cond.notify_all()
            return True

    def stop(self) -> bool:
        """Any → STOPPED.  Returns True on the first call only."""
        with self._cond:
            if self._state is RunState.STOPPED:
                return False
            self._state = RunState.STOPPED
            self._cond.notify_all()
            return True

    # ------------------------------------------------------------------
    # Stepper side
    # ------------------------------------------------------------------
    @property
    def state(self) -> RunState:
        with self._cond:
            return self._state

    @property
    def is_paused(self) -> bool:
        return self.state is RunState.PAUSED

    @property
    def is_stopped(self) -> bool:
        return self.state is RunState.STOPPED

    def wait_while_paused(self, timeout: Optional[float] = None) -> RunState:
        """
        Block while PAUSED, for at most `timeout` seconds (None = forever,
        0 = just look).  Returns the state observed on the way out.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._state is not RunState.PAUSED, timeout)
            return self._state

    def __repr__(self) -> str:
        return f"ExecutionControl(state={self.state.value})"
