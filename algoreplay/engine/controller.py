"""
controller.py — Timed Playback Controller
==========================================
The PlaybackController is the ONLY object a front end drives during a
run.  It owns the current stepper and its ExecutionControl, pushes every
snapshot into a render sink, and paces the run with a speed-derived
delay.

State machine:
    IDLE      →  start()              →  RUNNING   (or PAUSED with paused=True)
    RUNNING   →  pause()              →  PAUSED
    PAUSED    →  resume()             →  RUNNING
    RUNNING   →  (terminal snapshot)  →  FINISHED
    PAUSED    →  step() … terminal    →  FINISHED
    any run   →  stop()               →  STOPPED → IDLE
    FINISHED  →  start()              →  RUNNING

Threading:
  The drive loop runs on one daemon thread per run.  Everything that
  touches the stepper or the sink happens under `_lock`, so step() from a
  request thread and the loop never deliver at the same time.  A paused
  loop sleeps inside ExecutionControl.wait_while_paused(); the delay
  between snapshots is an Event wait, so stop() cuts it short.
"""

import logging
import threading
from enum import Enum
from typing import Any, Optional, Union

from algoreplay.config import get_config
from algoreplay.control import ExecutionControl, RunState
from algoreplay.errors import InvalidInputError, InvalidTransitionError
from algoreplay.algorithms import AlgorithmId, RunInput, create_stepper, resolve_id
from algoreplay.algorithms.base import AlgorithmStepper
from algoreplay.algorithms.step import Snapshot

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class TransportState(Enum):
    IDLE     = "idle"
    RUNNING  = "running"
    PAUSED   = "paused"
    FINISHED = "finished"
    STOPPED  = "stopped"


_ACTIVE = (TransportState.RUNNING, TransportState.PAUSED)


# ---------------------------------------------------------------------------
# Speed → delay
# ---------------------------------------------------------------------------
MIN_SPEED = 1
MAX_SPEED = 100
DELAY_MODES = ("coarse", "fine")


def clamp_speed(speed: float) -> int:
    return int(max(MIN_SPEED, min(MAX_SPEED, speed)))


def delay_units(speed: float, mode: str = "coarse") -> float:
    """
    Delay between two snapshots, in time units (milliseconds by default).

        coarse : max(1, 101 - speed)    speed 1 → 100, speed 100 → 1
        fine   : 1000 / speed           speed 1 → 1000, speed 100 → 10
    """
    speed = clamp_speed(speed)
    if mode == "coarse":
        return float(max(1, 101 - speed))
    if mode == "fine":
        return 1000.0 / speed
    raise InvalidInputError(f"Unknown delay mode: {mode!r} (expected one of {DELAY_MODES})")


# ---------------------------------------------------------------------------
# Render sink
# ---------------------------------------------------------------------------
class RenderSink:
    """
    Where snapshots go.  Subclass and override; the base class discards
    everything.  render() is called in snapshot order, never concurrently.
    """

    def render(self, snapshot: Snapshot) -> None:
        pass

    def clear(self) -> None:
        pass


# ---------------------------------------------------------------------------
# PlaybackController
# ---------------------------------------------------------------------------
class PlaybackController:
    """
    Attributes:
        sink        : RenderSink that receives every delivered snapshot.
        speed       : 1 (slowest) … 100 (fastest).
        delay_mode  : "coarse" or "fine"; see delay_units().
        time_unit   : Seconds per delay unit.
    """

    def __init__(
        self,
        sink: Optional[RenderSink] = None,
        speed: Optional[float] = None,
        delay_mode: Optional[str] = None,
        time_unit: Optional[float] = None,
    ):
        cfg = get_config().get("playback", {})
        self.sink:        RenderSink = sink or RenderSink()
        self.speed:       int        = clamp_speed(cfg.get("speed", 50) if speed is None else speed)
        self.delay_mode:  str        = delay_mode or cfg.get("delay_mode", "coarse")
        self.time_unit:   float      = cfg.get("time_unit", 0.001) if time_unit is None else time_unit
        delay_units(self.speed, self.delay_mode)   # reject an unknown mode now, not mid-run

        self._lock:          threading.RLock              = threading.RLock()
        self._state:         TransportState               = TransportState.IDLE
        self._stepper:       Optional[AlgorithmStepper]   = None
        self._control:       Optional[ExecutionControl]   = None
        self._thread:        Optional[threading.Thread]   = None
        self._wake:          threading.Event              = threading.Event()
        self._snapshot:      Optional[Snapshot]           = None
        self._algorithm_id:  Optional[AlgorithmId]        = None
        self._delivered:     int                          = 0
        self._rendering:     Optional[threading.Thread]   = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(
        self,
        algorithm_id: Union[AlgorithmId, str],
        data: RunInput,
        paused: bool = False,
        **options: Any,
    ) -> None:
        """Begin a new run.  Only allowed from IDLE or FINISHED."""
        with self._lock:
            if self._state in _ACTIVE:
                raise InvalidTransitionError(
                    f"A run is already {self._state.value}; stop it before starting another"
                )
            if self._state is TransportState.FINISHED:
                self._teardown()

            algo = resolve_id(algorithm_id)
            control = ExecutionControl()
            if paused:
                control.pause()
            # construction errors propagate from here with nothing changed
            stepper = create_stepper(algo, data, control=control, **options)

            self.sink.clear()
            self._stepper = stepper
            self._control = control
            self._algorithm_id = algo
            self._snapshot = None
            self._delivered = 0
            self._wake = threading.Event()
            self._state = TransportState.PAUSED if paused else TransportState.RUNNING
            self._thread = threading.Thread(
                target=self._drive,
                args=(stepper, control, self._wake),
                name=f"algoreplay-{algo.value}",
                daemon=True,
            )
            self._thread.start()
            logger.info("run started: %s (%s)", algo.value, self._state.value)

    def stop(self) -> bool:
        """Cancel the run and return to IDLE.  Safe to call any number of times."""
        with self._lock:
            if self._state is TransportState.IDLE:
                return False
            self._state = TransportState.STOPPED
            thread = self._thread
            # a sink calling stop() from render() must not join under the lock
            current = threading.current_thread()
            join = thread is not None and thread is not current and self._rendering is not current
            self._teardown()
            logger.info("run stopped after %d snapshot(s)", self._delivered)

        if join:
            thread.join()
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the drive loop.  Returns True if it has exited."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def pause(self) -> bool:
        with self._lock:
            self._require_run("pause")
            if self._state is not TransportState.RUNNING:
                return False
            self._control.pause()
            self._state = TransportState.PAUSED
            logger.debug("paused")
            return True

    def resume(self) -> bool:
        with self._lock:
            self._require_run("resume")
            if self._state is not TransportState.PAUSED:
                return False
            self._control.resume()
            self._state = TransportState.RUNNING
            logger.debug("resumed")
            return True

    def step(self) -> Optional[Snapshot]:
        """Deliver exactly one snapshot and leave the run PAUSED."""
        with self._lock:
            self._require_run("step")
            if self._state is not TransportState.PAUSED and self._state is not TransportState.RUNNING:
                return None
            self._control.pause()
            self._state = TransportState.PAUSED

            # the loop thread cannot get the lock until we re-pause
            self._control.resume()
            try:
                result = self._stepper.next()
            finally:
                self._control.pause()

            if result.snapshot is None:
                return None
            self._deliver(result.snapshot)
            if result.finished and self._control is not None:
                self._finish()
            return result.snapshot

    def set_speed(self, speed: float) -> int:
        """Takes effect from the next delay on.  Returns the clamped value."""
        with self._lock:
            self.speed = clamp_speed(speed)
            return self.speed

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> TransportState:
        with self._lock:
            return self._state

    @property
    def snapshot(self) -> Optional[Snapshot]:
        """Last snapshot delivered to the sink."""
        with self._lock:
            return self._snapshot

    @property
    def algorithm_id(self) -> Optional[AlgorithmId]:
        with self._lock:
            return self._algorithm_id

    @property
    def delivered(self) -> int:
        with self._lock:
            return self._delivered

    @property
    def delay(self) -> float:
        """Current delay between snapshots, in seconds."""
        return delay_units(self.speed, self.delay_mode) * self.time_unit

    # ------------------------------------------------------------------
    # Drive loop  (runs on the run's own thread)
    # ------------------------------------------------------------------
    def _drive(self, stepper: AlgorithmStepper, control: ExecutionControl, wake: threading.Event) -> None:
        try:
            while True:
                if control.wait_while_paused(None) is RunState.STOPPED:
                    return
                with self._lock:
                    if self._stepper is not stepper or self._state not in _ACTIVE:
                        return
                    result = stepper.next()
                    if result.snapshot is None:
                        # paused between the wait and the lock; park again
                        continue
                    self._deliver(result.snapshot)
                    if self._stepper is not stepper:
                        # the sink stopped or restarted the run
                        return
                    if result.finished:
                        self._finish()
                        return
                    delay = self.delay
                if wake.wait(delay):
                    return
        except Exception:
            logger.exception("drive loop for %s failed", stepper.key)
            with self._lock:
                if self._stepper is stepper:
                    self._teardown()

    # ------------------------------------------------------------------
    # Internal  (callers hold _lock)
    # ------------------------------------------------------------------
    def _require_run(self, action: str) -> None:
        if self._state is TransportState.IDLE or self._stepper is None:
            raise InvalidTransitionError(f"Cannot {action}: no run in progress")

    def _deliver(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self._delivered += 1
        self._rendering = threading.current_thread()
        try:
            self.sink.render(snapshot)
        finally:
            self._rendering = None

    def _finish(self) -> None:
        self._state = TransportState.FINISHED
        # releases a loop thread still parked on a paused control
        if self._control is not None:
            self._control.stop()
        self._wake.set()
        logger.info("run finished: %s, %d snapshot(s)", self._algorithm_id.value, self._delivered)

    def _teardown(self) -> None:
        if self._control is not None:
            self._control.stop()
        self._wake.set()
        self._stepper = None
        self._control = None
        self._thread = None
        self._snapshot = None
        self.sink.clear()
        self._state = TransportState.IDLE

    def __repr__(self) -> str:
        algo = self._algorithm_id.value if self._algorithm_id else None
        return f"PlaybackController(state={self._state.value}, algorithm={algo}, speed={self.speed})"


__all__ = [
    "TransportState",
    "RenderSink",
    "PlaybackController",
    "clamp_speed",
    "delay_units",
    "MIN_SPEED",
    "MAX_SPEED",
]
