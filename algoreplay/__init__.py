"""
algoreplay
----------
Stepwise algorithm execution: suspendable sorting and graph steppers,
a pause / resume / stop control, and a timed playback controller.

    from algoreplay.algorithms import create_stepper
    from algoreplay.engine import PlaybackController, Recorder
"""

__version__ = "0.1.0"
