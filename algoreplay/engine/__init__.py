"""
engine/
-------
Playback & recording layer.

    from algoreplay.engine import PlaybackController, Recorder
"""

from algoreplay.engine.controller import (
    PlaybackController, RenderSink, TransportState, clamp_speed, delay_units,
)
from algoreplay.engine.recorder import Recorder, RunMetrics

__all__ = [
    "PlaybackController",
    "RenderSink",
    "TransportState",
    "clamp_speed",
    "delay_units",
    "Recorder",
    "RunMetrics",
]
