"""
errors.py — Error Taxonomy
===========================
Every failure the engine raises on purpose derives from AlgoReplayError.

    InvalidInputError       malformed array / graph, missing A* target,
                            unknown algorithm id.  Raised at construction,
                            before a single snapshot exists.
    InvalidTransitionError  transport misuse on the PlaybackController
                            (e.g. resume() while idle).  Rejected with no
                            side effects.

Pulling past the end of a run is NOT an error: next() keeps handing back
the terminal snapshot.
"""


class AlgoReplayError(Exception):
    """Base class for all algoreplay errors."""


class InvalidInputError(AlgoReplayError, ValueError):
    pass


class InvalidTransitionError(AlgoReplayError, RuntimeError):
    pass


__all__ = [
    "AlgoReplayError",
    "InvalidInputError",
    "InvalidTransitionError",
]
