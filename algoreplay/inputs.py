"""
inputs.py — Run Inputs
=======================
Everything a stepper consumes is built here, outside the stepper, so
that randomness never leaks into a run:

    generate_random_array(size, seed=…)   → list[int]
    parse_array("5, 3, 8, 1")             → [5, 3, 8, 1]
    check_array([5, 3, 8, 1])             → same list, or InvalidInputError
    GraphInput(graph, start, target)      → what the graph steppers take
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from algoreplay.config import get_config
from algoreplay.errors import InvalidInputError
from algoreplay.graph import Graph


def _input_limits() -> Dict[str, Any]:
    return get_config().get("inputs", {})


def generate_random_array(
    size: int,
    low: Optional[int] = None,
    high: Optional[int] = None,
    seed: Optional[int] = None,
) -> List[int]:
    """`size` integers drawn uniformly from low..high (inclusive)."""
    limits = _input_limits()
    low = limits.get("value_low", 1) if low is None else low
    high = limits.get("value_high", 100) if high is None else high
    if size < 1:
        raise InvalidInputError("Array size must be at least 1")
    if low > high:
        raise InvalidInputError(f"Empty value range {low}..{high}")
    rng = random.Random(seed)
    return [rng.randint(low, high) for _ in range(size)]


def check_array(values: List[int]) -> List[int]:
    """Apply the configured length and value bounds to a user-supplied array."""
    limits = _input_limits()
    min_len = limits.get("min_array_length", 2)
    max_len = limits.get("max_array_length", 50)
    min_value = limits.get("min_value", -9999)
    max_value = limits.get("max_value", 9999)

    if len(values) < min_len:
        raise InvalidInputError(f"Array must have at least {min_len} elements")
    if len(values) > max_len:
        raise InvalidInputError(f"Array cannot have more than {max_len} elements")
    for v in values:
        if not min_value <= v <= max_value:
            raise InvalidInputError(f"Values must lie between {min_value} and {max_value} (got {v})")
    return values


def parse_array(text: str) -> List[int]:
    """Parse a comma-separated list of integers typed by the user."""
    values = []
    for chunk in text.split(","):
        chunk = chunk.strip()
        try:
            values.append(int(chunk))
        except ValueError:
            raise InvalidInputError("All values must be valid numbers") from None
    return check_array(values)


@dataclass(frozen=True)
class GraphInput:
    """A graph plus where to start and (optionally) where to stop."""

    graph:  Graph
    start:  int           = 0
    target: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GraphInput":
        return cls(
            graph=Graph.from_dict(d),
            start=d.get("start", 0),
            target=d.get("end", d.get("target")),
        )


__all__ = [
    "generate_random_array",
    "check_array",
    "parse_array",
    "GraphInput",
]
