"""Shared utilities for surfcast."""

from .angles import (
    angular_distance,
    clamp,
    degrees_to_cardinal,
    in_arc,
    round_half_up,
)

__all__ = [
    "angular_distance",
    "clamp",
    "degrees_to_cardinal",
    "in_arc",
    "round_half_up",
]
