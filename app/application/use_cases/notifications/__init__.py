"""Public helpers for emitting domain notifications."""

from .events import (
    build_circular_notifications,
    dispatch_notifications,
    stage_circular_notifications,
)

__all__ = [
    "build_circular_notifications",
    "dispatch_notifications",
    "stage_circular_notifications",
]
