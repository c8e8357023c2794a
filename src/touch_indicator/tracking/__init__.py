from .geometry import Bounds, Position, apply_sensitivity, clamp, clamp_position
from .tracker import GestureSession, GestureTracker, TrackerConfig

__all__ = [
    "Bounds",
    "Position",
    "apply_sensitivity",
    "clamp",
    "clamp_position",
    "GestureSession",
    "GestureTracker",
    "TrackerConfig",
]
