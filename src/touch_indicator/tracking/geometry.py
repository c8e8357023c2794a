from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """Marker center in viewport pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    """Viewport extent in pixels."""

    width: float
    height: float


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def apply_sensitivity(dx: float, dy: float, sensitivity: float) -> tuple[float, float]:
    return dx * sensitivity, dy * sensitivity


def clamp_position(x: float, y: float, bounds: Bounds, size: float) -> Position:
    """
    Keep a marker of diameter `size` fully inside `bounds`.

    Each axis is clamped into [size/2, extent - size/2].
    """
    half = size / 2
    return Position(
        x=clamp(x, half, bounds.width - half),
        y=clamp(y, half, bounds.height - half),
    )
