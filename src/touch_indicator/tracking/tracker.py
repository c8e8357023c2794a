"""
Gesture classification and position tracking.

Turns a stream of relative `GestureMessage` deltas into an absolute marker
position clamped to the viewport, and decides whether a finished gesture was
a tap or the end of a drag.

The wire phases cannot tell a stationary tap from a drag (both begin with
`start` and finish with `tap`), so classification is deferred until `tap`
arrives and is decided by two guards: the gesture must have lasted at least
`tap_delay_ms`, and its unscaled displacement must not exceed
`tap_move_threshold_px`.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

from touch_indicator.protocol.constants import (
    DEFAULT_RIPPLE_DURATION_MS,
    DEFAULT_SENSITIVITY,
    DEFAULT_SIZE,
    DEFAULT_TAP_DELAY_MS,
    DEFAULT_TAP_MOVE_THRESHOLD_PX,
    PHASE_MOVE,
    PHASE_START,
    PHASE_TAP,
)
from touch_indicator.protocol.messages import GestureMessage

from .geometry import Bounds, Position, apply_sensitivity, clamp_position

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class TrackerConfig:
    """Tuning knobs for the tracker."""

    sensitivity: float = DEFAULT_SENSITIVITY
    size: float = DEFAULT_SIZE  # marker diameter; half of it is the edge inset
    ripple_duration_ms: float = DEFAULT_RIPPLE_DURATION_MS
    tap_delay_ms: float = DEFAULT_TAP_DELAY_MS
    tap_move_threshold_px: float = DEFAULT_TAP_MOVE_THRESHOLD_PX

    @classmethod
    def from_settings(cls, settings) -> "TrackerConfig":
        return cls(
            sensitivity=settings.sensitivity,
            size=settings.size,
            ripple_duration_ms=settings.ripple_duration_ms,
            tap_delay_ms=settings.tap_delay_ms,
            tap_move_threshold_px=settings.tap_move_threshold_px,
        )


@dataclass
class GestureSession:
    """State of one continuous touch, from `start` to the next `tap`."""

    started_at: float  # tracker clock, ms
    acc_dx: float = 0.0
    acc_dy: float = 0.0
    tap_candidate: bool = True

    @property
    def displacement(self) -> float:
        return math.hypot(self.acc_dx, self.acc_dy)


class GestureTracker:
    """
    Consumes decoded gesture messages for one display surface.

    Outputs are `position`, the transient `is_tapping` flag and the sticky
    `initialized` latch. `on_move` is called with every clamped position and
    `on_tap` once per classified tap.
    """

    def __init__(
        self,
        bounds: Bounds,
        config: Optional[TrackerConfig] = None,
        on_move: Optional[Callable[[Position], None]] = None,
        on_tap: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = monotonic_ms,
        enabled: bool = True,
    ):
        self.bounds = bounds
        self.config = config or TrackerConfig()
        self.on_move = on_move
        self.on_tap = on_tap
        self.enabled = enabled
        self._clock = clock

        self._position = Position(0.0, 0.0)
        self._session: Optional[GestureSession] = None
        self._initialized = False
        self._tapping_until: Optional[float] = None

    @property
    def position(self) -> Position:
        return self._position

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def session(self) -> Optional[GestureSession]:
        return self._session

    @property
    def is_tapping(self) -> bool:
        """True for `ripple_duration_ms` after a classified tap."""
        if self._tapping_until is None:
            return False
        return self._clock() < self._tapping_until

    def resize(self, bounds: Bounds) -> None:
        """Apply new viewport bounds; the position is re-clamped on the next move."""
        self.bounds = bounds

    def handle(self, message: GestureMessage) -> None:
        if not self.enabled:
            return

        if message.phase == PHASE_START:
            self._start()
        elif message.phase == PHASE_MOVE:
            self._move(message.dx, message.dy)
        elif message.phase == PHASE_TAP:
            self._tap()

    def _start(self) -> None:
        self._session = GestureSession(started_at=self._clock())
        self._initialized = True

    def _move(self, dx: float, dy: float) -> None:
        sdx, sdy = apply_sensitivity(dx, dy, self.config.sensitivity)
        self._position = clamp_position(
            self._position.x + sdx,
            self._position.y + sdy,
            self.bounds,
            self.config.size,
        )

        session = self._session
        if session is not None:
            session.acc_dx += dx
            session.acc_dy += dy
            if session.displacement > self.config.tap_move_threshold_px:
                session.tap_candidate = False

        if self.on_move:
            self.on_move(self._position)

    def _tap(self) -> None:
        session, self._session = self._session, None
        if session is None or not session.tap_candidate:
            return

        elapsed_ms = self._clock() - session.started_at
        if elapsed_ms < self.config.tap_delay_ms:
            logger.debug("Ignoring tap %.1fms after start", elapsed_ms)
            return
        if session.displacement > self.config.tap_move_threshold_px:
            return

        self._tapping_until = self._clock() + self.config.ripple_duration_ms
        if self.on_tap:
            self.on_tap()
