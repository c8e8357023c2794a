"""Display side: relay connection feeding a gesture tracker."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from touch_indicator.protocol.messages import GestureMessage
from touch_indicator.tracking import Bounds, GestureTracker, Position, TrackerConfig

from .connection import ConnectionManager, ConnectionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayState:
    """What the presentation layer needs to draw the marker."""

    position: Position
    connection_state: ConnectionState
    is_tapping: bool
    initialized: bool
    visible: bool


class TouchDisplay:
    """
    Binds one `GestureTracker` to a message source.

    The source is either a `ConnectionManager` (its decoded stream is fed to
    the tracker) or the caller, via `feed()`, for messages that arrive some
    other way.
    """

    def __init__(
        self,
        tracker: GestureTracker,
        manager: Optional[ConnectionManager] = None,
        show: bool = True,
    ):
        self.tracker = tracker
        self.manager = manager
        self.show = show
        self._external_message: Optional[GestureMessage] = None
        if manager is not None:
            manager.on_message = self._chain(tracker.handle, manager.on_message)

    @staticmethod
    def _chain(
        handle: Callable[[GestureMessage], None],
        previous: Optional[Callable[[GestureMessage], None]],
    ) -> Callable[[GestureMessage], None]:
        """The tracker sees each message first, then any handler set before."""
        if previous is None:
            return handle

        def chained(message: GestureMessage) -> None:
            handle(message)
            previous(message)

        return chained

    @classmethod
    def from_settings(
        cls,
        settings,
        url: Optional[str] = None,
        on_move: Optional[Callable[[Position], None]] = None,
        on_tap: Optional[Callable[[], None]] = None,
    ) -> "TouchDisplay":
        tracker = GestureTracker(
            Bounds(settings.viewport_width, settings.viewport_height),
            TrackerConfig.from_settings(settings),
            on_move=on_move,
            on_tap=on_tap,
        )
        manager = ConnectionManager(
            url or settings.relay_url,
            reconnect_attempts=settings.reconnect_attempts,
            reconnect_interval_ms=settings.reconnect_interval_ms,
        )
        return cls(tracker, manager)

    def feed(self, message: GestureMessage) -> None:
        """Hand a message to the tracker, bypassing the connection."""
        self._external_message = message
        self.tracker.handle(message)

    @property
    def last_message(self) -> Optional[GestureMessage]:
        if self.manager is not None and self.manager.last_message is not None:
            return self.manager.last_message
        return self._external_message

    def snapshot(self) -> DisplayState:
        state = (
            self.manager.state if self.manager is not None else ConnectionState.DISCONNECTED
        )
        return DisplayState(
            position=self.tracker.position,
            connection_state=state,
            is_tapping=self.tracker.is_tapping,
            initialized=self.tracker.initialized,
            visible=self.show and (self.last_message is not None or self.tracker.initialized),
        )
