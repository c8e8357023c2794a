from __future__ import annotations

import logging
from typing import Optional

from touch_indicator.protocol.constants import PHASE_MOVE, PHASE_START, PHASE_TAP
from touch_indicator.protocol.messages import Phase, encode

from .connection import ConnectionManager

logger = logging.getLogger(__name__)


class TouchSender:
    """
    Turns absolute pointer samples into relative gesture messages.

    Only the first touch point is tracked; the wire carries one gesture
    stream per connection.
    """

    def __init__(self, manager: ConnectionManager, disabled: bool = False):
        self.manager = manager
        self.disabled = disabled
        self._last: Optional[tuple[float, float]] = None

    async def pointer_down(self, x: float, y: float) -> None:
        if self.disabled:
            return
        self._last = (x, y)
        await self._send(PHASE_START, 0, 0)

    async def pointer_move(self, x: float, y: float) -> None:
        if self.disabled or self._last is None:
            return
        lx, ly = self._last
        self._last = (x, y)
        await self._send(PHASE_MOVE, x - lx, y - ly)

    async def pointer_up(self) -> None:
        if self.disabled:
            return
        self._last = None
        await self._send(PHASE_TAP, 0, 0)

    async def _send(self, phase: Phase, dx: float, dy: float) -> None:
        if await self.manager.send(encode(phase, dx, dy)):
            logger.debug("Sent: %s dx=%s dy=%s", phase, dx, dy)
