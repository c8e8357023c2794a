"""
WebSocket connection manager with exponential-backoff reconnection.

The manager owns at most one transport at a time and drives the state
machine disconnected -> connecting -> connected, falling back to
disconnected and a scheduled retry whenever the transport closes. After
`reconnect_attempts` consecutive failures it parks in the terminal `error`
state until a caller asks to connect again.

All state is mutated from the event loop, either by the caller's
`connect()`/`disconnect()` or by the manager's own transport handlers.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import websockets
from websockets.exceptions import (
    ConnectionClosed,
    ConnectionClosedError,
    InvalidURI,
    WebSocketException,
)

from touch_indicator.protocol.constants import (
    DEFAULT_RECONNECT_ATTEMPTS,
    DEFAULT_RECONNECT_INTERVAL_MS,
    PHASE_MOVE,
)
from touch_indicator.protocol.messages import GestureMessage, decode

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


StateListener = Callable[[ConnectionState, Optional[GestureMessage]], None]
Connector = Callable[[str], Awaitable[Any]]

_KEEP = object()


def backoff_delay_ms(attempt: int, interval_ms: float) -> float:
    """Delay before retry number `attempt` (1-based)."""
    return interval_ms * 2 ** (attempt - 1)


async def open_websocket(url: str):
    return await websockets.connect(url, close_timeout=0.5, max_size=2**20)


class ConnectionManager:
    """
    Client side of the relay channel.

    Decoded gesture messages are delivered through `on_message` and to
    `subscribe()` listeners, which receive `(state, last_message)` on every
    state emission.
    """

    def __init__(
        self,
        url: str,
        *,
        reconnect_attempts: int = DEFAULT_RECONNECT_ATTEMPTS,
        reconnect_interval_ms: float = DEFAULT_RECONNECT_INTERVAL_MS,
        on_connect: Optional[Callable[[], None]] = None,
        on_disconnect: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[BaseException], None]] = None,
        on_message: Optional[Callable[[GestureMessage], None]] = None,
        connector: Connector = open_websocket,
    ):
        self.url = url
        self.reconnect_attempts = reconnect_attempts
        self.reconnect_interval_ms = reconnect_interval_ms
        self.on_connect = on_connect
        self.on_disconnect = on_disconnect
        self.on_error = on_error
        self.on_message = on_message
        self._connector = connector

        self._state = ConnectionState.DISCONNECTED
        self._last_message: Optional[GestureMessage] = None
        self._retry_count = 0
        self._stopped = False
        self._transport: Any = None
        self._task: Optional[asyncio.Task] = None
        self._closing_task: Optional[asyncio.Task] = None
        self._reconnect_handle: Optional[asyncio.TimerHandle] = None
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def last_message(self) -> Optional[GestureMessage]:
        return self._last_message

    @property
    def is_dragging(self) -> bool:
        return self._last_message is not None and self._last_message.phase == PHASE_MOVE

    @property
    def retry_count(self) -> int:
        return self._retry_count

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_handle is not None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def connect(self) -> None:
        """
        Open the channel if it is not already open or opening.

        Must be called from a running event loop. Calling it from the `error`
        state or after `disconnect()` restores the full retry budget.
        """
        if self._state is ConnectionState.CONNECTED or self._attempt_in_flight():
            return
        if self._stopped or self._state is ConnectionState.ERROR:
            self._retry_count = 0
            self._stopped = False
        self._cancel_reconnect()
        self._attempt()

    def disconnect(self) -> None:
        """Close the channel and suppress automatic reconnection."""
        self._cancel_reconnect()
        self._retry_count = self.reconnect_attempts
        self._stopped = True

        task, self._task = self._task, None
        if task is not None and not task.done():
            # The task closes its transport on cancellation.
            task.cancel()
            self._closing_task = task
        self._transport = None
        self._set_state(ConnectionState.DISCONNECTED, message=None)

    def set_url(self, url: str) -> None:
        """Point the manager at a new relay, reconnecting if it was active."""
        if url == self.url:
            return
        was_active = self._state is not ConnectionState.DISCONNECTED or self.reconnect_pending
        self.disconnect()
        self.url = url
        if was_active:
            self.connect()

    async def send(self, text: str) -> bool:
        """Send wire text if connected; returns False when the frame was dropped."""
        transport = self._transport
        if self._state is not ConnectionState.CONNECTED or transport is None:
            return False
        try:
            await transport.send(text)
        except ConnectionClosed:
            return False
        return True

    async def wait_closed(self) -> None:
        """Wait for the in-flight (or last cancelled) connection task to finish."""
        for task in (self._task, self._closing_task):
            if task is not None:
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    # Internals

    def _attempt_in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def _attempt(self) -> None:
        loop = asyncio.get_running_loop()
        self._set_state(ConnectionState.CONNECTING)
        self._task = loop.create_task(self._run())

    async def _run(self) -> None:
        logger.debug("Connecting to %s", self.url)
        try:
            transport = await self._connector(self.url)
        except (InvalidURI, ValueError, TypeError) as e:
            logger.error("Cannot create connection to %s: %s", self.url, e)
            self._set_state(ConnectionState.ERROR)
            return
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            logger.warning("Connection to %s failed: %s", self.url, e)
            self._notify_error(e)
            self._handle_close()
            return

        self._transport = transport
        self._retry_count = 0
        self._set_state(ConnectionState.CONNECTED)
        logger.info("Connected to %s", self.url)
        self._invoke(self.on_connect)

        try:
            async for raw in transport:
                self._handle_raw(raw)
        except ConnectionClosedError as e:
            logger.warning("Connection to %s lost: %s", self.url, e)
            self._notify_error(e)
        except asyncio.CancelledError:
            await transport.close()
            raise
        except Exception as e:
            logger.exception("Receive loop for %s failed", self.url)
            self._notify_error(e)
            await transport.close()

        self._transport = None
        self._handle_close()

    def _handle_raw(self, raw: str | bytes) -> None:
        message = decode(raw)
        if message is None:
            logger.warning("Invalid touch data received")
            return

        self._last_message = message
        if self.on_message:
            try:
                self.on_message(message)
            except Exception as e:
                logger.exception("Touch handler failed on %s", message.phase)
                self._notify_error(e)
        self._emit()

    def _handle_close(self) -> None:
        self._set_state(ConnectionState.DISCONNECTED)
        self._invoke(self.on_disconnect)
        if self._stopped:
            return

        if self._retry_count < self.reconnect_attempts:
            self._retry_count += 1
            delay_ms = backoff_delay_ms(self._retry_count, self.reconnect_interval_ms)
            logger.info(
                "Reconnecting to %s in %.0fms (attempt %d/%d)",
                self.url,
                delay_ms,
                self._retry_count,
                self.reconnect_attempts,
            )
            self._reconnect_handle = self._schedule(delay_ms / 1000.0, self._reconnect_fire)
        else:
            logger.error(
                "Giving up on %s after %d reconnect attempts", self.url, self.reconnect_attempts
            )
            self._set_state(ConnectionState.ERROR)

    def _schedule(self, delay_s: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay_s, callback)

    def _reconnect_fire(self) -> None:
        self._reconnect_handle = None
        self._attempt()

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    def _notify_error(self, exc: BaseException) -> None:
        self._invoke(self.on_error, exc)

    def _invoke(self, callback: Optional[Callable[..., None]], *args: Any) -> None:
        # Caller code must not be able to wedge the state machine.
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("Callback %r raised", callback)

    def _set_state(self, state: ConnectionState, message: Any = _KEEP) -> None:
        self._state = state
        if message is not _KEEP:
            self._last_message = message
        self._emit()

    def _emit(self) -> None:
        for listener in list(self._listeners):
            self._invoke(listener, self._state, self._last_message)
