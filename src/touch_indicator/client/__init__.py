from .connection import ConnectionManager, ConnectionState, backoff_delay_ms
from .display import DisplayState, TouchDisplay
from .sender import TouchSender

__all__ = [
    "ConnectionManager",
    "ConnectionState",
    "backoff_delay_ms",
    "DisplayState",
    "TouchDisplay",
    "TouchSender",
]
