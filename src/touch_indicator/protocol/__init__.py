from .constants import (
    PHASE_MOVE,
    PHASE_START,
    PHASE_TAP,
    PHASES,
    RELAY_PATH,
)
from .messages import GestureMessage, Phase, decode, encode

__all__ = [
    "PHASE_START",
    "PHASE_MOVE",
    "PHASE_TAP",
    "PHASES",
    "RELAY_PATH",
    "GestureMessage",
    "Phase",
    "decode",
    "encode",
]
