from __future__ import annotations

import json
import logging
from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

Phase: TypeAlias = Literal["start", "move", "tap"]

# Relative pixel displacement. Strict: numeric strings are not coerced and
# NaN / +-Infinity are rejected.
Delta: TypeAlias = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class GestureMessage(BaseModel):
    """
    One wire unit of the gesture stream.

    `dx`/`dy` are required for every phase so the schema stays uniform; they
    only carry meaning for `move`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    phase: Phase
    dx: Delta
    dy: Delta

    @field_validator("dx", "dy", mode="before")
    @classmethod
    def _reject_bool(cls, v: object) -> object:
        # bool is an int subclass; JSON true/false is not a displacement.
        if isinstance(v, bool):
            raise ValueError("boolean is not a number")
        return v

    def to_wire(self) -> str:
        return json.dumps(self.model_dump(), separators=(",", ":"))


def encode(phase: Phase, dx: float, dy: float) -> str:
    """
    Encode a gesture message as compact JSON text.

    Raises `ValueError` (pydantic `ValidationError`) when `phase` is outside
    the closed set or a displacement is not a finite number.
    """
    return GestureMessage(phase=phase, dx=dx, dy=dy).to_wire()


def decode(wire: str | bytes) -> GestureMessage | None:
    """
    Decode wire text into a `GestureMessage`.

    Returns None for anything that is not a well-formed message: unparseable
    text, a non-object payload, a missing or unknown `phase`, or `dx`/`dy`
    that are missing or not finite numbers.
    """
    if isinstance(wire, bytes):
        try:
            wire = wire.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Rejected frame: not UTF-8")
            return None
    try:
        return GestureMessage.model_validate_json(wire)
    except ValidationError as e:
        logger.debug("Rejected frame: %s", e.errors(include_url=False))
        return None
