from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from touch_indicator.protocol.constants import (
    DEFAULT_RECONNECT_ATTEMPTS,
    DEFAULT_RECONNECT_INTERVAL_MS,
    DEFAULT_RIPPLE_DURATION_MS,
    DEFAULT_SENSITIVITY,
    DEFAULT_SIZE,
    DEFAULT_TAP_DELAY_MS,
    DEFAULT_TAP_MOVE_THRESHOLD_PX,
    RELAY_PATH,
)


class Settings(BaseSettings):
    """
    Runtime config for the relay and its clients.

    - Loaded from environment variables (`TOUCH_INDICATOR_*`)
    - Also reads `.env` if present (via pydantic-settings + python-dotenv)
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="TOUCH_INDICATOR_", extra="ignore"
    )

    # Relay server
    relay_host: str = "127.0.0.1"
    relay_port: int = 8080
    relay_url: str = f"ws://localhost:8080{RELAY_PATH}"

    # Connection manager
    reconnect_attempts: int = Field(default=DEFAULT_RECONNECT_ATTEMPTS, ge=0)
    reconnect_interval_ms: int = Field(default=DEFAULT_RECONNECT_INTERVAL_MS, gt=0)

    # Tracker
    sensitivity: float = Field(default=DEFAULT_SENSITIVITY, gt=0)
    size: float = Field(default=DEFAULT_SIZE, gt=0)
    tap_delay_ms: float = Field(default=DEFAULT_TAP_DELAY_MS, ge=0)
    tap_move_threshold_px: float = Field(default=DEFAULT_TAP_MOVE_THRESHOLD_PX, ge=0)
    ripple_duration_ms: float = Field(default=DEFAULT_RIPPLE_DURATION_MS, ge=0)
    viewport_width: float = Field(default=1920, gt=0)
    viewport_height: float = Field(default=1080, gt=0)

    # Debugging
    debug_log_msgs: bool = False
    log_level: str = "INFO"
    log_file: str | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
