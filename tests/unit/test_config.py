"""Unit tests for settings loading"""

import pytest
from pydantic import ValidationError

from touch_indicator.config import Settings, get_settings
from touch_indicator.tracking import TrackerConfig


class TestSettings:
    def test_defaults(self, reset_settings, monkeypatch):
        for key in ("RELAY_PORT", "SENSITIVITY", "RECONNECT_ATTEMPTS"):
            monkeypatch.delenv(f"TOUCH_INDICATOR_{key}", raising=False)
        s = get_settings()

        assert s.relay_port == 8080
        assert s.relay_url == "ws://localhost:8080/ws"
        assert s.reconnect_attempts == 5
        assert s.reconnect_interval_ms == 1000
        assert s.sensitivity == 1.8
        assert s.size == 20
        assert s.tap_delay_ms == 150
        assert s.tap_move_threshold_px == 5
        assert s.ripple_duration_ms == 300

    def test_environment_overrides(self, reset_settings, monkeypatch):
        monkeypatch.setenv("TOUCH_INDICATOR_RELAY_PORT", "9001")
        monkeypatch.setenv("TOUCH_INDICATOR_SENSITIVITY", "2.5")
        monkeypatch.setenv("TOUCH_INDICATOR_DEBUG_LOG_MSGS", "true")
        s = get_settings()

        assert s.relay_port == 9001
        assert s.sensitivity == 2.5
        assert s.debug_log_msgs is True

    def test_settings_are_cached(self, reset_settings):
        assert get_settings() is get_settings()

    @pytest.mark.parametrize(
        "field,value",
        [
            ("reconnect_attempts", -1),
            ("reconnect_interval_ms", 0),
            ("sensitivity", 0),
            ("size", -20),
        ],
    )
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_tracker_config_from_settings(self):
        cfg = TrackerConfig.from_settings(Settings(size=30, tap_delay_ms=90))

        assert cfg.size == 30
        assert cfg.tap_delay_ms == 90
        assert cfg.sensitivity == 1.8
