"""Unit tests for gesture classification and position tracking"""

import pytest

from touch_indicator.protocol import GestureMessage
from touch_indicator.tracking import Bounds, GestureTracker, Position, TrackerConfig


def start():
    return GestureMessage(phase="start", dx=0, dy=0)


def move(dx, dy):
    return GestureMessage(phase="move", dx=dx, dy=dy)


def tap():
    return GestureMessage(phase="tap", dx=0, dy=0)


@pytest.fixture
def taps():
    return []


@pytest.fixture
def moves():
    return []


@pytest.fixture
def tracker(clock, taps, moves):
    return GestureTracker(
        Bounds(1000, 800),
        TrackerConfig(sensitivity=2, size=20, ripple_duration_ms=300, tap_delay_ms=150),
        on_move=moves.append,
        on_tap=lambda: taps.append(clock()),
        clock=clock,
    )


class TestPositionTracking:
    def test_initial_state(self, tracker):
        assert tracker.position == Position(0, 0)
        assert tracker.initialized is False
        assert tracker.is_tapping is False
        assert tracker.session is None

    def test_move_scales_and_clamps(self, tracker, moves):
        tracker.handle(start())
        tracker.handle(move(10, 0))

        # y starts at 0, below the size/2 inset
        assert tracker.position == Position(20, 10)
        assert moves == [Position(20, 10)]

    def test_moves_accumulate(self, tracker):
        tracker.handle(move(100, 100))
        tracker.handle(move(-25, 50))

        assert tracker.position == Position(150, 300)

    def test_move_clamps_right_edge(self, tracker):
        tracker.handle(move(497.5, 100))  # x = 995
        tracker.handle(move(0, 0))

        assert tracker.position.x == 990

    def test_resize_applies_on_next_move(self, tracker):
        tracker.handle(move(400, 300))
        tracker.resize(Bounds(500, 400))
        tracker.handle(move(0, 0))

        assert tracker.position == Position(490, 390)

    def test_move_without_start_still_tracks(self, tracker, moves):
        tracker.handle(move(50, 50))

        assert tracker.position == Position(100, 100)
        assert tracker.initialized is False
        assert len(moves) == 1

    def test_disabled_ignores_messages(self, tracker, moves):
        tracker.enabled = False
        tracker.handle(start())
        tracker.handle(move(50, 50))

        assert tracker.position == Position(0, 0)
        assert tracker.initialized is False
        assert moves == []


class TestInitialization:
    def test_start_latches_initialized(self, tracker):
        tracker.handle(start())
        tracker.handle(tap())

        assert tracker.initialized is True

    def test_initialized_stays_set(self, tracker, clock):
        tracker.handle(start())
        for _ in range(3):
            clock.advance_ms(200)
            tracker.handle(tap())
            tracker.handle(move(1, 1))

        assert tracker.initialized is True


class TestTapClassification:
    def test_still_touch_after_delay_is_tap(self, tracker, clock, taps):
        tracker.handle(start())
        clock.advance_ms(150)
        tracker.handle(tap())

        assert len(taps) == 1
        assert tracker.is_tapping is True

    def test_ripple_lasts_ripple_duration(self, tracker, clock):
        tracker.handle(start())
        clock.advance_ms(200)
        tracker.handle(tap())

        clock.advance_ms(299)
        assert tracker.is_tapping is True
        clock.advance_ms(1)
        assert tracker.is_tapping is False

    def test_tap_before_delay_is_ignored(self, tracker, clock, taps):
        tracker.handle(start())
        clock.advance_ms(149)
        tracker.handle(tap())

        assert taps == []
        assert tracker.is_tapping is False

    def test_small_jitter_is_still_tap(self, tracker, clock, taps):
        tracker.handle(start())
        tracker.handle(move(3, 4))  # norm exactly 5
        clock.advance_ms(200)
        tracker.handle(tap())

        assert len(taps) == 1

    def test_drag_end_is_not_tap(self, tracker, clock, taps):
        tracker.handle(start())
        tracker.handle(move(3, 4))
        tracker.handle(move(1, 0))
        clock.advance_ms(500)
        tracker.handle(tap())

        assert taps == []
        assert tracker.is_tapping is False

    def test_displacement_uses_unscaled_deltas(self, clock, taps):
        # sensitivity 10 would push scaled movement far past the threshold
        tracker = GestureTracker(
            Bounds(1000, 800),
            TrackerConfig(sensitivity=10),
            on_tap=lambda: taps.append(1),
            clock=clock,
        )
        tracker.handle(start())
        tracker.handle(move(2, 2))
        clock.advance_ms(200)
        tracker.handle(tap())

        assert taps == [1]

    def test_candidate_lost_permanently(self, tracker, clock, taps):
        tracker.handle(start())
        tracker.handle(move(10, 0))
        tracker.handle(move(-10, 0))  # back at origin, accumulator norm 0
        clock.advance_ms(200)
        tracker.handle(tap())

        assert taps == []

    def test_tap_without_start_is_ignored(self, tracker, clock, taps):
        clock.advance_ms(1000)
        tracker.handle(tap())

        assert taps == []

    def test_session_closed_after_tap(self, tracker, clock, taps):
        tracker.handle(start())
        clock.advance_ms(200)
        tracker.handle(tap())
        clock.advance_ms(200)
        tracker.handle(tap())

        assert tracker.session is None
        assert len(taps) == 1

    def test_session_closed_after_drag_end(self, tracker, clock):
        tracker.handle(start())
        tracker.handle(move(50, 0))
        tracker.handle(tap())

        assert tracker.session is None

    def test_new_start_supersedes_session(self, tracker, clock, taps):
        tracker.handle(start())
        tracker.handle(move(50, 0))
        clock.advance_ms(100)
        tracker.handle(start())
        clock.advance_ms(150)
        tracker.handle(tap())

        assert len(taps) == 1

    def test_new_start_during_ripple(self, tracker, clock, taps):
        tracker.handle(start())
        clock.advance_ms(150)
        tracker.handle(tap())
        clock.advance_ms(50)
        tracker.handle(start())

        assert tracker.session is not None
        assert tracker.is_tapping is True
        clock.advance_ms(150)
        tracker.handle(tap())
        assert len(taps) == 2
