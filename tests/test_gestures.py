"""
Tests for Gesture Interpretation
=================================
"""

import math

import pytest

from airspray.detection.hand_detector import HandLandmarks, Landmark, LandmarkIndex
from airspray.spray.gesture import (
    PINCH_THRESHOLD,
    GestureInterpreter,
    interpret_landmarks,
    is_pinching,
    screen_distance,
)


class TestPinchThreshold:
    """The pinch test is a strict less-than against 60 px."""

    def test_threshold_value(self):
        assert PINCH_THRESHOLD == 60.0

    def test_just_below_threshold_sprays(self):
        assert is_pinching(59.999) is True

    def test_at_threshold_does_not_spray(self):
        assert is_pinching(60.0) is False

    def test_exact_boundary_from_landmarks(self, make_hand):
        """0.0625 * 960 is exactly 60 px in binary floating point."""
        at = make_hand(thumb_tip=(0.25, 0.5), index_tip=(0.3125, 0.5))
        below = make_hand(thumb_tip=(0.25, 0.5), index_tip=(0.3120, 0.5))

        assert interpret_landmarks(at, 960, 540).pinch_distance == 60.0
        assert interpret_landmarks(at, 960, 540).is_spraying is False
        assert interpret_landmarks(below, 960, 540).is_spraying is True


class TestInterpretLandmarks:
    """Geometry of a single landmark set."""

    def test_mirrored_emission_point(self, make_hand):
        hand = make_hand(thumb_tip=(0.2, 0.5), index_tip=(0.2, 0.5))

        gesture = interpret_landmarks(hand, 1000, 800)

        assert gesture.emission_point == pytest.approx((800.0, 400.0))

    def test_emission_point_is_pinch_midpoint(self, make_hand):
        hand = make_hand(thumb_tip=(0.1, 0.2), index_tip=(0.3, 0.4))

        x, y = interpret_landmarks(hand, 1000, 500).emission_point

        assert x == pytest.approx((1 - 0.2) * 1000)
        assert y == pytest.approx(0.3 * 500)

    def test_pinch_distance_is_screen_space(self, make_hand):
        """x and y are scaled separately, so aspect ratio matters."""
        hand = make_hand(thumb_tip=(0.4, 0.4), index_tip=(0.5, 0.5))

        wide = interpret_landmarks(hand, 1280, 720).pinch_distance
        square = interpret_landmarks(hand, 720, 720).pinch_distance

        assert wide == pytest.approx(math.hypot(128, 72))
        assert square == pytest.approx(math.hypot(72, 72))

    def test_hand_size_uses_wrist_and_middle_mcp(self, make_hand):
        hand = make_hand(wrist=(0.5, 0.9), middle_mcp=(0.5, 0.6))

        gesture = interpret_landmarks(hand, 1280, 720)

        assert gesture.hand_size == pytest.approx(0.3 * 720)

    def test_distances_non_negative(self, make_hand):
        hand = make_hand(thumb_tip=(0.9, 0.1), index_tip=(0.1, 0.9),
                         wrist=(0.2, 0.2), middle_mcp=(0.2, 0.2))

        gesture = interpret_landmarks(hand, 640, 480)

        assert gesture.pinch_distance >= 0
        assert gesture.hand_size == 0

    def test_out_of_frame_point_not_clamped(self, make_hand):
        hand = make_hand(thumb_tip=(-0.1, 1.2), index_tip=(-0.1, 1.2))

        x, y = interpret_landmarks(hand, 100, 100).emission_point

        assert x == pytest.approx(110.0)
        assert y == pytest.approx(120.0)

    def test_screen_distance(self):
        a = Landmark(0.0, 0.0)
        b = Landmark(0.3, 0.4)
        assert screen_distance(a, b, 100, 100) == pytest.approx(50.0)


class TestGestureInterpreter:
    """Reuse of the last known state between landmark updates."""

    def test_no_hand_ever_is_absent(self):
        interpreter = GestureInterpreter()

        assert interpreter.interpret(None, 1280, 720) is None
        assert not interpreter.has_hand

    def test_reuses_last_state_without_update(self, make_hand):
        interpreter = GestureInterpreter()
        first = interpreter.interpret(make_hand(), 1280, 720)

        for _ in range(5):
            assert interpreter.interpret(None, 1280, 720) is first

    def test_new_update_replaces_state(self, make_hand):
        interpreter = GestureInterpreter()
        interpreter.interpret(make_hand(thumb_tip=(0.1, 0.1), index_tip=(0.1, 0.1)), 1000, 1000)
        second = interpreter.interpret(make_hand(thumb_tip=(0.6, 0.6), index_tip=(0.6, 0.6)), 1000, 1000)

        assert interpreter.last is second
        assert second.emission_point == pytest.approx((400.0, 600.0))

    def test_reset(self, make_hand):
        interpreter = GestureInterpreter()
        interpreter.interpret(make_hand(), 100, 100)
        interpreter.reset()

        assert interpreter.interpret(None, 100, 100) is None


class TestHandLandmarks:
    """Test suite for HandLandmarks helpers."""

    def test_requires_21_points(self):
        with pytest.raises(ValueError):
            HandLandmarks(landmarks=tuple(Landmark(0.5, 0.5) for _ in range(20)))

    def test_from_points_accepts_tuples_and_objects(self):
        class Point:
            def __init__(self, x, y):
                self.x, self.y = x, y

        from_tuples = HandLandmarks.from_points([(0.1, 0.2)] * 21)
        from_objects = HandLandmarks.from_points([Point(0.1, 0.2)] * 21)

        assert from_tuples.get(LandmarkIndex.WRIST) == Landmark(0.1, 0.2, 0.0)
        assert from_objects.get(LandmarkIndex.PINKY_TIP) == Landmark(0.1, 0.2, 0.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
