"""Shared fixtures for the AirSpray test suite."""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from airspray.detection.hand_detector import HandLandmarks, Landmark, LandmarkIndex


def build_hand(thumb_tip=(0.5, 0.5), index_tip=(0.5, 0.5),
               wrist=(0.5, 0.8), middle_mcp=(0.5, 0.6)) -> HandLandmarks:
    """Hand with the four landmarks the spray reads placed explicitly; the rest at the center."""
    points = [Landmark(0.5, 0.5, 0.0) for _ in range(21)]
    points[LandmarkIndex.THUMB_TIP] = Landmark(*thumb_tip)
    points[LandmarkIndex.INDEX_TIP] = Landmark(*index_tip)
    points[LandmarkIndex.WRIST] = Landmark(*wrist)
    points[LandmarkIndex.MIDDLE_MCP] = Landmark(*middle_mcp)
    return HandLandmarks(landmarks=tuple(points))


@pytest.fixture
def make_hand():
    """Factory fixture for ``HandLandmarks``."""
    return build_hand
