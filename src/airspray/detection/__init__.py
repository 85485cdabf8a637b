"""Hand tracking module using MediaPipe."""
from .hand_detector import (
    HandLandmarks,
    HandTracker,
    HandTrackerConfig,
    Landmark,
    LandmarkIndex,
    resolve_hand_tracker,
)
from .landmark_source import LandmarkSource, LatestLandmarks

__all__ = [
    "HandLandmarks",
    "HandTracker",
    "HandTrackerConfig",
    "Landmark",
    "LandmarkIndex",
    "LandmarkSource",
    "LatestLandmarks",
    "resolve_hand_tracker",
]
