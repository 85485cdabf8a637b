"""
Hand Tracking Module - MediaPipe Binding
=========================================

Wraps whichever MediaPipe hand-tracking API is installed behind a small
capability interface (``HandTracker``): register a result callback, send
frames, close. The Tasks ``HandLandmarker`` (LIVE_STREAM mode) is preferred;
the legacy ``mp.solutions.hands.Hands`` is used when the Tasks API is absent.
"""

import importlib
import logging
import urllib.request
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, Iterable, NamedTuple, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# Model download URL
HAND_LANDMARKER_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
DEFAULT_MODEL_PATH = Path.home() / ".cache" / "airspray" / "hand_landmarker.task"

NUM_LANDMARKS = 21


class LandmarkIndex(IntEnum):
    """Hand landmark indices following MediaPipe convention."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


class Landmark(NamedTuple):
    """A single landmark point with normalized coordinates."""
    x: float  # 0.0 to 1.0, normalized by frame width
    y: float  # 0.0 to 1.0, normalized by frame height
    z: float = 0.0


@dataclass(frozen=True)
class HandLandmarks:
    """One tracked hand: 21 normalized landmarks, read-only."""
    landmarks: Tuple[Landmark, ...]
    handedness: str = "Right"
    confidence: float = 1.0

    def __post_init__(self):
        if len(self.landmarks) < NUM_LANDMARKS:
            raise ValueError(
                f"Expected {NUM_LANDMARKS} landmarks, got {len(self.landmarks)}")

    @classmethod
    def from_points(cls, points: Iterable, handedness: str = "Right",
                    confidence: float = 1.0) -> "HandLandmarks":
        """Build from any iterable of objects with ``x``/``y`` (and maybe ``z``)
        attributes, or of plain ``(x, y[, z])`` tuples."""
        landmarks = []
        for p in points:
            if isinstance(p, (tuple, list)):
                landmarks.append(Landmark(*p))
            else:
                landmarks.append(Landmark(p.x, p.y, getattr(p, "z", 0.0)))
        return cls(landmarks=tuple(landmarks), handedness=handedness,
                   confidence=confidence)

    def get(self, index: LandmarkIndex) -> Landmark:
        """Get landmark by index."""
        return self.landmarks[index]


ResultCallback = Callable[[Optional[HandLandmarks]], None]


@dataclass
class HandTrackerConfig:
    """Options recognised by the hand tracker."""
    backend: str = "auto"  # auto, tasks or solutions
    model_path: str = ""
    max_num_hands: int = 1
    model_complexity: int = 1
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.7
    min_presence_confidence: float = 0.7

    @classmethod
    def from_dict(cls, d: dict) -> "HandTrackerConfig":
        """Create config from dictionary."""
        return cls(
            backend=d.get("backend", "auto"),
            model_path=d.get("model_path", ""),
            max_num_hands=d.get("max_num_hands", 1),
            model_complexity=d.get("model_complexity", 1),
            min_detection_confidence=d.get("min_detection_confidence", 0.7),
            min_tracking_confidence=d.get("min_tracking_confidence", 0.7),
            min_presence_confidence=d.get("min_presence_confidence", 0.7),
        )


def first_hand(hand_lists: Optional[Sequence], handedness=None) -> Optional[HandLandmarks]:
    """Convert the first hand of a tracker result to ``HandLandmarks``.

    Accepts both result shapes: a list of landmark lists (Tasks API) and a
    list of ``NormalizedLandmarkList`` protos with a ``landmark`` field
    (legacy API). Returns None when the result holds no hand.
    """
    if not hand_lists:
        return None
    points = hand_lists[0]
    points = getattr(points, "landmark", points)

    label, score = "Right", 1.0
    if handedness:
        categories = getattr(handedness[0], "classification", handedness[0])
        category = categories[0]
        label = getattr(category, "category_name", None) or getattr(category, "label", label)
        score = getattr(category, "score", score)

    return HandLandmarks.from_points(points, handedness=label, confidence=score)


class HandTracker:
    """
    Minimal capability interface over a hand-tracking backend.

    Results are delivered to the registered callback, possibly from another
    thread, with at most one hand per update.
    """

    name = "none"

    def __init__(self, config: Optional[HandTrackerConfig] = None):
        self.config = config or HandTrackerConfig()
        self._callback: Optional[ResultCallback] = None

    def on_results(self, callback: ResultCallback) -> None:
        """Register the result callback (replaces any previous one)."""
        self._callback = callback

    def send(self, image: np.ndarray, timestamp_ms: int) -> None:
        """Submit an RGB frame for processing."""
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources."""

    def _deliver(self, hand: Optional[HandLandmarks]) -> None:
        if self._callback is not None:
            self._callback(hand)


class TasksHandTracker(HandTracker):
    """Tracker backed by the MediaPipe Tasks ``HandLandmarker`` in LIVE_STREAM mode."""

    name = "tasks"

    def __init__(self, mp_module, model_path: str, config: Optional[HandTrackerConfig] = None):
        super().__init__(config)
        self._mp = mp_module
        vision = mp_module.tasks.vision

        options = vision.HandLandmarkerOptions(
            base_options=mp_module.tasks.BaseOptions(model_asset_path=model_path),
            running_mode=vision.RunningMode.LIVE_STREAM,
            num_hands=self.config.max_num_hands,
            min_hand_detection_confidence=self.config.min_detection_confidence,
            min_hand_presence_confidence=self.config.min_presence_confidence,
            min_tracking_confidence=self.config.min_tracking_confidence,
            result_callback=self._on_result,
        )
        self._landmarker = vision.HandLandmarker.create_from_options(options)
        self._last_timestamp = -1

        logger.info(f"HandLandmarker initialized with model: {model_path}")

    def _on_result(self, result, output_image, timestamp_ms: int) -> None:
        self._deliver(first_hand(result.hand_landmarks, getattr(result, "handedness", None)))

    def send(self, image: np.ndarray, timestamp_ms: int) -> None:
        if self._landmarker is None:
            return
        # LIVE_STREAM mode rejects non-increasing timestamps
        timestamp_ms = max(int(timestamp_ms), self._last_timestamp + 1)
        self._last_timestamp = timestamp_ms
        mp_image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=image)
        self._landmarker.detect_async(mp_image, timestamp_ms)

    def close(self) -> None:
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        logger.info("HandLandmarker stopped")


class SolutionsHandTracker(HandTracker):
    """Tracker backed by the legacy ``mp.solutions.hands.Hands`` (synchronous)."""

    name = "solutions"

    def __init__(self, hands_cls, config: Optional[HandTrackerConfig] = None):
        super().__init__(config)
        self._hands = hands_cls(
            max_num_hands=self.config.max_num_hands,
            model_complexity=self.config.model_complexity,
            min_detection_confidence=self.config.min_detection_confidence,
            min_tracking_confidence=self.config.min_tracking_confidence,
        )
        logger.info("Legacy MediaPipe Hands initialized")

    def send(self, image: np.ndarray, timestamp_ms: int) -> None:
        if self._hands is None:
            return
        results = self._hands.process(image)
        self._deliver(first_hand(results.multi_hand_landmarks,
                                 getattr(results, "multi_handedness", None)))

    def close(self) -> None:
        if self._hands is not None:
            self._hands.close()
            self._hands = None
        logger.info("Legacy MediaPipe Hands stopped")


def download_model(url: str, save_path: Path) -> bool:
    """Download the hand landmarker model if not present."""
    if save_path.exists():
        logger.info(f"Model already exists at {save_path}")
        return True

    try:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Downloading hand landmarker model to {save_path}...")
        urllib.request.urlretrieve(url, save_path)
        logger.info("Model download complete!")
        return True
    except OSError as e:
        logger.error(f"Failed to download model: {e}")
        return False


def _lookup(module, dotted: str):
    """Resolve ``a.b.c`` on a module, returning None if any part is missing."""
    obj = module
    for part in dotted.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            return None
    return obj


def _import_mediapipe():
    try:
        return importlib.import_module("mediapipe")
    except ImportError as e:
        logger.error(f"MediaPipe is not importable: {e}")
        return None


def resolve_hand_tracker(config: Optional[HandTrackerConfig] = None,
                         mp_module=None) -> Optional[HandTracker]:
    """
    Build a ``HandTracker`` from whichever MediaPipe API is available.

    Args:
        config: Tracker options
        mp_module: Module to inspect instead of importing ``mediapipe``

    Returns:
        A ready tracker, or None if no usable capability was found
    """
    config = config or HandTrackerConfig()
    mp_module = mp_module if mp_module is not None else _import_mediapipe()
    if mp_module is None:
        return None

    if config.backend in ("auto", "tasks"):
        landmarker = _lookup(mp_module, "tasks.vision.HandLandmarker")
        if landmarker is not None and _lookup(mp_module, "tasks.BaseOptions") is not None:
            model_path = Path(config.model_path) if config.model_path else DEFAULT_MODEL_PATH
            if download_model(HAND_LANDMARKER_MODEL_URL, model_path):
                try:
                    return TasksHandTracker(mp_module, str(model_path), config)
                except (RuntimeError, ValueError) as e:
                    logger.error(f"Failed to initialize HandLandmarker: {e}")
            else:
                logger.error("Could not download hand landmarker model")
        else:
            logger.warning("MediaPipe Tasks HandLandmarker not available")

    if config.backend in ("auto", "solutions"):
        hands_cls = _lookup(mp_module, "solutions.hands.Hands")
        if hands_cls is not None:
            return SolutionsHandTracker(hands_cls, config)
        logger.warning("MediaPipe legacy solutions.hands not available")

    logger.error(f"No usable MediaPipe hand tracker (backend={config.backend!r})")
    return None
