"""
Landmark Source
================

Feeds camera frames to a ``HandTracker`` on a background pump thread and
publishes each result into a single latest-value slot that the render loop
reads without blocking.
"""

import logging
import threading
import time
from typing import Optional

from ..capture.camera import Camera
from .hand_detector import HandLandmarks, HandTracker

logger = logging.getLogger(__name__)


class LatestLandmarks:
    """
    Single-slot holder for the most recent landmark set.

    ``publish`` overwrites the whole value (last write wins); updates with no
    hand are ignored so the last seen hand stays in place. ``latest`` never
    blocks waiting for a fresh value.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._hand: Optional[HandLandmarks] = None
        self._updates = 0

    def publish(self, hand: Optional[HandLandmarks]) -> None:
        if hand is None:
            return
        with self._lock:
            self._hand = hand
            self._updates += 1

    def latest(self) -> Optional[HandLandmarks]:
        with self._lock:
            return self._hand

    @property
    def updates(self) -> int:
        """Number of hand updates published so far."""
        with self._lock:
            return self._updates


class LandmarkSource:
    """
    Camera → tracker → slot pipeline with scoped acquisition.

    ``start`` opens the camera and begins pumping frames; ``stop`` joins the
    pump, closes the tracker and releases the camera. Use as a context
    manager to guarantee release.

    Example:
        >>> slot = LatestLandmarks()
        >>> with LandmarkSource(camera, tracker, slot) as source:
        ...     hand = slot.latest()
    """

    def __init__(self, camera: Camera, tracker: HandTracker, slot: LatestLandmarks):
        self.camera = camera
        self.tracker = tracker
        self.slot = slot
        self._running = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> bool:
        """Start capture and tracking. Returns False if the camera is unavailable."""
        self.tracker.on_results(self.slot.publish)

        if not self.camera.start():
            logger.error("Camera unavailable, continuing without hand input")
            return False

        self._running = True
        self._thread = threading.Thread(target=self._pump_loop, name="landmark-pump", daemon=True)
        self._thread.start()
        logger.info(f"Landmark source started (backend={self.tracker.name})")
        return True

    def stop(self) -> None:
        """Stop pumping and release the tracker and camera."""
        self._running = False

        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None

        self.tracker.close()
        self.camera.stop()
        logger.info("Landmark source stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    def _pump_loop(self) -> None:
        """Send each new camera frame to the tracker once."""
        last_frame_number = -1
        while self._running:
            frame = self.camera.read()
            if frame is None or frame.frame_number == last_frame_number:
                time.sleep(0.002)
                continue
            last_frame_number = frame.frame_number

            try:
                self.tracker.send(frame.rgb, int(frame.timestamp * 1000))
            except Exception:
                logger.exception("Hand tracker failed, hand input disabled")
                self._running = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
