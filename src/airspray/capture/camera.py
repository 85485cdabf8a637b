"""
Camera Capture Module
======================

A single background thread owns the ``cv2.VideoCapture`` and publishes the
most recent frame. Every consumer (the landmark pump and the preview) reads
that shared frame; nothing else touches the device.
"""

import cv2
import time
import threading
import logging
from dataclasses import dataclass
from typing import Optional
import numpy as np

logger = logging.getLogger(__name__)

# Back-off after a failed grab
RETRY_DELAY_S = 0.005


@dataclass
class CameraConfig:
    """Capture device settings."""
    device_id: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30
    buffer_size: int = 1
    warmup_frames: int = 5

    @classmethod
    def from_dict(cls, config: dict) -> "CameraConfig":
        """Create config from dictionary (YAML parsed)."""
        return cls(
            device_id=config.get("device_id", 0),
            width=config.get("width", 1280),
            height=config.get("height", 720),
            fps=config.get("fps", 30),
            buffer_size=config.get("buffer_size", 1),
            warmup_frames=config.get("warmup_frames", 5),
        )


@dataclass
class Frame:
    """One captured BGR image, unmirrored."""
    image: np.ndarray
    timestamp: float
    frame_number: int

    @property
    def rgb(self) -> np.ndarray:
        """The image as RGB, the layout the hand tracker expects."""
        return cv2.cvtColor(self.image, cv2.COLOR_BGR2RGB)


class Camera:
    """
    Latest-frame camera source.

    ``read()`` never blocks on the device: it returns whatever the capture
    thread grabbed last, so several consumers can poll at their own rates
    and see the same frame.

    Example:
        >>> with Camera(CameraConfig()) as camera:
        ...     frame = camera.read()
    """

    def __init__(self, config: Optional[CameraConfig] = None):
        self.config = config or CameraConfig()
        self._cap: Optional[cv2.VideoCapture] = None
        self._running = False

        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._latest: Optional[Frame] = None

    def start(self) -> bool:
        """
        Open the device and start the capture thread.

        Returns:
            False if the device could not be opened
        """
        cfg = self.config
        logger.info(f"Opening camera {cfg.device_id} ({cfg.width}x{cfg.height}@{cfg.fps}fps)")

        cap = cv2.VideoCapture(cfg.device_id)
        if not cap.isOpened():
            logger.error(f"Failed to open camera device {cfg.device_id}")
            cap.release()
            return False

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, cfg.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, cfg.height)
        cap.set(cv2.CAP_PROP_FPS, cfg.fps)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, cfg.buffer_size)
        logger.info(
            f"Camera delivers {int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))}x"
            f"{int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))}")

        # Auto exposure settles over the first few frames
        for _ in range(cfg.warmup_frames):
            cap.read()

        self._cap = cap
        self._running = True
        self._thread = threading.Thread(
            target=self._capture_loop, args=(cap,), name="camera-capture", daemon=True)
        self._thread.start()
        return True

    def stop(self) -> None:
        """Stop the capture thread, then release the device."""
        self._running = False

        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

        if self._cap is not None:
            self._cap.release()
            self._cap = None

        with self._lock:
            self._latest = None

        logger.info("Camera stopped")

    def read(self) -> Optional[Frame]:
        """The most recent frame, or None before the first one (or when stopped)."""
        if not self._running:
            return None
        with self._lock:
            return self._latest

    def _capture_loop(self, cap: cv2.VideoCapture) -> None:
        """Sole reader of the device."""
        frame_number = 0
        while self._running:
            ok, image = cap.read()
            if not ok or image is None:
                logger.debug("Frame grab failed")
                time.sleep(RETRY_DELAY_S)
                continue

            frame_number += 1
            frame = Frame(image=image, timestamp=time.time(), frame_number=frame_number)
            with self._lock:
                self._latest = frame

    @property
    def is_running(self) -> bool:
        return self._running

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
