"""
AirSpray - Main Application
============================

Entry point for the hand-gesture spray paint window.
Owns the camera/tracker pipeline, the paint canvas and palette, and runs the
render loop.
"""

import cv2
import yaml
import logging
import argparse
import signal
import numpy as np
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

from .capture.camera import Camera, CameraConfig
from .detection.hand_detector import HandTracker, HandTrackerConfig, resolve_hand_tracker
from .detection.landmark_source import LandmarkSource, LatestLandmarks
from .spray.canvas import CanvasSurface
from .spray.emitter import ParticleEmitter
from .spray.painter import SprayPainter
from .spray.palette import PaletteState
from .utils.logger import setup_logging
from .utils.performance import PerformanceMonitor
from .utils.visualization import Visualizer, VisualizerConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"

KEY_ESC = 27


@dataclass
class WindowConfig:
    """Display window settings."""
    title: str = "AirSpray"
    width: int = 1280
    height: int = 720

    @classmethod
    def from_dict(cls, d: dict) -> "WindowConfig":
        return cls(
            title=d.get("title", "AirSpray"),
            width=d.get("width", 1280),
            height=d.get("height", 720),
        )


@dataclass
class AppConfig:
    """Application configuration container."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    tracker: HandTrackerConfig = field(default_factory=HandTrackerConfig)
    window: WindowConfig = field(default_factory=WindowConfig)
    visualization: VisualizerConfig = field(default_factory=VisualizerConfig)
    target_fps: float = 30.0
    log_level: str = "INFO"
    log_file: Optional[str] = None
    seed: Optional[int] = None


def load_config(config_path) -> dict:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def create_app_config(config_dict: dict) -> AppConfig:
    """Create AppConfig from configuration dictionary."""
    logging_cfg = config_dict.get("logging", {})
    return AppConfig(
        camera=CameraConfig.from_dict(config_dict.get("camera", {})),
        tracker=HandTrackerConfig.from_dict(config_dict.get("tracker", {})),
        window=WindowConfig.from_dict(config_dict.get("window", {})),
        visualization=VisualizerConfig.from_dict(config_dict.get("visualization", {})),
        target_fps=config_dict.get("performance", {}).get("target_fps", 30.0),
        log_level=logging_cfg.get("level", "INFO"),
        log_file=logging_cfg.get("file"),
        seed=config_dict.get("spray", {}).get("seed"),
    )


class SprayApplication:
    """
    Top-level owner of all runtime state.

    The canvas, palette and latest-landmark slot live here and are passed to
    the components that need them. Input handlers (mouse, keyboard, resize)
    run on the render thread, inside ``cv2.waitKey``.
    """

    def __init__(self, config: AppConfig, tracker: Optional[HandTracker] = None):
        self.config = config

        self.canvas = CanvasSurface(config.window.width, config.window.height)
        self.palette = PaletteState()
        self.slot = LatestLandmarks()
        self.performance = PerformanceMonitor(target_fps=config.target_fps)
        self.visualizer = Visualizer(config.visualization)
        self.painter = SprayPainter(
            self.canvas,
            self.palette,
            ParticleEmitter(self.canvas, rng=config.seed),
            performance=self.performance,
        )

        self.camera = Camera(config.camera)
        self.tracker = tracker
        self.source: Optional[LandmarkSource] = None

        self._running = False

    def handle_click(self, x: int, y: int) -> None:
        """Select the clicked swatch, or advance the palette when clicking elsewhere."""
        index = self.visualizer.swatch_at(x, y, self.canvas.width, self.canvas.height)
        if index is not None:
            color = self.palette.select(index)
        else:
            color = self.palette.cycle()
        logger.info(f"Color: {color.name}")

    def handle_key(self, key: int) -> None:
        if key == ord(' '):
            self.canvas.clear()
            logger.info("Canvas cleared")
        elif key in (ord('q'), KEY_ESC):
            self._running = False
        elif key == ord('p'):
            print(self.performance.get_report())

    def handle_resize(self, width: int, height: int) -> None:
        """Reallocate the canvas when the window size changes (paint is lost)."""
        if width <= 0 or height <= 0 or (width, height) == self.canvas.size:
            return
        self.canvas.resize(width, height)

    def render_frame(self) -> np.ndarray:
        """Run one draw tick and return the image to display."""
        self.painter.tick(self.slot.latest())

        with self.performance.measure("composite"):
            frame = self.camera.read()
            return self.visualizer.compose(
                frame.image if frame is not None else None,
                self.canvas,
                self.palette,
                fps=self.performance.fps,
            )

    def start(self) -> bool:
        """
        Resolve the tracker and start the landmark source.

        Returns:
            False if no hand-tracking capability exists; a missing camera
            still returns True (painting simply never activates).
        """
        logger.info("Starting AirSpray...")

        if self.tracker is None:
            self.tracker = resolve_hand_tracker(self.config.tracker)
        if self.tracker is None:
            logger.error("Hand tracking unavailable, not starting the paint loop")
            return False

        self.source = LandmarkSource(self.camera, self.tracker, self.slot)
        if not self.source.start():
            logger.warning("No camera input, spray will not activate")

        self.performance.start()
        self._running = True
        return True

    def stop(self) -> None:
        """Stop the landmark source and close the window."""
        logger.info("Stopping AirSpray...")
        self._running = False

        if self.source is not None:
            self.source.stop()
            self.source = None
        elif self.tracker is not None:
            self.tracker.close()

        self.performance.stop()
        cv2.destroyAllWindows()
        logger.info("AirSpray stopped")

    def run(self) -> None:
        """Open the window and run until quit."""
        title = self.config.window.title
        cv2.namedWindow(title, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(title, self.canvas.width, self.canvas.height)

        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        if not self.start():
            self._show_unavailable(title)
            cv2.destroyAllWindows()
            return

        cv2.setMouseCallback(title, self._on_mouse)
        try:
            self._main_loop(title)
        finally:
            self.stop()

    def _main_loop(self, title: str) -> None:
        while self._running:
            self.performance.frame_start()

            self._poll_window_size(title)
            image = self.render_frame()
            cv2.imshow(title, image)

            self.performance.frame_complete()

            key = cv2.waitKey(1) & 0xFF
            if key != 0xFF:
                self.handle_key(key)

    def _show_unavailable(self, title: str) -> None:
        """Show instructions only, until the user quits."""
        image = self.visualizer.instructions_screen(
            self.canvas.width, self.canvas.height, "Hand tracking unavailable - live paint disabled")
        self._running = True
        while self._running:
            cv2.imshow(title, image)
            key = cv2.waitKey(50) & 0xFF
            if key in (ord('q'), KEY_ESC):
                break

    def _poll_window_size(self, title: str) -> None:
        try:
            _, _, width, height = cv2.getWindowImageRect(title)
        except cv2.error:
            return
        self.handle_resize(width, height)

    def _on_mouse(self, event, x, y, flags, param) -> None:
        if event == cv2.EVENT_LBUTTONDOWN:
            self.handle_click(x, y)

    def _signal_handler(self, signum, frame) -> None:
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, shutting down...")
        self._running = False


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="AirSpray - pinch to spray paint with your hand",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  pinch      - Spray at the pinch point
  click      - Next color (or click a swatch)
  space      - Clear the canvas
  p          - Print performance report
  q/ESC      - Quit
        """
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH,
                        help="Path to configuration file")
    parser.add_argument("--debug", "-d", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("--log-file", default=None,
                        help="Also log to this file (rotating)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for particle placement")
    args = parser.parse_args()

    config_path = Path(args.config)
    config_dict = {}
    config_error = None
    if config_path.exists():
        config_dict = load_config(config_path)
    else:
        config_error = f"Config file not found: {config_path}, using defaults"

    app_config = create_app_config(config_dict)
    if args.debug:
        app_config.log_level = "DEBUG"
    if args.log_file:
        app_config.log_file = args.log_file
    if args.seed is not None:
        app_config.seed = args.seed

    setup_logging(app_config.log_level, app_config.log_file)
    if config_error:
        logger.warning(config_error)
    else:
        logger.info(f"Loaded configuration from {config_path}")

    app = SprayApplication(app_config)
    app.run()


if __name__ == "__main__":
    main()
