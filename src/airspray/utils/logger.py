"""
Logging setup and spray stroke event logging.
"""

import os
import logging
import logging.handlers
import time


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure console (and optional rotating file) logging for the application."""
    console_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    file_format = "%(asctime)s [%(levelname)-7s] %(name)-30s | %(message)s"
    date_format = "%H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(console_format, datefmt=date_format))
    root_logger.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    return root_logger


class StrokeLogger:
    """Logs spray strokes: a stroke starts when a pinch begins and ends when it is released."""

    def __init__(self, clock=time.monotonic):
        self.logger = logging.getLogger("spray_events")
        self._clock = clock
        self._stroke_start = None
        self._strokes = 0

    def update(self, spraying, point=None, factor=None, color_name=None):
        """Feed the spraying flag for one tick; logs on transitions only."""
        if spraying and self._stroke_start is None:
            self._stroke_start = self._clock()
            self._strokes += 1
            self.logger.info(
                "Stroke %d start | at: (%.0f, %.0f) | factor: %.2f | color: %s",
                self._strokes,
                point[0] if point else 0.0,
                point[1] if point else 0.0,
                factor if factor is not None else 0.0,
                color_name or "n/a",
            )
        elif not spraying and self._stroke_start is not None:
            duration = self._clock() - self._stroke_start
            self._stroke_start = None
            self.logger.info("Stroke %d end | duration: %.2fs", self._strokes, duration)

    @property
    def in_stroke(self):
        return self._stroke_start is not None

    @property
    def total_strokes(self):
        return self._strokes
