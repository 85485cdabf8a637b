"""
Performance Monitoring Module
==============================

Rolling FPS and per-stage timings for the render tick.
"""

import time
import logging
import threading
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class PerformanceMetrics:
    """Container for performance metrics snapshot."""
    fps: float = 0.0
    frame_time_ms: float = 0.0
    interpret_time_ms: float = 0.0
    emit_time_ms: float = 0.0
    composite_time_ms: float = 0.0
    total_frames: int = 0
    slow_frames: int = 0


class PerformanceMonitor:
    """
    Render-loop performance monitoring.

    Example:
        >>> monitor = PerformanceMonitor()
        >>> monitor.start()
        >>> while running:
        ...     monitor.frame_start()
        ...     with monitor.measure("emit"):
        ...         emitter.emit(point, params, color)
        ...     monitor.frame_complete()
    """

    def __init__(self, window_size: int = 30, target_fps: float = 30.0):
        """
        Args:
            window_size: Number of frames for rolling average
            target_fps: Frames slower than ``1 / target_fps`` count as slow
        """
        self.window_size = window_size
        self.target_fps = target_fps
        self._frame_times: deque = deque(maxlen=window_size)
        self._stage_times: Dict[str, deque] = {}
        self._frame_start: Optional[float] = None
        self._total_frames = 0
        self._slow_frames = 0
        self._lock = threading.Lock()

    def start(self) -> None:
        """Reset counters and start monitoring."""
        with self._lock:
            self._total_frames = 0
            self._slow_frames = 0
            self._frame_times.clear()
            self._stage_times.clear()
        logger.info("Performance monitor started")

    def stop(self) -> None:
        logger.info(f"Performance monitor stopped. "
                    f"Total frames: {self._total_frames}, "
                    f"Slow: {self._slow_frames}")

    def frame_start(self) -> None:
        """Mark the start of a render tick."""
        self._frame_start = time.perf_counter()

    def frame_complete(self) -> None:
        """Mark the render tick complete and update metrics."""
        if self._frame_start is None:
            return

        frame_time = time.perf_counter() - self._frame_start

        with self._lock:
            self._frame_times.append(frame_time)
            self._total_frames += 1
            if frame_time > (1.0 / self.target_fps):
                self._slow_frames += 1

        self._frame_start = None

    @contextmanager
    def measure(self, stage: str):
        """
        Context manager to time a stage of the tick.

        Args:
            stage: Name of the stage (e.g., "interpret", "emit")
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            with self._lock:
                if stage not in self._stage_times:
                    self._stage_times[stage] = deque(maxlen=self.window_size)
                self._stage_times[stage].append(elapsed)

    @property
    def fps(self) -> float:
        """Current FPS (rolling average)."""
        with self._lock:
            if not self._frame_times:
                return 0.0
            avg_frame_time = sum(self._frame_times) / len(self._frame_times)
            return 1.0 / avg_frame_time if avg_frame_time > 0 else 0.0

    @property
    def frame_time_ms(self) -> float:
        """Average frame time in milliseconds."""
        with self._lock:
            if not self._frame_times:
                return 0.0
            return (sum(self._frame_times) / len(self._frame_times)) * 1000

    def stage_time_ms(self, stage: str) -> float:
        """Average time for a specific stage in milliseconds."""
        with self._lock:
            if stage not in self._stage_times or not self._stage_times[stage]:
                return 0.0
            times = self._stage_times[stage]
            return (sum(times) / len(times)) * 1000

    def get_metrics(self) -> PerformanceMetrics:
        """Current performance metrics snapshot."""
        return PerformanceMetrics(
            fps=self.fps,
            frame_time_ms=self.frame_time_ms,
            interpret_time_ms=self.stage_time_ms("interpret"),
            emit_time_ms=self.stage_time_ms("emit"),
            composite_time_ms=self.stage_time_ms("composite"),
            total_frames=self._total_frames,
            slow_frames=self._slow_frames,
        )

    def get_report(self) -> str:
        """Formatted performance report string."""
        metrics = self.get_metrics()

        return (
            f"Performance Report\n"
            f"{'=' * 40}\n"
            f"FPS: {metrics.fps:.1f} (target: {self.target_fps})\n"
            f"Frame Time: {metrics.frame_time_ms:.1f}ms\n"
            f"\nPer-Stage Breakdown:\n"
            f"  Interpret: {metrics.interpret_time_ms:.2f}ms\n"
            f"  Emit: {metrics.emit_time_ms:.2f}ms\n"
            f"  Composite: {metrics.composite_time_ms:.2f}ms\n"
            f"\nFrame Stats:\n"
            f"  Total: {metrics.total_frames}\n"
            f"  Slow: {metrics.slow_frames} ({100*metrics.slow_frames/max(1,metrics.total_frames):.1f}%)\n"
        )
