"""Utility modules for logging, performance and visualization."""
from .logger import StrokeLogger, setup_logging
from .performance import PerformanceMonitor
from .visualization import Visualizer, VisualizerConfig

__all__ = ["PerformanceMonitor", "StrokeLogger", "Visualizer", "VisualizerConfig", "setup_logging"]
