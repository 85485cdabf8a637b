"""
Spray Painter
==============

The per-frame draw tick: latest landmarks → gesture → intensity → particles
on the canvas. Owns no global state; the canvas, palette and emitter are
handed in by the application.
"""

from typing import Optional

from ..detection.hand_detector import HandLandmarks
from ..utils.logger import StrokeLogger
from ..utils.performance import PerformanceMonitor
from .canvas import CanvasSurface
from .emitter import ParticleEmitter
from .gesture import GestureInterpreter, GestureState
from .intensity import map_intensity
from .palette import PaletteState


class SprayPainter:
    """
    Per-frame spray renderer.

    Example:
        >>> canvas = CanvasSurface(1280, 720)
        >>> painter = SprayPainter(canvas, PaletteState(), ParticleEmitter(canvas))
        >>> gesture = painter.tick(slot.latest())
    """

    def __init__(
        self,
        canvas: CanvasSurface,
        palette: PaletteState,
        emitter: ParticleEmitter,
        interpreter: Optional[GestureInterpreter] = None,
        strokes: Optional[StrokeLogger] = None,
        performance: Optional[PerformanceMonitor] = None,
    ):
        self.canvas = canvas
        self.palette = palette
        self.emitter = emitter
        self.interpreter = interpreter or GestureInterpreter()
        self.strokes = strokes or StrokeLogger()
        self.performance = performance or PerformanceMonitor()

    def tick(self, hand: Optional[HandLandmarks]) -> Optional[GestureState]:
        """
        Run one draw tick. Never clears the canvas.

        Args:
            hand: Latest landmark set, or None if nothing new arrived

        Returns:
            The gesture used for this tick, or None before any hand was seen
        """
        with self.performance.measure("interpret"):
            gesture = self.interpreter.interpret(hand, self.canvas.width, self.canvas.height)

        if gesture is None:
            return None

        color = self.palette.current
        with self.performance.measure("emit"):
            self.emitter.draw_cursor(gesture.emission_point, gesture.is_spraying, color)

            params = None
            if gesture.is_spraying:
                params = map_intensity(gesture.hand_size)
                self.emitter.emit(gesture.emission_point, params, color)

        self.strokes.update(
            gesture.is_spraying,
            point=gesture.emission_point,
            factor=params.factor if params else None,
            color_name=color.name,
        )
        return gesture
