"""
Particle Emitter
=================

Scatters one frame's worth of spray particles around the emission point and
draws the hand cursor. Particles are sampled and drawn immediately; nothing
is kept after the call returns.
"""

from typing import Optional, Tuple, Union

import numpy as np

from .canvas import CanvasSurface
from .intensity import IntensityParams
from .palette import PaletteColor

CURSOR_DIAMETER = 15
CURSOR_COLOR = (255, 255, 255, 150)
CURSOR_STROKE = 2
PINCH_DOT_DIAMETER = 8


class ParticleEmitter:
    """
    Draws Gaussian-scattered discs onto a ``CanvasSurface``.

    Args:
        canvas: Surface to draw on
        rng: ``numpy.random.Generator`` or integer seed (None for fresh entropy)
    """

    def __init__(self, canvas: CanvasSurface,
                 rng: Union[np.random.Generator, int, None] = None):
        self.canvas = canvas
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    def emit(self, point: Tuple[float, float], params: IntensityParams, color: PaletteColor) -> None:
        """Draw ``params.count`` particles centered on ``point``."""
        count = params.count
        if count <= 0:
            return

        # sd = radius / 3 keeps ~99.7% of particles inside the radius per axis
        sigma = params.spread_radius / 3.0
        offsets = self.rng.normal(0.0, sigma, size=(count, 2))
        diameters = self.rng.uniform(params.particle_size_base * 0.5,
                                     params.particle_size_base * 1.5, size=count)

        bgra = color.bgra(params.alpha)
        x, y = point
        for (dx, dy), diameter in zip(offsets, diameters):
            self.canvas.fill_circle((x + dx, y + dy), float(diameter), bgra)

    def draw_cursor(self, point: Tuple[float, float], spraying: bool,
                    color: Optional[PaletteColor] = None) -> None:
        """Outline ring at the hand position, plus a filled dot while spraying."""
        self.canvas.stroke_circle(point, CURSOR_DIAMETER, CURSOR_COLOR, thickness=CURSOR_STROKE)
        if spraying and color is not None:
            self.canvas.fill_circle(point, PINCH_DOT_DIAMETER, color.bgra())
