"""Gesture interpretation, intensity mapping and particle painting."""
from .canvas import CanvasSurface
from .emitter import ParticleEmitter
from .gesture import PINCH_THRESHOLD, GestureInterpreter, GestureState
from .intensity import IntensityParams, map_intensity
from .painter import SprayPainter
from .palette import PALETTE, PaletteColor, PaletteState

__all__ = [
    "CanvasSurface",
    "GestureInterpreter",
    "GestureState",
    "IntensityParams",
    "PALETTE",
    "PINCH_THRESHOLD",
    "PaletteColor",
    "PaletteState",
    "ParticleEmitter",
    "SprayPainter",
    "map_intensity",
]
