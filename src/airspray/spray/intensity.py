"""
Intensity mapping: hand size (a distance-from-camera proxy) to emission
parameters. A small apparent hand (far away) gives a wide, dense, opaque
spray; a large one (close) gives a tight, sparse, faint spray.
"""

import math
from dataclasses import dataclass

HAND_SIZE_MIN = 50.0
HAND_SIZE_MAX = 300.0

SPREAD_RADIUS_RANGE = (10.0, 60.0)
PARTICLE_COUNT_RANGE = (5.0, 40.0)
PARTICLE_SIZE_RANGE = (2.0, 6.0)
OPACITY_RANGE = (50.0, 255.0)


def constrain(value: float, low: float, high: float) -> float:
    """Clamp ``value`` to ``[low, high]``."""
    return max(low, min(high, value))


def linear_map(value: float, start1: float, stop1: float,
               start2: float, stop2: float) -> float:
    """Re-map ``value`` from ``[start1, stop1]`` onto ``[start2, stop2]`` (no clamping)."""
    return start2 + (stop2 - start2) * ((value - start1) / (stop1 - start1))


def intensity_factor(hand_size: float) -> float:
    """Factor in [0, 1]: 1 at hand size <= 50 px, 0 at >= 300 px."""
    clamped = constrain(hand_size, HAND_SIZE_MIN, HAND_SIZE_MAX)
    factor = linear_map(clamped, HAND_SIZE_MIN, HAND_SIZE_MAX, 1.0, 0.0)
    return constrain(factor, 0.0, 1.0)


@dataclass(frozen=True)
class IntensityParams:
    """Emission parameters for one frame of spraying."""
    factor: float
    spread_radius: float
    particle_count: float
    particle_size_base: float
    opacity: float

    @property
    def count(self) -> int:
        """Number of particles to draw this frame."""
        # Halves round up
        return int(math.floor(self.particle_count + 0.5))

    @property
    def alpha(self) -> int:
        """Opacity as an 8-bit alpha value."""
        return int(constrain(self.opacity, 0, 255))


def map_intensity(hand_size: float) -> IntensityParams:
    """Map a hand size in pixels to the four emission parameters."""
    factor = intensity_factor(hand_size)
    return IntensityParams(
        factor=factor,
        spread_radius=linear_map(factor, 0.0, 1.0, *SPREAD_RADIUS_RANGE),
        particle_count=linear_map(factor, 0.0, 1.0, *PARTICLE_COUNT_RANGE),
        particle_size_base=linear_map(factor, 0.0, 1.0, *PARTICLE_SIZE_RANGE),
        opacity=linear_map(factor, 0.0, 1.0, *OPACITY_RANGE),
    )
