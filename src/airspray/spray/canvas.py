"""
Canvas Surface
===============

Persistent BGRA raster that accumulates paint across frames. Nothing here
clears the buffer implicitly: only ``clear()`` and ``resize()`` discard
content.

Discs are rasterised with ``cv2.circle`` into a coverage mask over a small
region of interest, then blended source-over with straight alpha. A pixel's
alpha can only grow under a draw, so painted coverage never shrinks between
clears.
"""

import math
import logging
from typing import Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

BGRA = Tuple[int, int, int, int]

# Fixed-point bits for sub-pixel circle centers and radii
_SHIFT = 4
_SCALE = 1 << _SHIFT


class CanvasSurface:
    """
    Mutable ``(height, width, 4)`` uint8 buffer, transparent at creation.

    Example:
        >>> canvas = CanvasSurface(1280, 720)
        >>> canvas.fill_circle((640, 360), 6, (85, 0, 255, 200))
        >>> image = canvas.composite_over(frame)
    """

    def __init__(self, width: int, height: int):
        self._pixels = self._allocate(width, height)

    @staticmethod
    def _allocate(width: int, height: int) -> np.ndarray:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        return np.zeros((int(height), int(width), 4), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the BGRA buffer."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def clear(self) -> None:
        """Reset every pixel to fully transparent."""
        self._pixels[...] = 0
        logger.debug("Canvas cleared")

    def resize(self, width: int, height: int) -> None:
        """Reallocate at a new size. Existing paint is discarded."""
        self._pixels = self._allocate(width, height)
        logger.info(f"Canvas resized to {width}x{height}")

    def coverage(self) -> int:
        """Number of pixels with non-zero alpha."""
        return int(np.count_nonzero(self._pixels[..., 3]))

    def fill_circle(self, center: Tuple[float, float], diameter: float, color: BGRA) -> None:
        """Blend a filled disc of ``diameter`` pixels centered at ``center``."""
        self._draw_circle(center, diameter / 2.0, color, thickness=-1)

    def stroke_circle(self, center: Tuple[float, float], diameter: float,
                      color: BGRA, thickness: int = 1) -> None:
        """Blend a ring outline of ``diameter`` pixels centered at ``center``."""
        self._draw_circle(center, diameter / 2.0, color, thickness=thickness)

    def _draw_circle(self, center, radius: float, color: BGRA, thickness: int) -> None:
        if radius <= 0 or color[3] <= 0:
            return

        cx, cy = center
        pad = radius + max(thickness, 0) + 2
        x0 = max(0, int(math.floor(cx - pad)))
        y0 = max(0, int(math.floor(cy - pad)))
        x1 = min(self.width, int(math.ceil(cx + pad)) + 1)
        y1 = min(self.height, int(math.ceil(cy + pad)) + 1)
        if x0 >= x1 or y0 >= y1:
            # Entirely off-canvas
            return

        mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
        cv2.circle(
            mask,
            (int(round((cx - x0) * _SCALE)), int(round((cy - y0) * _SCALE))),
            max(1, int(round(radius * _SCALE))),
            255,
            thickness=thickness,
            lineType=cv2.LINE_AA,
            shift=_SHIFT,
        )
        self._blend(mask, x0, y0, color)

    def _blend(self, mask: np.ndarray, x0: int, y0: int, color: BGRA) -> None:
        """Source-over composite ``color`` through ``mask`` at ``(x0, y0)``."""
        h, w = mask.shape
        roi = self._pixels[y0:y0 + h, x0:x0 + w]

        src_a = (mask.astype(np.float32) / 255.0) * (color[3] / 255.0)
        if not src_a.any():
            return
        dst_a = roi[..., 3].astype(np.float32) / 255.0

        out_a = src_a + dst_a * (1.0 - src_a)
        src_rgb = np.asarray(color[:3], dtype=np.float32)
        dst_rgb = roi[..., :3].astype(np.float32)

        weight_src = src_a[..., None]
        weight_dst = (dst_a * (1.0 - src_a))[..., None]
        with np.errstate(divide="ignore", invalid="ignore"):
            out_rgb = (src_rgb * weight_src + dst_rgb * weight_dst) / out_a[..., None]
        out_rgb = np.where(out_a[..., None] > 0, out_rgb, dst_rgb)

        roi[..., :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
        # Never let rounding pull alpha below what was already there
        new_alpha = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)
        roi[..., 3] = np.maximum(roi[..., 3], new_alpha)

    def composite_over(self, background: np.ndarray) -> np.ndarray:
        """
        Composite the canvas over a BGR background of the same size.

        Returns:
            New BGR uint8 image
        """
        if background.shape[:2] != self._pixels.shape[:2]:
            background = cv2.resize(background, (self.width, self.height))

        alpha = self._pixels[..., 3:4].astype(np.float32) / 255.0
        out = background.astype(np.float32) * (1.0 - alpha) + self._pixels[..., :3].astype(np.float32) * alpha
        return np.clip(np.rint(out), 0, 255).astype(np.uint8)
