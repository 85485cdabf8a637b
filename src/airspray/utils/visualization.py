"""
Visualization Module
=====================

Builds the displayed image: mirrored half-opacity camera preview, the paint
canvas on top, then the palette selector and text overlays.
"""

import cv2
import numpy as np
from typing import List, Optional, Tuple
from dataclasses import dataclass

from ..spray.canvas import CanvasSurface
from ..spray.palette import PALETTE, PaletteState

Rect = Tuple[int, int, int, int]

INSTRUCTIONS = [
    "Pinch thumb + index to spray",
    "Move hand away for a wider, denser spray",
    "Click: next color (or click a swatch)",
    "Space: clear   P: stats   Q/Esc: quit",
]


@dataclass
class VisualizerConfig:
    """Visualization settings."""
    preview_opacity: float = 0.5
    show_fps: bool = True
    show_instructions: bool = True

    swatch_radius: int = 16
    swatch_gap: int = 12
    bar_margin: int = 32

    # Colors (BGR format)
    text_color: Tuple[int, int, int] = (255, 255, 255)
    bar_color: Tuple[int, int, int] = (0, 0, 0)
    warning_color: Tuple[int, int, int] = (0, 0, 255)

    font_scale: float = 0.6
    font_thickness: int = 1

    @classmethod
    def from_dict(cls, config: dict) -> "VisualizerConfig":
        """Create config from dictionary."""
        colors = config.get("colors", {})
        return cls(
            preview_opacity=config.get("preview_opacity", 0.5),
            show_fps=config.get("show_fps", True),
            show_instructions=config.get("show_instructions", True),
            swatch_radius=config.get("swatch_radius", 16),
            swatch_gap=config.get("swatch_gap", 12),
            bar_margin=config.get("bar_margin", 32),
            text_color=tuple(colors.get("text", [255, 255, 255])),
            bar_color=tuple(colors.get("bar", [0, 0, 0])),
            warning_color=tuple(colors.get("warning", [0, 0, 255])),
            font_scale=config.get("font_scale", 0.6),
            font_thickness=config.get("font_thickness", 1),
        )


class Visualizer:
    """
    Display composition for the spray window.

    Example:
        >>> viz = Visualizer(VisualizerConfig())
        >>> image = viz.compose(frame.image, canvas, palette)
        >>> cv2.imshow("AirSpray", image)
    """

    def __init__(self, config: Optional[VisualizerConfig] = None):
        self.config = config or VisualizerConfig()
        self._font = cv2.FONT_HERSHEY_SIMPLEX

    def preview(self, frame: Optional[np.ndarray], width: int, height: int) -> np.ndarray:
        """
        Mirrored, dimmed camera frame scaled to ``width`` x ``height``.

        Returns a black image when no frame is available.
        """
        if frame is None:
            return np.zeros((height, width, 3), dtype=np.uint8)

        image = cv2.flip(frame, 1)
        if image.shape[:2] != (height, width):
            image = self._cover(image, width, height)
        return cv2.convertScaleAbs(image, alpha=self.config.preview_opacity)

    @staticmethod
    def _cover(image: np.ndarray, width: int, height: int) -> np.ndarray:
        """Scale to fill ``width`` x ``height`` and crop the overflow, centered."""
        src_h, src_w = image.shape[:2]
        scale = max(width / src_w, height / src_h)
        new_w = max(width, int(round(src_w * scale)))
        new_h = max(height, int(round(src_h * scale)))
        resized = cv2.resize(image, (new_w, new_h))
        x0 = (new_w - width) // 2
        y0 = (new_h - height) // 2
        return resized[y0:y0 + height, x0:x0 + width]

    def compose(
        self,
        frame: Optional[np.ndarray],
        canvas: CanvasSurface,
        palette: PaletteState,
        fps: Optional[float] = None,
    ) -> np.ndarray:
        """Full display image: preview, canvas, palette bar, overlays."""
        image = canvas.composite_over(self.preview(frame, canvas.width, canvas.height))
        self.draw_palette(image, palette)
        if self.config.show_instructions:
            self.draw_instructions(image, INSTRUCTIONS)
        if self.config.show_fps and fps is not None:
            self.draw_fps(image, fps)
        return image

    def swatch_rects(self, width: int, height: int) -> List[Rect]:
        """Bounding boxes (x, y, w, h) of the palette swatches, in order."""
        r = self.config.swatch_radius
        gap = self.config.swatch_gap
        total = len(PALETTE) * 2 * r + (len(PALETTE) - 1) * gap
        x = (width - total) // 2
        y = height - self.config.bar_margin - 2 * r
        return [(x + i * (2 * r + gap), y, 2 * r, 2 * r) for i in range(len(PALETTE))]

    def swatch_at(self, x: int, y: int, width: int, height: int) -> Optional[int]:
        """Palette index under the point, or None."""
        for index, (sx, sy, sw, sh) in enumerate(self.swatch_rects(width, height)):
            if sx <= x < sx + sw and sy <= y < sy + sh:
                return index
        return None

    def draw_palette(self, image: np.ndarray, palette: PaletteState) -> np.ndarray:
        """Draw the swatch bar at the bottom center; the current color is enlarged and ringed."""
        height, width = image.shape[:2]
        rects = self.swatch_rects(width, height)
        r = self.config.swatch_radius

        x0, y0 = rects[0][0] - r // 2, rects[0][1] - r // 2
        x1, y1 = rects[-1][0] + rects[-1][2] + r // 2, rects[-1][1] + rects[-1][3] + r // 2
        overlay = image.copy()
        cv2.rectangle(overlay, (x0, y0), (x1, y1), self.config.bar_color, -1)
        cv2.addWeighted(overlay, 0.5, image, 0.5, 0, dst=image)

        for index, (sx, sy, sw, sh) in enumerate(rects):
            center = (sx + sw // 2, sy + sh // 2)
            selected = index == palette.index
            radius = int(r * 1.25) if selected else int(r * 0.85)
            cv2.circle(image, center, radius, PALETTE[index].bgr, -1, cv2.LINE_AA)
            if selected:
                cv2.circle(image, center, radius + 2, (255, 255, 255), 2, cv2.LINE_AA)

        return image

    def draw_fps(self, image: np.ndarray, fps: float) -> np.ndarray:
        color = self.config.text_color if fps >= 25 else self.config.warning_color
        cv2.putText(image, f"FPS: {fps:.1f}", (20, 30),
                    self._font, self.config.font_scale, color, self.config.font_thickness)
        return image

    def draw_instructions(self, image: np.ndarray, instructions: List[str],
                          origin: Tuple[int, int] = (20, 60)) -> np.ndarray:
        """Draw instruction lines from the top-left ``origin``."""
        x, y = origin
        line_height = 22
        for i, line in enumerate(instructions):
            cv2.putText(image, line, (x, y + i * line_height),
                        self._font, 0.5, self.config.text_color, 1)
        return image

    def instructions_screen(self, width: int, height: int, message: str) -> np.ndarray:
        """Static screen shown when live painting could not be started."""
        image = np.zeros((height, width, 3), dtype=np.uint8)
        cv2.putText(image, message, (20, 30),
                    self._font, self.config.font_scale, self.config.warning_color, 2)
        self.draw_instructions(image, INSTRUCTIONS + ["", "Press Q or Esc to exit"])
        return image
