"""Fixed spray palette and the current-color selection."""

import logging
from typing import NamedTuple, Tuple

logger = logging.getLogger(__name__)


class PaletteColor(NamedTuple):
    name: str
    hex: str

    @property
    def rgb(self) -> Tuple[int, int, int]:
        value = self.hex.lstrip("#")
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

    @property
    def bgr(self) -> Tuple[int, int, int]:
        r, g, b = self.rgb
        return (b, g, r)

    def bgra(self, alpha: int = 255) -> Tuple[int, int, int, int]:
        return self.bgr + (int(alpha),)


PALETTE: Tuple[PaletteColor, ...] = (
    PaletteColor("Neon Pink", "#FF0055"),
    PaletteColor("Neon Green", "#00FF99"),
    PaletteColor("Cyan", "#00CCFF"),
    PaletteColor("Yellow", "#FFFF00"),
    PaletteColor("Orange", "#FF6600"),
    PaletteColor("Purple", "#CC00FF"),
    PaletteColor("White", "#FFFFFF"),
)


class PaletteState:
    """Current index into ``PALETTE``; cycled by clicks or set directly."""

    def __init__(self, index: int = 0):
        self._index = 0
        self.select(index)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> PaletteColor:
        return PALETTE[self._index]

    def __len__(self) -> int:
        return len(PALETTE)

    def cycle(self) -> PaletteColor:
        """Advance to the next color, wrapping around."""
        self._index = (self._index + 1) % len(PALETTE)
        logger.debug(f"Palette -> {self.current.name}")
        return self.current

    def select(self, index: int) -> PaletteColor:
        """Jump to ``index``. Raises IndexError if out of range."""
        if not 0 <= index < len(PALETTE):
            raise IndexError(f"Palette index {index} out of range 0..{len(PALETTE) - 1}")
        self._index = index
        logger.debug(f"Palette -> {self.current.name}")
        return self.current
