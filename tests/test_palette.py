"""
Tests for Palette State
========================
"""

import pytest

from airspray.spray.palette import PALETTE, PaletteColor, PaletteState


class TestPaletteColor:

    def test_hex_conversions(self):
        color = PaletteColor("Neon Pink", "#FF0055")

        assert color.rgb == (255, 0, 85)
        assert color.bgr == (85, 0, 255)
        assert color.bgra(128) == (85, 0, 255, 128)

    def test_palette_has_seven_named_colors(self):
        assert len(PALETTE) == 7
        assert [c.hex for c in PALETTE] == [
            "#FF0055", "#00FF99", "#00CCFF", "#FFFF00", "#FF6600", "#CC00FF", "#FFFFFF",
        ]


class TestPaletteState:

    def test_starts_at_first_color(self):
        palette = PaletteState()

        assert palette.index == 0
        assert palette.current.name == "Neon Pink"

    @pytest.mark.parametrize("clicks", [0, 1, 6, 7, 8, 13, 14, 50])
    def test_cycle_wraps(self, clicks):
        palette = PaletteState()
        for _ in range(clicks):
            palette.cycle()

        assert palette.index == clicks % 7

    def test_select(self):
        palette = PaletteState()

        assert palette.select(4).name == "Orange"
        assert palette.index == 4
        assert palette.cycle().name == "Purple"

    @pytest.mark.parametrize("index", [-1, 7, 100])
    def test_select_out_of_range(self, index):
        palette = PaletteState(2)

        with pytest.raises(IndexError):
            palette.select(index)
        assert palette.index == 2
