"""Tests for the fixed classification colour table."""

import numpy as np
import pytest

from voxblob.core.palette import GREY, TRANSPARENT, PaletteColor
from voxblob.core.voxel import FunctionColor, Voxel


class TestPaletteColor:

    def test_conversions(self):
        color = PaletteColor(r=255, g=0, b=0)
        assert color.to_tuple() == (255, 0, 0, 255)
        assert color.to_float() == (1.0, 0.0, 0.0, 1.0)

    def test_transparent_grey(self):
        assert TRANSPARENT.to_tuple() == (127, 127, 127, 0)
        assert TRANSPARENT.with_alpha(255) == GREY


class TestFunctionPalette:

    def test_table_indexed_by_class_value(self, palette):
        rgba = palette.get_rgba_array()
        for function_color in FunctionColor:
            assert tuple(rgba[function_color.value]) == palette.get_color(function_color).to_tuple()

    def test_transparent_table(self, palette):
        rgba = palette.get_rgba_array(transparent=True)
        assert rgba[FunctionColor.NONE.value, 3] == 0
        assert rgba[FunctionColor.BLACK.value, 3] == 255

    def test_exact_colors_classify_to_themselves(self, palette):
        pixels = palette.get_rgba_array()
        classes = palette.classify_pixels(pixels)
        assert list(classes) == [fc.value for fc in palette.classes]

    @pytest.mark.parametrize("rgb, expected", [
        ((10, 5, 5), FunctionColor.BLACK),
        ((200, 30, 20), FunctionColor.RED),
        ((130, 125, 120), FunctionColor.NONE),
        ((240, 230, 30), FunctionColor.YELLOW),
        ((20, 220, 40), FunctionColor.GREEN),
        ((30, 240, 250), FunctionColor.CYAN),
        ((230, 20, 220), FunctionColor.MAGENTA),
    ])
    def test_nearest_color(self, palette, rgb, expected):
        assert palette.find_nearest_color(*rgb) == expected
        assert palette.classify_pixels(np.array([rgb], dtype=np.uint8))[0] == expected.value

    def test_transparent_pixels_are_inactive(self, palette):
        assert palette.find_nearest_color(0, 0, 0, a=0) == FunctionColor.NONE
        pixels = np.array([[0, 0, 0, 0], [0, 0, 0, 255]], dtype=np.uint8)
        assert list(palette.classify_pixels(pixels)) == [FunctionColor.NONE.value,
                                                        FunctionColor.BLACK.value]

    def test_rejects_bad_channel_count(self, palette):
        with pytest.raises(ValueError):
            palette.classify_pixels(np.zeros((4, 2), dtype=np.uint8))


class TestVoxel:

    def test_flags(self):
        solid = Voxel((0, 0, 0), True, FunctionColor.BLACK)
        pending = Voxel((0, 0, 0), True, FunctionColor.RED)
        empty = Voxel((0, 0, 0))
        assert solid.is_solid and not solid.is_void
        assert pending.is_pending and not pending.is_solid
        assert empty.is_void and not empty.is_solid
