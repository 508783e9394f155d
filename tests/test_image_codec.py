"""Tests for the model canvas conversion and image files."""

import numpy as np
import pytest
from PIL import Image

from voxblob.formats import (
    CANVAS_SIZE, GridImageCodec, fit_box, load_image, resize_256, save_image, scale_point
)

from conftest import random_table_image


class TestResize:

    def test_square_image_fills_canvas(self, palette):
        image = random_table_image(palette, (64, 64), seed=4)
        canvas = resize_256(image)
        assert canvas.size == (CANVAS_SIZE, CANVAS_SIZE)

        source = np.asarray(image)
        pixels = np.asarray(canvas)
        for x, z in [(0, 0), (63, 63), (10, 40), (33, 2)]:
            block = pixels[4 * z:4 * z + 4, 4 * x:4 * x + 4]
            assert np.all(block == source[z, x])

    def test_non_square_image_is_padded(self):
        image = Image.new('RGB', (32, 16), (0, 0, 0))
        canvas = np.asarray(resize_256(image, (127, 127, 127)))

        assert fit_box(32, 16) == (0, 0, 256, 128)
        assert np.all(canvas[:128, :, :3] == 0)
        assert np.all(canvas[128:, :, :3] == 127)
        assert np.all(canvas[..., 3] == 255)

    def test_scale_point_keeps_hard_edges(self):
        image = Image.new('RGB', (2, 1), (0, 0, 0))
        image.putpixel((1, 0), (255, 0, 0))
        pixels = np.asarray(scale_point(image, 8, 4))
        assert set(map(tuple, pixels.reshape(-1, 3))) == {(0, 0, 0), (255, 0, 0)}


class TestGridImageCodec:

    @pytest.mark.parametrize("size", [(64, 64), (32, 16), (16, 32), (10, 10)])
    def test_canvas_round_trip(self, palette, size):
        codec = GridImageCodec()
        image = random_table_image(palette, size, seed=9)

        model_input = codec.to_model_input(image)
        assert model_input.mode == 'RGB'
        assert model_input.size == (256, 256)

        result = codec.from_model_output(model_input, size)
        assert result.size == size
        np.testing.assert_array_equal(np.asarray(result), np.asarray(image.convert('RGB')))

    def test_transparent_cells_become_grey(self, small_grid):
        codec = GridImageCodec()
        model_input = codec.to_model_input(small_grid.image_from_grid(transparent=True))
        assert np.all(np.asarray(model_input) == 127)

    def test_rejects_wrong_canvas(self):
        with pytest.raises(ValueError):
            GridImageCodec().from_model_output(Image.new('RGB', (128, 128)), (64, 64))


class TestImageFiles:

    def test_save_adds_suffix_and_folders(self, tmp_path):
        image = Image.new('RGBA', (256, 256), (127, 127, 127, 255))
        path = save_image(image, tmp_path / "Output" / "Grid_0")

        assert path == tmp_path / "Output" / "Grid_0.png"
        assert path.exists()

        loaded = load_image(path)
        assert loaded.size == (256, 256)
        assert loaded.mode == 'RGBA'
