"""Tests for the TorchScript generator wrapper."""

import numpy as np
import pytest
from PIL import Image

torch = pytest.importorskip("torch")

import main
from voxblob.core import TorchScriptModel
from voxblob.formats import load_image

from conftest import random_table_image


class HalfCanvas(torch.nn.Module):
    """Drops the lower half of the image."""

    def forward(self, x):
        return x[:, :, :128, :]


@pytest.fixture
def identity_path(tmp_path):
    path = tmp_path / "identity.pt"
    torch.jit.save(torch.jit.script(torch.nn.Identity()), str(path))
    return path


@pytest.fixture
def half_canvas_path(tmp_path):
    path = tmp_path / "half.pt"
    torch.jit.save(torch.jit.script(HalfCanvas()), str(path))
    return path


class TestTorchScriptModel:

    def test_identity_keeps_pixels(self, identity_path, palette):
        model = TorchScriptModel(identity_path)
        image = random_table_image(palette, (256, 256), seed=3).convert('RGB')

        output = model.predict(image)
        assert output.mode == 'RGB'
        assert output.size == (256, 256)
        assert np.array_equal(np.asarray(output), np.asarray(image))

    def test_output_shape_follows_module(self, half_canvas_path):
        model = TorchScriptModel(half_canvas_path)
        output = model.predict(Image.new('RGB', (256, 256), (0, 0, 0)))
        assert output.size == (256, 128)

    def test_missing_file(self, tmp_path):
        with pytest.raises((ValueError, RuntimeError)):
            TorchScriptModel(tmp_path / "missing.pt")


class TestPredictWithTorch:

    def test_sample_on_non_square_grid(self, tmp_path, identity_path):
        samples = tmp_path / "Samples"
        assert main.main(["--size", "32x1x16", "--output", str(samples),
                          "rectangles", "--samples", "1", "--min-width", "2", "--max-width", "4",
                          "--min-depth", "2", "--max-depth", "4"]) == 0

        output = tmp_path / "Predicted"
        assert main.main(["--size", "32x1x16", "--output", str(output),
                          "predict", "--model", str(identity_path),
                          "--input", str(samples / "Grid_0.png")]) == 0
        assert load_image(output / "Layer_0.png").size == (32, 16)

    def test_bad_output_size_fails(self, tmp_path, half_canvas_path, capsys):
        code = main.main(["--size", "16x1x16", "--output", str(tmp_path / "Predicted"),
                          "predict", "--model", str(half_canvas_path)])
        assert code == 1
        assert "layer 0" in capsys.readouterr().out
