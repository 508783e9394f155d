"""Shared fixtures for the VoxBlob test suite."""

import os
import sys

import numpy as np
import pytest
from PIL import Image

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from voxblob.core import CallableModel, FunctionPalette, VoxelGrid


@pytest.fixture
def grid():
    """The default 64x10x64 grid with a fixed seed."""
    return VoxelGrid.create(64, 10, 64, seed=1234)


@pytest.fixture
def small_grid():
    return VoxelGrid.create(16, 4, 16, seed=42)


@pytest.fixture
def palette():
    return FunctionPalette()


@pytest.fixture
def identity_model():
    """Model that returns its input and records every call."""
    calls = []

    def predict(image):
        calls.append(image.copy())
        return image

    model = CallableModel(predict)
    model.calls = calls
    return model


def solid_canvas(rgb):
    """256x256 RGB model output of a single colour."""
    return Image.new('RGB', (256, 256), tuple(rgb))


def random_table_image(palette, size, seed=0, transparent=False):
    """Image of the given size made only of table colours."""
    rng = np.random.default_rng(seed)
    table = palette.get_rgba_array(transparent=transparent)
    classes = rng.integers(0, len(table), size=(size[1], size[0]))
    return Image.fromarray(table[classes])
