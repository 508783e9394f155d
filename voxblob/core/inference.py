"""
Inference - Per-Layer Predict and Update
========================================

Runs an image-to-image model over grid layers and writes the predicted
classes back into the grid.
"""

from enum import Enum, auto
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np
from PIL import Image

from voxblob.core.voxel_grid import VoxelGrid
from voxblob.formats.image import CANVAS_SIZE, GridImageCodec


class InferenceError(RuntimeError):
    """Raised when the model fails for a layer."""

    def __init__(self, message: str, layer: Optional[int] = None):
        super().__init__(message)
        self.layer = layer


class InferenceModel:
    """
    Boundary to an image-to-image model.

    Takes one 256x256 RGB image and returns one 256x256 RGB image.
    """

    def predict(self, image: Image.Image) -> Image.Image:
        raise NotImplementedError


class CallableModel(InferenceModel):
    """Wraps a plain function as a model."""

    def __init__(self, func: Callable[[Image.Image], Image.Image]):
        self.func = func

    def predict(self, image: Image.Image) -> Image.Image:
        return self.func(image)


class TorchScriptModel(InferenceModel):
    """
    Pix2pix generator exported with TorchScript.

    Pixels are mapped to [-1, 1] in NCHW layout on the way in and back to
    8-bit RGB on the way out.
    """

    def __init__(self, filepath: Union[str, Path], device: str = 'cpu'):
        import torch

        self.device = torch.device(device)
        self.module = torch.jit.load(str(filepath), map_location=self.device)
        self.module.eval()

    def predict(self, image: Image.Image) -> Image.Image:
        import torch

        pixels = np.asarray(image.convert('RGB'), dtype=np.float32) / 127.5 - 1.0
        tensor = torch.from_numpy(pixels).permute(2, 0, 1).unsqueeze(0).to(self.device)

        with torch.no_grad():
            output = self.module(tensor)

        result = output.squeeze(0).permute(1, 2, 0).cpu().numpy()
        result = np.clip((result + 1.0) * 127.5, 0, 255).round().astype(np.uint8)
        return Image.fromarray(result)


class InferenceState(Enum):
    """Controller states."""
    IDLE = auto()
    PREDICTING = auto()


class InferenceController:
    """
    Drives the rasterize -> predict -> write back cycle over grid layers.

    Holds a non-owning reference to the grid. Layers are processed one at
    a time in ascending order; the first failing layer aborts the pass and
    leaves the remaining layers untouched.
    """

    def __init__(self, grid: VoxelGrid, model: InferenceModel,
                 codec: Optional[GridImageCodec] = None):
        self.grid = grid
        self.model = model
        self.codec = codec if codec is not None else GridImageCodec()
        self.state = InferenceState.IDLE

    @property
    def is_predicting(self) -> bool:
        return self.state == InferenceState.PREDICTING

    def predict_and_update(self, all_layers: bool = False) -> int:
        """
        Run the model on the grid and update voxel states.

        Args:
            all_layers: If True, run on every layer; otherwise only layer 0

        Returns:
            Number of layers processed

        Raises:
            InferenceError: If the model fails on a layer, or a pass is
                already running
        """
        if self.is_predicting:
            raise InferenceError("Prediction already in progress")

        self.state = InferenceState.PREDICTING
        try:
            # Stale pending marks from the previous pass
            self.grid.clear_reds()

            layer_count = self.grid.height if all_layers else 1
            for layer in range(layer_count):
                self.update_layer(layer)
            return layer_count
        finally:
            self.state = InferenceState.IDLE

    def update_layer(self, layer: int):
        """Run one layer through the model and write the result back."""
        grid_image = self.grid.image_from_grid(layer=layer)
        model_input = self.codec.to_model_input(grid_image)

        try:
            output = self.model.predict(model_input)
        except Exception as e:
            raise InferenceError(f"Model failed on layer {layer}: {e}", layer=layer) from e

        if not isinstance(output, Image.Image):
            raise InferenceError(
                f"Model returned {type(output).__name__} for layer {layer}, expected an image",
                layer=layer
            )
        if output.size != (CANVAS_SIZE, CANVAS_SIZE):
            raise InferenceError(
                f"Model returned a {output.size} image for layer {layer}, "
                f"expected {CANVAS_SIZE}x{CANVAS_SIZE}",
                layer=layer
            )

        image = self.codec.from_model_output(output, (self.grid.width, self.grid.depth))
        self.grid.set_states_from_image(image, layer=layer)
