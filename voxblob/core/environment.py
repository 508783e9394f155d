"""
Environment - Grid Session Controller
=====================================

Owns the grid of an interactive session together with its seeded random
source, the inference controller and the display toggles. Input handling
and drawing are left to the host, which calls in with voxel indices or
pick rays and receives draw calls through callbacks.
"""

import numbers

import numpy as np
from typing import Callable, Optional, Sequence, Tuple

from voxblob.core.voxel import FunctionColor, Voxel
from voxblob.core.voxel_grid import VoxelGrid
from voxblob.core.operations import ShapeGenerator
from voxblob.core.inference import InferenceController, InferenceModel

Vector3 = Tuple[float, float, float]
ColorF = Tuple[float, float, float, float]

DrawCube = Callable[[Vector3, float, ColorF], None]
DrawTransparentCube = Callable[[Vector3, float], None]


class Environment:
    """
    Interactive session around a single voxel grid.

    Clicking a voxel grows a blob through the whole grid from it and runs
    the model on every layer.
    """

    GRID_SIZE = (64, 10, 64)
    RANDOM_SEED = 666
    CLICK_RADIUS = 20

    def __init__(self, model: InferenceModel,
                 size: Tuple[int, int, int] = GRID_SIZE,
                 voxel_size: float = 1.0,
                 origin: Vector3 = (0.0, 0.0, 0.0),
                 seed: Optional[int] = RANDOM_SEED,
                 verbose: bool = False):
        self.rng = np.random.default_rng(seed)
        self.grid = VoxelGrid(size=size, voxel_size=voxel_size, origin=origin, rng=self.rng)
        self.generator = ShapeGenerator(self.grid, self.rng)
        self.controller = InferenceController(self.grid, model)
        self.show_voids = True
        self.verbose = verbose

    # ==================== Selection ====================

    def select_voxel(self, index: Sequence[int]) -> Optional[Voxel]:
        """
        Resolve a voxel index coming from a hit test.

        Returns:
            The voxel, or None if the index is malformed or out of bounds
        """
        if isinstance(index, str):
            return None
        try:
            coords = tuple(index)
        except TypeError:
            return None
        if len(coords) != 3:
            return None
        # Whole numbers only, 3.0 is fine but 3.7 is not a cell
        if not all(isinstance(i, numbers.Real) and float(i).is_integer() for i in coords):
            return None
        x, y, z = (int(i) for i in coords)
        return self.grid.get_voxel(x, y, z)

    def pick_voxel(self, ray_origin: Vector3, ray_direction: Vector3,
                   layer: int = 0) -> Optional[Voxel]:
        """
        Find the first cell of a layer hit by a ray.

        Each cell is a cube of voxel_size centred on its world position;
        the slab method is evaluated for all cells of the layer at once.

        Returns:
            The nearest hit voxel, or None if the ray misses the layer
        """
        if not 0 <= layer < self.grid.height:
            return None

        direction = np.asarray(ray_direction, dtype=np.float64)
        length = np.linalg.norm(direction)
        if length == 0:
            return None
        direction = direction / length
        start = np.asarray(ray_origin, dtype=np.float64)

        xs, zs = np.meshgrid(np.arange(self.grid.width), np.arange(self.grid.depth), indexing='ij')
        index = np.stack([xs.ravel(), np.full(xs.size, layer), zs.ravel()], axis=1)
        centers = index * self.grid.voxel_size + np.asarray(self.grid.origin, dtype=np.float64)
        half = self.grid.voxel_size / 2.0
        box_min, box_max = centers - half, centers + half

        t_min = np.zeros(len(centers))
        t_max = np.full(len(centers), np.inf)
        for axis in range(3):
            if abs(direction[axis]) > 1e-9:
                t1 = (box_min[:, axis] - start[axis]) / direction[axis]
                t2 = (box_max[:, axis] - start[axis]) / direction[axis]
                t_min = np.maximum(t_min, np.minimum(t1, t2))
                t_max = np.minimum(t_max, np.maximum(t1, t2))
            else:
                # Ray is parallel to this axis' planes
                outside = (start[axis] < box_min[:, axis]) | (start[axis] > box_max[:, axis])
                t_max[outside] = -np.inf

        hits = t_min <= t_max
        if not hits.any():
            return None

        nearest = np.argmin(np.where(hits, t_min, np.inf))
        return self.grid.get_voxel(*index[nearest])

    # ==================== Actions ====================

    def on_voxel_clicked(self, index: Sequence[int]) -> bool:
        """
        Grow a blob from the clicked voxel and run the model on all layers.

        Returns:
            True if a voxel was selected and the model ran
        """
        voxel = self.select_voxel(index)
        if voxel is None:
            if self.verbose:
                print(f"Warning: Ignoring selection outside the grid: {index}")
            return False

        self.grid.create_black_blob(voxel.index, self.CLICK_RADIUS, flat=False, rng=self.rng)
        layers = self.controller.predict_and_update(all_layers=True)
        if self.verbose:
            print(f"Predicted {layers} layers from voxel {voxel.index}")
        return True

    def toggle_voids(self) -> bool:
        """Switch void display; returns the new setting."""
        self.show_voids = not self.show_voids
        return self.show_voids

    def clear(self):
        """Clear the grid."""
        self.grid.clear_grid()

    # ==================== Drawing ====================

    def draw_voxels(self, draw_cube: DrawCube,
                    draw_transparent_cube: Optional[DrawTransparentCube] = None) -> int:
        """
        Issue draw calls for the grid.

        Classified active voxels are drawn with their table colour. Empty
        ground layer voxels are drawn as transparent cubes while voids are
        shown.

        Returns:
            Number of draw calls issued
        """
        palette = self.grid.palette
        colors = {fc: palette.get_color(fc).to_float() for fc in FunctionColor}
        size = self.grid.voxel_size

        calls = 0
        for voxel in self.grid.iter_voxels():
            position = self.grid.voxel_position(voxel.index)
            if not voxel.is_void:
                draw_cube(position, size, colors[voxel.function_color])
                calls += 1
            elif self.show_voids and draw_transparent_cube is not None and voxel.index[1] == 0:
                draw_transparent_cube(position, size)
                calls += 1
        return calls
