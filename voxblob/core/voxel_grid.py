"""
VoxelGrid - Core Voxel Grid Structure
=====================================

Owns the state of every voxel of a fixed size grid, the shape stamping
operations and the layer <-> image conversion.
Uses numpy arrays for storage; cells are handed out as Voxel snapshots.
"""

import numpy as np
from PIL import Image
from typing import Optional, Tuple, Iterator
from dataclasses import dataclass, field

from voxblob.core.voxel import FunctionColor, Voxel
from voxblob.core.palette import FunctionPalette
from voxblob.core.operations import ShapeGenerator

_NONE = FunctionColor.NONE.value
_BLACK = FunctionColor.BLACK.value
_RED = FunctionColor.RED.value


@dataclass(eq=False)
class VoxelGrid:
    """
    Fixed size 3D grid of classified voxels.

    Attributes:
        size: Tuple of (x, y, z) dimensions; y is the layer axis
        voxel_size: Edge length of one cell in world units
        origin: World position of cell (0, 0, 0)
        rng: Random source used by probabilistic stamping
    """

    size: Tuple[int, int, int] = (64, 10, 64)
    voxel_size: float = 1.0
    origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)
    palette: FunctionPalette = field(default_factory=FunctionPalette, repr=False)
    _active: np.ndarray = field(default=None, repr=False)
    _colors: np.ndarray = field(default=None, repr=False)

    def __post_init__(self):
        """Validate dimensions and allocate the cell arrays."""
        self.size = tuple(int(s) for s in self.size)
        if len(self.size) != 3 or min(self.size) < 1:
            raise ValueError(f"Invalid grid size: {self.size}")
        if self.voxel_size <= 0:
            raise ValueError(f"Voxel size must be positive, got {self.voxel_size}")

        self._active = np.zeros(self.size, dtype=bool)
        self._colors = np.full(self.size, _NONE, dtype=np.uint8)

    @classmethod
    def create(cls, size_x: int = 64, size_y: int = 10, size_z: int = 64,
               voxel_size: float = 1.0, seed: Optional[int] = None) -> 'VoxelGrid':
        """
        Factory method to create a new empty grid.

        Args:
            size_x: X dimension
            size_y: Y dimension (number of layers)
            size_z: Z dimension
            voxel_size: Cell edge length
            seed: Seed for the grid's random source

        Returns:
            New VoxelGrid instance
        """
        return cls(size=(size_x, size_y, size_z), voxel_size=voxel_size,
                   rng=np.random.default_rng(seed))

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    @property
    def depth(self) -> int:
        return self.size[2]

    # ==================== Cell Access ====================

    def is_valid_position(self, x: int, y: int, z: int) -> bool:
        """Check if coordinates are within the grid bounds."""
        return (0 <= x < self.size[0] and
                0 <= y < self.size[1] and
                0 <= z < self.size[2])

    def get_voxel(self, x: int, y: int, z: int) -> Optional[Voxel]:
        """
        Get a snapshot of the voxel at the specified position.

        Returns:
            Voxel, or None if the position is outside the grid
        """
        if not self.is_valid_position(x, y, z):
            return None
        return Voxel(
            index=(int(x), int(y), int(z)),
            is_active=bool(self._active[x, y, z]),
            function_color=FunctionColor(int(self._colors[x, y, z]))
        )

    def iter_voxels(self, active_only: bool = False) -> Iterator[Voxel]:
        """Iterate over voxel snapshots in x, y, z order."""
        if active_only:
            indices = np.argwhere(self._active)
        else:
            indices = np.ndindex(*self.size)
        for x, y, z in indices:
            yield self.get_voxel(x, y, z)

    def voxel_position(self, index: Tuple[int, int, int]) -> Tuple[float, float, float]:
        """World space position of a cell."""
        return tuple(float(i) * self.voxel_size + o for i, o in zip(index, self.origin))

    def get_layer(self, layer: int = 0) -> np.ndarray:
        """
        Get the classes of one layer, inactive cells reported as NONE.

        Returns:
            (size_x, size_z) uint8 array of FunctionColor values
        """
        self._check_layer(layer)
        return np.where(self._active[:, layer, :], self._colors[:, layer, :], _NONE).astype(np.uint8)

    def count(self, function_color: FunctionColor) -> int:
        """Number of active voxels with the given classification."""
        return int(np.count_nonzero(self._active & (self._colors == function_color.value)))

    def active_count(self) -> int:
        """Number of active voxels."""
        return int(np.count_nonzero(self._active))

    def _check_layer(self, layer: int):
        if not 0 <= layer < self.size[1]:
            raise ValueError(f"Layer {layer} out of range [0, {self.size[1]})")

    # ==================== Mutation ====================

    def clear_grid(self):
        """Reset every voxel to inactive and unclassified."""
        self._active.fill(False)
        self._colors.fill(_NONE)

    def clear_reds(self):
        """Reset red (pending prediction) voxels, leaving every other class untouched."""
        reds = self._colors == _RED
        self._active[reds] = False
        self._colors[reds] = _NONE

    def create_black_blob(self, origin: Tuple[int, int, int], radius: float,
                          picky: bool = True, flat: bool = True,
                          keep_chance: float = ShapeGenerator.KEEP_CHANCE,
                          rng: Optional[np.random.Generator] = None) -> bool:
        """
        Stamp a roughly circular region of black voxels.

        Args:
            origin: Blob centre (x, y, z)
            radius: Approximate blob radius in cells
            picky: If True, randomly skip cells while growing
            flat: If True, stay on the origin's layer; otherwise grow a sphere
            keep_chance: Probability of keeping a newly reached cell when picky
            rng: Random source, defaults to the grid's own

        Returns:
            True if the blob changed the grid, False otherwise
        """
        if not self.is_valid_position(*origin) or radius < 1:
            return False

        mask = ShapeGenerator.blob_mask(
            self.size, origin, radius,
            rng=rng if rng is not None else self.rng,
            picky=picky, flat=flat, keep_chance=keep_chance
        )
        return self._stamp(mask)

    def create_black_rectangle(self, origin: Tuple[int, int, int],
                               width: int, depth: int) -> bool:
        """
        Stamp an axis aligned rectangle of black voxels on the origin's layer.

        Args:
            origin: Minimum corner (x, y, z)
            width: Extent along x
            depth: Extent along z

        Returns:
            True if the rectangle fits the grid, False otherwise
        """
        x, y, z = origin
        if width < 1 or depth < 1:
            return False
        if not self.is_valid_position(x, y, z):
            return False
        if not self.is_valid_position(x + width - 1, y, z + depth - 1):
            return False

        self._active[x:x + width, y, z:z + depth] = True
        self._colors[x:x + width, y, z:z + depth] = _BLACK
        return True

    def _stamp(self, mask: np.ndarray) -> bool:
        """Set masked cells black; refuse stamps that change nothing."""
        solid = self._active & (self._colors == _BLACK)
        if not np.any(mask & ~solid):
            return False

        self._active[mask] = True
        self._colors[mask] = _BLACK
        return True

    # ==================== Image Conversion ====================

    def image_from_grid(self, layer: int = 0, transparent: bool = False) -> Image.Image:
        """
        Rasterize one layer.

        Args:
            layer: Layer index (y)
            transparent: If True, inactive cells get alpha 0 instead of grey

        Returns:
            RGBA image of size (size_x, size_z); pixel (x, z) is cell (x, layer, z)
        """
        classes = self.get_layer(layer)
        rgba = self.palette.get_rgba_array(transparent=transparent)[classes]
        return Image.fromarray(np.ascontiguousarray(rgba.transpose(1, 0, 2)))

    def set_states_from_image(self, image: Image.Image, layer: int = 0):
        """
        Write the nearest-colour classification of every pixel into a layer.

        Args:
            image: Image of size (size_x, size_z)
            layer: Layer index (y)

        Raises:
            ValueError: If the image size does not match the grid
        """
        self._check_layer(layer)
        expected = (self.size[0], self.size[2])
        if image.size != expected:
            raise ValueError(f"Image size {image.size} does not match grid layer {expected}")

        pixels = np.asarray(image.convert('RGBA'))
        classes = self.palette.classify_pixels(pixels).T

        self._colors[:, layer, :] = classes
        self._active[:, layer, :] = classes != _NONE

    # ==================== State ====================

    def snapshot(self) -> Tuple[np.ndarray, np.ndarray]:
        """Copy of the raw (active, colors) arrays."""
        return self._active.copy(), self._colors.copy()

