"""
ShapeGenerator - Random Shape Stamping
======================================

Produces random blobs and rectangles on a voxel grid. Every shape is
retried with fresh random parameters until the grid accepts it, up to a
fixed number of attempts.
"""

import numpy as np
from typing import Tuple, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from voxblob.core.voxel_grid import VoxelGrid


class ShapeGenerator:
    """
    Random shape placement on a grid.

    Holds a non-owning reference to the grid and an explicit random source
    so that generation is reproducible from a seed.
    """

    # Probability of keeping a newly reached cell while growing a picky blob
    KEEP_CHANCE = 0.7

    MAX_ATTEMPTS = 1000

    def __init__(self, grid: 'VoxelGrid', rng: Optional[np.random.Generator] = None):
        """
        Initialize the generator.

        Args:
            grid: VoxelGrid to stamp shapes on
            rng: Random source; a fresh unseeded generator if omitted
        """
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()

    def random_range(self, low: int, high: int) -> int:
        """Integer in [low, high); low when the range is empty."""
        if high <= low:
            return int(low)
        return int(self.rng.integers(low, high))

    def random_edge_origin(self) -> Tuple[int, int, int]:
        """
        Pick a ground layer cell on the grid boundary.

        Half of the draws land on an x edge with a uniform z, the other half
        on a z edge with a uniform x.
        """
        size_x, _, size_z = self.grid.size

        if self.rng.random() < 0.5:
            x = 0 if self.rng.random() < 0.5 else size_x - 1
            z = self.random_range(0, size_z)
        else:
            z = 0 if self.rng.random() < 0.5 else size_z - 1
            x = self.random_range(0, size_x)

        return (x, 0, z)

    def create_random_blobs(self, amt: int, min_radius: int, max_radius: int,
                            picky: bool = True,
                            max_attempts: int = MAX_ATTEMPTS) -> int:
        """
        Create random blobs on the grid's edges.

        Args:
            amt: Amount of blobs to create
            min_radius: Minimum blob radius
            max_radius: Maximum blob radius (exclusive)
            picky: If the blob drawing should randomly skip voxels
            max_attempts: Attempts per blob before giving up

        Returns:
            Number of blobs placed
        """
        placed = 0
        for _ in range(amt):
            for _ in range(max_attempts):
                origin = self.random_edge_origin()
                radius = self.random_range(min_radius, max_radius)
                if self.grid.create_black_blob(origin, radius, picky=picky, rng=self.rng):
                    placed += 1
                    break
        return placed

    def create_random_rectangles(self, amt: int, min_width: int, max_width: int,
                                 min_depth: int, max_depth: int,
                                 max_attempts: int = MAX_ATTEMPTS) -> int:
        """
        Create random rectangles on the grid's ground layer.

        Args:
            amt: Amount of rectangles to create
            min_width, max_width: Width range along x (max exclusive)
            min_depth, max_depth: Depth range along z (max exclusive)
            max_attempts: Attempts per rectangle before giving up

        Returns:
            Number of rectangles placed
        """
        size_x, _, size_z = self.grid.size

        placed = 0
        for _ in range(amt):
            for _ in range(max_attempts):
                origin = (self.random_range(0, size_x), 0, self.random_range(0, size_z))
                width = self.random_range(min_width, max_width)
                depth = self.random_range(min_depth, max_depth)
                if self.grid.create_black_rectangle(origin, width, depth):
                    placed += 1
                    break
        return placed

    # ==================== Static Methods ====================

    @staticmethod
    def blob_mask(size: Tuple[int, int, int], origin: Tuple[int, int, int],
                  radius: float, rng: np.random.Generator,
                  picky: bool = True, flat: bool = True,
                  keep_chance: float = KEEP_CHANCE) -> np.ndarray:
        """
        Grow a blob mask outward from an origin cell.

        The blob grows one ring per step by binary dilation, bounded by the
        Euclidean radius. A dense blob is the full disc (flat) or ball; a
        picky blob keeps each newly reached cell with probability
        keep_chance, which leaves ragged edges and gaps.

        Args:
            size: Grid dimensions
            origin: Starting cell (x, y, z)
            radius: Blob radius in cells
            rng: Random source for picky growth
            picky: If True, thin the blob randomly
            flat: If True, grow on the origin's layer only
            keep_chance: Keep probability for picky growth

        Returns:
            Boolean array of the grid's shape
        """
        from scipy import ndimage

        ox, oy, oz = origin

        if flat:
            shape = (size[0], size[2])
            seed = (ox, oz)
        else:
            shape = tuple(size)
            seed = (ox, oy, oz)

        coords = np.indices(shape)
        dist2 = sum((c - s) ** 2 for c, s in zip(coords, seed))
        within = dist2 <= radius * radius

        structure = ndimage.generate_binary_structure(len(shape), len(shape))

        grown = np.zeros(shape, dtype=bool)
        grown[seed] = True

        for _ in range(int(np.ceil(radius))):
            candidates = ndimage.binary_dilation(grown, structure=structure) & within & ~grown
            if not candidates.any():
                break
            if picky:
                candidates &= rng.random(shape) < keep_chance
            grown |= candidates

        if not flat:
            return grown

        mask = np.zeros(size, dtype=bool)
        mask[:, oy, :] = grown
        return mask
