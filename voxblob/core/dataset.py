"""
DatasetBuilder - Training Sample Export
=======================================

Fills the ground layer of a grid with random shapes and saves each
result as a 256x256 image, one file per sample.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from voxblob.core.voxel_grid import VoxelGrid
from voxblob.core.operations import ShapeGenerator
from voxblob.formats.image import resize_256, save_image
from voxblob.core.palette import GREY


@dataclass
class GenerationConfig:
    """Parameters of a sample generation run. Ranges are [min, max)."""
    sample_size: int = 500
    min_amt: int = 2
    max_amt: int = 4
    min_radius: int = 15
    max_radius: int = 25
    min_width: int = 4
    max_width: int = 16
    min_depth: int = 4
    max_depth: int = 16
    output_folder: str = "Output"
    prefix: str = "Grid"


class DatasetBuilder:
    """
    Writes generated grid images to an output folder.

    Files are named '{prefix}_{i}.png' with a sequential sample index.
    """

    def __init__(self, grid: VoxelGrid, generator: ShapeGenerator,
                 output_folder: str = "Output", prefix: str = "Grid",
                 verbose: bool = True):
        self.grid = grid
        self.generator = generator
        self.output_folder = Path(output_folder)
        self.prefix = prefix
        self.verbose = verbose

    @classmethod
    def from_config(cls, grid: VoxelGrid, generator: ShapeGenerator,
                    config: GenerationConfig, verbose: bool = True) -> 'DatasetBuilder':
        return cls(grid, generator, output_folder=config.output_folder,
                   prefix=config.prefix, verbose=verbose)

    def sample_path(self, index: int) -> Path:
        return self.output_folder / f"{self.prefix}_{index}.png"

    def populate_blobs_and_save(self, sample_size: int, min_amt: int, max_amt: int,
                                min_radius: int, max_radius: int) -> List[Path]:
        """
        Populate random blobs on the grid's first layer and save the images.

        Args:
            sample_size: The amount of images to save
            min_amt: The minimum amount of blobs per image
            max_amt: The maximum amount of blobs per image (exclusive)
            min_radius: The minimum radius of the blobs
            max_radius: The maximum radius of the blobs (exclusive)

        Returns:
            Paths of the saved images
        """
        def populate(amt: int) -> int:
            return self.generator.create_random_blobs(amt, min_radius, max_radius, picky=True)

        return self._populate_and_save(sample_size, min_amt, max_amt, populate,
                                       transparent=True, kind="blob")

    def populate_rectangles_and_save(self, sample_size: int, min_amt: int, max_amt: int,
                                     min_width: int, max_width: int,
                                     min_depth: int, max_depth: int) -> List[Path]:
        """
        Populate random rectangles on the grid's first layer and save the images.

        Returns:
            Paths of the saved images
        """
        def populate(amt: int) -> int:
            return self.generator.create_random_rectangles(
                amt, min_width, max_width, min_depth, max_depth)

        return self._populate_and_save(sample_size, min_amt, max_amt, populate,
                                       transparent=False, kind="rectangle")

    def run(self, config: GenerationConfig, shapes: str = "blobs") -> List[Path]:
        """Generate a dataset of the given shape kind from a config."""
        if shapes == "blobs":
            return self.populate_blobs_and_save(
                config.sample_size, config.min_amt, config.max_amt,
                config.min_radius, config.max_radius)
        elif shapes == "rectangles":
            return self.populate_rectangles_and_save(
                config.sample_size, config.min_amt, config.max_amt,
                config.min_width, config.max_width,
                config.min_depth, config.max_depth)
        raise ValueError(f"Unsupported shape kind: {shapes}")

    def _populate_and_save(self, sample_size: int, min_amt: int, max_amt: int,
                           populate, transparent: bool, kind: str) -> List[Path]:
        start = time.perf_counter()
        paths = []

        for i in range(sample_size):
            amt = self.generator.random_range(min_amt, max_amt)

            self.grid.clear_grid()
            placed = populate(amt)
            if placed < amt and self.verbose:
                print(f"Warning: Sample {i}: placed {placed} of {amt} {kind}s")

            grid_image = self.grid.image_from_grid(transparent=transparent)
            resized_image = resize_256(grid_image, GREY)
            paths.append(save_image(resized_image, self.sample_path(i)))

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        if self.verbose:
            print(f"Took {elapsed_ms:.0f} milliseconds to generate {sample_size} images")

        return paths
