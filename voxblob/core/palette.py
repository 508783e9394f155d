"""
FunctionPalette - Fixed Classification Colour Table
===================================================

Maps every FunctionColor to the RGBA colour used for rasterization and
rendering, and maps arbitrary pixel colours back to the nearest class.
The table is fixed: saved training samples depend on it.
"""

import numpy as np
from typing import Tuple, Dict
from dataclasses import dataclass

from voxblob.core.voxel import FunctionColor


@dataclass(frozen=True)
class PaletteColor:
    """Represents a single RGBA colour of the table."""
    r: int = 255
    g: int = 255
    b: int = 255
    a: int = 255

    def to_tuple(self) -> Tuple[int, int, int, int]:
        """Return color as RGBA tuple."""
        return (self.r, self.g, self.b, self.a)

    def to_float(self) -> Tuple[float, float, float, float]:
        """Return color as normalized float tuple (0-1 range)."""
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a / 255.0)

    def with_alpha(self, a: int) -> 'PaletteColor':
        return PaletteColor(r=self.r, g=self.g, b=self.b, a=a)


GREY = PaletteColor(r=127, g=127, b=127)
TRANSPARENT = GREY.with_alpha(0)

# Alpha below this reads as an empty cell
ALPHA_THRESHOLD = 128


class FunctionPalette:
    """
    Colour table shared by rasterization, de-rasterization and rendering.

    FunctionColor.NONE is the inactive colour (grey). Every other class is
    an active cell.
    """

    COLORS: Dict[FunctionColor, PaletteColor] = {
        FunctionColor.NONE: GREY,
        FunctionColor.BLACK: PaletteColor(r=0, g=0, b=0),
        FunctionColor.RED: PaletteColor(r=255, g=0, b=0),
        FunctionColor.YELLOW: PaletteColor(r=255, g=235, b=4),
        FunctionColor.GREEN: PaletteColor(r=0, g=255, b=0),
        FunctionColor.CYAN: PaletteColor(r=0, g=255, b=255),
        FunctionColor.MAGENTA: PaletteColor(r=255, g=0, b=255),
    }

    def __init__(self):
        # Row i of the lookup arrays belongs to FunctionColor(i)
        self.classes = sorted(self.COLORS, key=lambda c: c.value)
        self._rgba = np.array([self.COLORS[c].to_tuple() for c in self.classes],
                              dtype=np.uint8)

    def get_color(self, function_color: FunctionColor) -> PaletteColor:
        """Get the table colour of a class."""
        return self.COLORS[function_color]

    def get_rgba_array(self, transparent: bool = False) -> np.ndarray:
        """
        Get the table as an (N, 4) uint8 array indexed by FunctionColor value.

        Args:
            transparent: If True, the inactive entry gets alpha 0
        """
        rgba = self._rgba.copy()
        if transparent:
            rgba[FunctionColor.NONE.value] = TRANSPARENT.to_tuple()
        return rgba

    def get_rgb_array(self) -> np.ndarray:
        """Get the table as an (N, 3) uint8 array indexed by FunctionColor value."""
        return self._rgba[:, :3].copy()

    def find_nearest_color(self, r: int, g: int, b: int, a: int = 255) -> FunctionColor:
        """
        Find the class whose table colour is nearest to the given pixel.

        Args:
            r, g, b: Pixel RGB values
            a: Pixel alpha; transparent pixels are inactive

        Returns:
            Nearest FunctionColor
        """
        if a < ALPHA_THRESHOLD:
            return FunctionColor.NONE

        min_dist = float('inf')
        nearest = FunctionColor.NONE

        for function_color in self.classes:
            c = self.COLORS[function_color]
            dist = (c.r - r) ** 2 + (c.g - g) ** 2 + (c.b - b) ** 2
            if dist < min_dist:
                min_dist = dist
                nearest = function_color

        return nearest

    def classify_pixels(self, pixels: np.ndarray) -> np.ndarray:
        """
        Vectorized nearest-colour classification.

        Args:
            pixels: (..., 3) RGB or (..., 4) RGBA array

        Returns:
            Array of FunctionColor values with the leading shape of pixels
        """
        pixels = np.asarray(pixels)
        if pixels.shape[-1] not in (3, 4):
            raise ValueError(f"Expected RGB or RGBA pixels, got shape {pixels.shape}")

        rgb = pixels[..., :3].astype(np.int32)
        table = self.get_rgb_array().astype(np.int32)

        # Squared distance to every table entry, ties go to the lower value
        dist = ((rgb[..., np.newaxis, :] - table) ** 2).sum(axis=-1)
        classes = np.argmin(dist, axis=-1).astype(np.uint8)

        if pixels.shape[-1] == 4:
            classes[pixels[..., 3] < ALPHA_THRESHOLD] = FunctionColor.NONE.value

        return classes
