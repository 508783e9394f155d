"""
Voxel - Cell State and Classification
=====================================

Function colours classify every voxel of a grid. They double as the
colour key used when a layer is rasterized to an image.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Tuple


class FunctionColor(Enum):
    """Closed set of voxel classifications."""
    NONE = 0
    BLACK = 1
    RED = 2
    YELLOW = 3
    GREEN = 4
    CYAN = 5
    MAGENTA = 6


@dataclass(frozen=True)
class Voxel:
    """
    Read-only snapshot of a single grid cell.
    
    Attributes:
        index: Integer grid coordinates (x, y, z)
        is_active: Whether the cell is occupied
        function_color: Classification of the cell
    """
    
    index: Tuple[int, int, int]
    is_active: bool = False
    function_color: FunctionColor = FunctionColor.NONE
    
    @property
    def is_solid(self) -> bool:
        """Solid (black) cells are the stamped input geometry."""
        return self.is_active and self.function_color == FunctionColor.BLACK
    
    @property
    def is_pending(self) -> bool:
        """Red cells are pending predictions, wiped before each inference pass."""
        return self.function_color == FunctionColor.RED
    
    @property
    def is_void(self) -> bool:
        return not self.is_active or self.function_color == FunctionColor.NONE
