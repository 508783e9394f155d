"""
VoxBlob - Voxel Blob Generator and Pix2Pix Round Trip
=====================================================

Procedural voxel pattern generation for image-to-image models:
- Random edge-pinned blobs and rectangles on a voxel grid
- Layer rasterization to images and nearest-colour de-rasterization
- Per-layer predict-and-update cycle around a pix2pix style model
- 256x256 training sample export

Author: VoxBlob Team
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "VoxBlob Team"
__license__ = "MIT"

from voxblob.core.voxel import FunctionColor, Voxel
from voxblob.core.voxel_grid import VoxelGrid

__all__ = ['FunctionColor', 'Voxel', 'VoxelGrid', '__version__']
