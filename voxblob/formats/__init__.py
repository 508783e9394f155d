"""
VoxBlob Formats Module
======================

Image hand-off between voxel grid layers, the inference model and disk.
"""

from voxblob.formats.image import (
    CANVAS_SIZE,
    GridImageCodec,
    fit_box,
    resize_256,
    scale_point,
    save_image,
    load_image,
)

__all__ = [
    'CANVAS_SIZE',
    'GridImageCodec',
    'fit_box',
    'resize_256',
    'scale_point',
    'save_image',
    'load_image',
]
