"""
VoxBlob Core Module
===================

Voxel grid state, shape generation and the per-layer inference cycle.
"""

from voxblob.core.voxel import FunctionColor, Voxel
from voxblob.core.palette import FunctionPalette, PaletteColor
from voxblob.core.voxel_grid import VoxelGrid
from voxblob.core.operations import ShapeGenerator
from voxblob.core.inference import (
    InferenceController, InferenceError, InferenceModel, InferenceState,
    CallableModel, TorchScriptModel
)
from voxblob.core.dataset import DatasetBuilder, GenerationConfig
from voxblob.core.environment import Environment

__all__ = [
    'FunctionColor', 'Voxel', 'FunctionPalette', 'PaletteColor', 'VoxelGrid',
    'ShapeGenerator', 'InferenceController', 'InferenceError', 'InferenceModel',
    'InferenceState', 'CallableModel', 'TorchScriptModel', 'DatasetBuilder',
    'GenerationConfig', 'Environment'
]
