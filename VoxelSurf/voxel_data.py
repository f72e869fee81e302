"""
Voxel Data Adapters
===================

Helpers for filling a scalar volume step by step, for example from a stream
of measurements or from a stack of image slices, and turning it into a mesh.

Classes
-------
VoxelData
    Volume filled one voxel at a time.
VoxelDataFromSlices
    Volume filled one z slice at a time.
"""

import logging

import numpy as np

from VoxelSurf.mesh import Mesh
import VoxelSurf

logger = logging.getLogger(VoxelSurf.__name__)


class VoxelData:
    """Scalar volume of fixed size together with the mesh extracted from it.

    Parameters
    ----------
    width, height, depth : int
        Number of voxels along x, y and z.
    box_size : float, default 1.0
        Size of each cell in the generated mesh.
    """

    def __init__(self, width: int, height: int, depth: int, box_size: float = 1.0):
        self.data = np.zeros((width, height, depth), dtype=np.float32)
        self.box_size = box_size
        self.mesh = Mesh()

    @property
    def shape(self):
        return self.data.shape

    def _in_range(self, *index) -> bool:
        return all(0 <= i < n for i, n in zip(index, self.data.shape))

    def set(self, x: int, y: int, z: int, value: float):
        """Sets one voxel. Indices outside of the volume are logged and ignored."""
        if self._in_range(x, y, z):
            self.data[x, y, z] = value
        else:
            logger.error(
                f"Voxel ({x}, {y}, {z}) is outside of the volume {self.data.shape}"
            )

    def calculate(self, level: float):
        """Extracts the closed isosurface at ``level`` into ``self.mesh``."""
        self.mesh.make_from_voxels(self.data, self.box_size, level)
        return self.mesh

    def save_as_stl(self, filename):
        self.mesh.save_as_stl(filename)


class VoxelDataFromSlices(VoxelData):
    """
    Volume filled slice by slice along z, e.g. from a stack of images.
    Values are written into the current slice until ``increase_level`` moves
    on to the next one.
    """

    def __init__(self, width: int, height: int, depth: int, box_size: float = 1.0):
        super().__init__(width, height, depth, box_size=box_size)
        self.current_slice = 0

    def set_in_slice(self, x: int, y: int, value: float):
        """
        Sets the voxel ``(x, y)`` of the current slice. Ignored once every
        slice has been filled or when ``(x, y)`` lies outside the slice.
        """
        if self.current_slice < self.data.shape[2] and self._in_range(x, y):
            self.data[x, y, self.current_slice] = value

    def increase_level(self) -> bool:
        """
        Moves on to the next slice. Returns ``False`` once the cursor has
        passed the last slice.
        """
        if self.current_slice < self.data.shape[2]:
            self.current_slice += 1
        return self.current_slice < self.data.shape[2]

    def reset_level(self):
        self.current_slice = 0
