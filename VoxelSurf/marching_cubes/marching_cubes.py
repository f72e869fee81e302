"""
MarchingCube Implementation
===========================

Classic marching cubes on a single cube of a scalar volume, following
Paul Bourke's *Polygonising a scalar field*. The vertices of the resulting
triangles are pushed one by one into a vertex emitter, a callable taking a
single ``numpy`` array of shape ``(3,)``.

Vertices are expressed in grid index units: a crossing on the edge between
voxel ``(i, j, k)`` and ``(i + 1, j, k)`` has the x coordinate ``i + mu``.
"""

import logging
from typing import Callable

import numpy as np

import VoxelSurf
from VoxelSurf.marching_cubes.tables import (
    CORNER_OFFSETS,
    EDGE_CORNERS,
    EDGE_TABLE,
    TRIANGLE_TABLE,
)

logger = logging.getLogger(VoxelSurf.__name__)

__all__ = ["MarchingCube"]

_CORNER_BITS = 1 << np.arange(8)


class MarchingCube:
    """
    Triangulates the isosurface passing through one cube of a scalar volume.

    The instance keeps scratch buffers for the corner positions and the
    interpolated edge crossings, which are reused between calls. An instance
    must therefore not be driven by more than one caller at a time.

    Attributes:
        level (numpy.float32): The isolevel defining the surface.
        vertex_emitter (Callable): Receives every triangle vertex as an
            independent ``float32`` array of shape ``(3,)``, three calls per
            triangle, in table order.
    """

    def __init__(self, level: float, vertex_emitter: Callable[[np.ndarray], None]):
        self.level = np.float32(level)
        self.vertex_emitter = vertex_emitter
        self._positions = np.zeros((8, 3), dtype=np.int64)
        self._edge_vertices = np.zeros((12, 3), dtype=np.float32)

    def calculate_type(self, values) -> int:
        """
        Returns the 8 bit case index of a cube, bit ``i`` set when the
        sample at corner ``i`` lies below the level.
        """
        below = np.asarray(values) < self.level
        return int(_CORNER_BITS[below].sum())

    def calculate(self, voxels: np.ndarray, pos_x: int, pos_y: int, pos_z: int):
        """
        Emits the triangles of the isosurface within the cube whose minimum
        corner is ``(pos_x, pos_y, pos_z)``. At most 5 triangles are emitted.

        Cubes reaching past the last index of the volume along any axis are
        skipped without emitting anything.

        Args:
            voxels (numpy.ndarray): Scalar volume indexed ``[x, y, z]``.
            pos_x (int): First index of the cube origin.
            pos_y (int): Second index of the cube origin.
            pos_z (int): Third index of the cube origin.
        """
        shape = voxels.shape
        for i, (dx, dy, dz) in enumerate(CORNER_OFFSETS):
            x, y, z = pos_x + dx, pos_y + dy, pos_z + dz
            if x >= shape[0] or y >= shape[1] or z >= shape[2]:
                return
            self._positions[i] = (x, y, z)

        positions = self._positions
        values = np.asarray(
            voxels[positions[:, 0], positions[:, 1], positions[:, 2]],
            dtype=np.float32,
        )

        cube_index = self.calculate_type(values)
        edge_mask = EDGE_TABLE[cube_index]
        # cube entirely above or below the surface
        if edge_mask == 0:
            return

        corners = positions.astype(np.float32)
        for edge, (c0, c1) in enumerate(EDGE_CORNERS):
            if edge_mask & (1 << edge):
                self._edge_vertices[edge] = self._interpolate(
                    corners[c0], values[c0], corners[c1], values[c1]
                )

        for edge in TRIANGLE_TABLE[cube_index]:
            # scratch rows are overwritten by the next cube
            self.vertex_emitter(self._edge_vertices[edge].copy())

    def _interpolate(self, pos0, val0, pos1, val1) -> np.ndarray:
        """
        Linear interpolation of the point where the surface crosses the edge
        between ``pos0`` and ``pos1``. The fraction is always measured from
        the corner with the lower index, as in ``MarchingSquare``, so that
        neighbouring cubes and the boundary caps produce bit-identical
        vertices for a shared crossing.

        Equal samples are not guarded against and give non-finite vertices.
        """
        if pos1.sum() < pos0.sum():
            pos0, val0, pos1, val1 = pos1, val1, pos0, val0
        with np.errstate(divide="ignore", invalid="ignore"):
            mu = (self.level - val0) / (val1 - val0)
            return pos0 + mu * (pos1 - pos0)
