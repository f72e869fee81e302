"""
Boundary Faces
==============

Quad meshes from boolean voxel data. Every ``True`` voxel is treated as a
solid box; the mesh consists of the square faces separating ``True`` from
``False`` voxels plus the faces of ``True`` voxels lying on the outer border
of the volume. The winding of the quads makes the normals point away from
the ``True`` region.
"""

import logging
from typing import Callable

import numpy as np

import VoxelSurf

logger = logging.getLogger(VoxelSurf.__name__)

__all__ = ["BoundaryFaces"]

# corners of a face cell in the two in-plane axes, in emission order
_QUAD_CORNERS = ((0, 0), (1, 0), (1, 1), (0, 1))


class BoundaryFaces:
    """
    Generates the boundary quads of boolean voxel data.

    Each quad is reported as four consecutive calls of the vertex emitter,
    each with a fresh ``float32`` array of shape ``(3,)``.
    """

    def __init__(self, vertex_emitter: Callable[[np.ndarray], None]):
        self.vertex_emitter = vertex_emitter

    def _add_quad(self, axis: int, plane: int, a: int, b: int, box_size, clockwise):
        """
        Emits the quad perpendicular to ``axis`` at grid coordinate ``plane``
        covering the cell ``(a, b)`` of the two remaining axes (in increasing
        axis order). Clockwise quads have their normal along ``+axis`` for x
        and z walls and along ``-axis`` for y walls.
        """
        first, second = [ax for ax in range(3) if ax != axis]
        vertices = np.empty((4, 3), dtype=np.float32)
        for corner, (da, db) in enumerate(_QUAD_CORNERS):
            vertices[corner, axis] = plane
            vertices[corner, first] = a + da
            vertices[corner, second] = b + db
        vertices *= box_size

        if not clockwise:
            vertices = vertices[::-1]
        for vertex in vertices:
            self.vertex_emitter(vertex.copy())

    def make_quads_from_voxels(self, voxels, box_size: float):
        """
        Generates the quads between ``True`` and ``False`` voxels, then the
        quads closing the left/right, front/back and bottom/top borders.

        Parameters
        ----------
        voxels : array_like
            Boolean volume of shape ``(W, H, D)`` indexed ``[x, y, z]``.
        box_size : float
            Edge length of one cell, identical along all three axes.
        """
        voxels = np.asarray(voxels, dtype=bool)
        box_size = np.float32(box_size)
        width, height, depth = voxels.shape
        logger.debug(f"Extracting boundary quads from volume of shape {voxels.shape}")

        for i in range(width):
            for j in range(height):
                for k in range(depth):
                    # internal walls perpendicular to x
                    if i > 0 and voxels[i - 1, j, k] != voxels[i, j, k]:
                        self._add_quad(0, i, j, k, box_size, voxels[i - 1, j, k])
                    # internal walls perpendicular to y
                    if j > 0 and voxels[i, j - 1, k] != voxels[i, j, k]:
                        self._add_quad(1, j, i, k, box_size, voxels[i, j, k])
                    # internal walls perpendicular to z
                    if k > 0 and voxels[i, j, k - 1] != voxels[i, j, k]:
                        self._add_quad(2, k, i, j, box_size, voxels[i, j, k - 1])

        # left and right
        for j in range(height):
            for k in range(depth):
                if voxels[0, j, k]:
                    self._add_quad(0, 0, j, k, box_size, False)
                if voxels[width - 1, j, k]:
                    self._add_quad(0, width, j, k, box_size, True)

        # front and back
        for i in range(width):
            for k in range(depth):
                if voxels[i, 0, k]:
                    self._add_quad(1, 0, i, k, box_size, True)
                if voxels[i, height - 1, k]:
                    self._add_quad(1, height, i, k, box_size, False)

        # bottom and top
        for i in range(width):
            for j in range(height):
                if voxels[i, j, 0]:
                    self._add_quad(2, 0, i, j, box_size, False)
                if voxels[i, j, depth - 1]:
                    self._add_quad(2, depth, i, j, box_size, True)
