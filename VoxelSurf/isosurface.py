"""
Isosurface Extraction
=====================

Closed triangle meshes from scalar volumes. The interior of the volume is
polygonised with marching cubes; the six outer faces of the volume are then
closed with marching squares run on the outermost layers, so that the
surface enclosing the region above the level is watertight even where that
region touches the border of the volume.

See https://en.wikipedia.org/wiki/Marching_cubes and
https://en.wikipedia.org/wiki/Marching_squares for background.
"""

import logging
from functools import partial
from typing import Callable

import numpy as np

import VoxelSurf
from VoxelSurf.marching_cubes import MarchingCube
from VoxelSurf.marching_squares import MarchingSquare, Winding

logger = logging.getLogger(VoxelSurf.__name__)

__all__ = ["Isosurface"]

# (u axis, v axis, fixed axis, winding on the first layer, winding on the last)
# the windings of opposing faces differ so both caps face outwards
_BOUNDARY_PLANES = (
    (0, 1, 2, Winding.Clockwise, Winding.CounterClockwise),  # bottom / top
    (1, 2, 0, Winding.Clockwise, Winding.CounterClockwise),  # left / right
    (0, 2, 1, Winding.CounterClockwise, Winding.Clockwise),  # front / back
)


class Isosurface:
    """
    Generates triangle meshes from scalar voxel data.

    Every triangle is reported as three consecutive calls of the vertex
    emitter, each with a fresh ``float32`` array of shape ``(3,)`` in scaled
    coordinates ``(index + fraction) * box_size``.

    Parameters
    ----------
    vertex_emitter : Callable
        Receives the vertices of the mesh, in face order.
    """

    def __init__(self, vertex_emitter: Callable[[np.ndarray], None]):
        self.vertex_emitter = vertex_emitter

    def make_from_voxels(self, voxels, box_size: float, level: float):
        """
        Generates the closed surface between the samples below ``level`` and
        those at or above it. The normals point away from the region at or
        above the level.

        Parameters
        ----------
        voxels : array_like
            Scalar volume of shape ``(W, H, D)`` indexed ``[x, y, z]``.
        box_size : float
            Edge length of one cell, identical along all three axes.
        level : float
            The value defining the isosurface.
        """
        voxels = np.asarray(voxels, dtype=np.float32)
        box_size = np.float32(box_size)
        logger.debug(
            f"Extracting isosurface at level {level} from volume of shape "
            f"{voxels.shape}"
        )

        cube = MarchingCube(level, partial(self._emit_scaled, box_size))
        for i in range(voxels.shape[0]):
            for j in range(voxels.shape[1]):
                for k in range(voxels.shape[2]):
                    cube.calculate(voxels, i, j, k)

        self._close_boundaries(voxels, box_size, level)

    def _close_boundaries(self, voxels: np.ndarray, box_size, level: float):
        """
        Caps the six faces of the volume, bottom and top first, then left
        and right, then front and back.
        """
        square = MarchingSquare(level, self.vertex_emitter)
        for u_axis, v_axis, fixed_axis, first_winding, last_winding in _BOUNDARY_PLANES:
            last = voxels.shape[fixed_axis] - 1
            sides = (
                (0, np.take(voxels, 0, axis=fixed_axis), first_winding),
                (last, np.take(voxels, last, axis=fixed_axis), last_winding),
            )
            for a in range(voxels.shape[u_axis] - 1):
                for b in range(voxels.shape[v_axis] - 1):
                    for fixed, layer, winding in sides:
                        origin = np.zeros(3, dtype=np.float32)
                        origin[u_axis] = a
                        origin[v_axis] = b
                        origin[fixed_axis] = fixed
                        square.calculate_faces(
                            layer[a : a + 2, b : b + 2],
                            winding,
                            partial(
                                self._emit_projected,
                                (u_axis, v_axis),
                                origin,
                                box_size,
                            ),
                        )

    def _emit_scaled(self, box_size, vertex: np.ndarray):
        # MarchingCube already hands out a copy
        vertex *= box_size
        self.vertex_emitter(vertex)

    def _emit_projected(self, plane_axes, origin, box_size, vertex: np.ndarray):
        """Lifts a ``(u, v)`` vertex of a boundary square into 3D."""
        u_axis, v_axis = plane_axes
        vertex3d = origin.copy()
        vertex3d[u_axis] += vertex[0]
        vertex3d[v_axis] += vertex[1]
        vertex3d *= box_size
        self.vertex_emitter(vertex3d)
