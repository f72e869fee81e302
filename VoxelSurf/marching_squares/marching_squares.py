"""
MarchingSquare Implementation
=============================

Marching squares on a single 2x2 window of samples. Depending on the call
the square is either triangulated (the area above the level is covered with
triangles) or reduced to the line segments separating the area above the
level from the area below.

Vertices are pushed into a vertex emitter as ``numpy`` arrays of shape
``(2,)`` holding ``(u, v)`` coordinates in the unit square.
"""

import logging
from enum import Enum
from typing import Callable

import numpy as np

import VoxelSurf
from VoxelSurf.marching_squares.tables import (
    CORNER_POSITIONS,
    SEGMENT_TABLE,
    TRIANGLE_TABLE,
)

logger = logging.getLogger(VoxelSurf.__name__)

__all__ = ["MarchingSquare", "Winding"]


class Winding(Enum):
    Clockwise = "clockwise"
    CounterClockwise = "counter_clockwise"


class MarchingSquare:
    """
    Triangulates or contours one square of a 2D scalar field.

    The four corner samples are given as ``values[u][v]`` (a 2x2 array or
    nested sequence). The instance owns an 8-slot vertex buffer: slots 0-3
    hold the static corners, slots 4-7 the interpolated crossings of the
    current square. The buffer is reused between calls, so an instance must
    not be shared by concurrent callers.

    Attributes:
        level (numpy.float32): The level separating the two regions.
        vertex_emitter (Callable): Default receiver of the emitted vertices.
    """

    def __init__(self, level: float, vertex_emitter: Callable[[np.ndarray], None]):
        self.level = np.float32(level)
        self.vertex_emitter = vertex_emitter
        self._vertices = np.zeros((8, 2), dtype=np.float32)
        self._vertices[:4] = CORNER_POSITIONS

    def calculate_type(self, values) -> int:
        """
        Returns the 4 bit case index of the square. A corner counts as above
        unless its sample is below the level, the same split as in
        ``MarchingCube``.
        """
        return (
            (8 if values[0][0] >= self.level else 0)
            | (4 if values[0][1] >= self.level else 0)
            | (2 if values[1][0] >= self.level else 0)
            | (1 if values[1][1] >= self.level else 0)
        )

    def calculate_faces(
        self,
        values,
        winding: Winding = Winding.Clockwise,
        vertex_emitter: Callable[[np.ndarray], None] | None = None,
    ):
        """
        Triangulates the part of the square above the level.

        With ``Winding.Clockwise`` the triangle vertices are emitted in table
        order, with ``Winding.CounterClockwise`` the whole vertex sequence is
        reversed, which flips the orientation of every triangle.

        Args:
            values: 2x2 samples, ``values[u][v]``.
            winding (Winding): Orientation of the emitted triangles.
            vertex_emitter (Callable, optional): Receiver for this call only,
                defaults to the emitter given at construction.
        """
        emit = self.vertex_emitter if vertex_emitter is None else vertex_emitter
        values = np.asarray(values, dtype=np.float32)
        square_type = self.calculate_type(values)
        self._calculate_vertices(values, square_type)

        triangles = TRIANGLE_TABLE[square_type]
        if winding is Winding.CounterClockwise:
            triangles = triangles[::-1]
        for slot in triangles:
            emit(self._vertices[slot].copy())

    def calculate_lines(
        self, values, vertex_emitter: Callable[[np.ndarray], None] | None = None
    ):
        """
        Emits the contour segments crossing the square, two vertices per
        segment. Saddle cases produce two segments.
        """
        emit = self.vertex_emitter if vertex_emitter is None else vertex_emitter
        values = np.asarray(values, dtype=np.float32)
        square_type = self.calculate_type(values)
        self._calculate_vertices(values, square_type)

        for segment in range(len(SEGMENT_TABLE[square_type]) // 8):
            emit(self._vertices[4 + 2 * segment].copy())
            emit(self._vertices[5 + 2 * segment].copy())

    def _calculate_vertices(self, values: np.ndarray, square_type: int):
        row = SEGMENT_TABLE[square_type]
        for segment, start in enumerate(range(0, len(row), 8)):
            ax, ay, bx, by, cx, cy, dx, dy = row[start : start + 8]
            self._vertices[4 + 2 * segment] = self._interpolate(
                ax, ay, values[ax, ay], bx, by, values[bx, by]
            )
            self._vertices[5 + 2 * segment] = self._interpolate(
                cx, cy, values[cx, cy], dx, dy, values[dx, dy]
            )

    def _interpolate(self, ax, ay, val_a, bx, by, val_b) -> np.ndarray:
        # measured from the lower corner, like the edges of MarchingCube
        if bx + by < ax + ay:
            ax, ay, val_a, bx, by, val_b = bx, by, val_b, ax, ay, val_a
        pos_a = np.array((ax, ay), dtype=np.float32)
        pos_b = np.array((bx, by), dtype=np.float32)
        with np.errstate(divide="ignore", invalid="ignore"):
            mu = (self.level - val_a) / (val_b - val_a)
            return pos_a + mu * (pos_b - pos_a)
