"""
Marching Squares - Contours and Triangulations in 2D
====================================================

This module implements the marching squares algorithm with lookup tables.
A ``MarchingSquare`` either triangulates the part of a square lying above
a level, or reports the contour line segments separating the two regions.

The triangulation can be emitted with both windings, which is used to close
opposing faces of a volume with outward pointing normals.
"""

from VoxelSurf.marching_squares.marching_squares import MarchingSquare, Winding

__all__ = ["MarchingSquare", "Winding"]
