"""
Marching Cubes - Triangulation of a Single Cube
===============================================

This module implements the classic table-driven marching cubes algorithm.
A ``MarchingCube`` examines the eight samples of one unit cube of a scalar
volume and reports the vertices of the triangles approximating the
isosurface through that cube.

The module uses precomputed lookup tables to handle all 256 possible
Marching Cubes configurations.
"""

from VoxelSurf.marching_cubes.marching_cubes import MarchingCube

__all__ = ["MarchingCube"]
