"""
VoxelSurf - Surface Extraction from Voxel Data
==============================================

VoxelSurf turns regularly sampled 3D volumes into polygonal surface meshes
and writes them as binary STL files for 3D printing or CAD packages.

Key Components
--------------

Extraction
    - ``VoxelSurf.marching_cubes``: Table-driven marching cubes for one cube
    - ``VoxelSurf.marching_squares``: Marching squares, triangles or contour lines
    - ``VoxelSurf.isosurface``: Closed isosurfaces from scalar volumes
    - ``VoxelSurf.boundary_faces``: Box-shaped quad meshes from boolean volumes

Mesh Operations
    - ``VoxelSurf.mesh``: Vertex assembly, normals and binary STL export

Utilities
    - ``VoxelSurf.voxel_data``: Incremental (voxel by voxel, slice by slice) volumes
    - ``VoxelSurf.utils``: Logging configuration

Examples
--------
Extract a sphere and save it::

    import numpy as np
    from VoxelSurf.mesh import Mesh

    x, y, z = np.mgrid[-1:1:32j, -1:1:32j, -1:1:32j]
    field = 1.0 - np.sqrt(x**2 + y**2 + z**2)

    mesh = Mesh()
    mesh.make_from_voxels(field, box_size=0.1, level=0.5)
    mesh.save_as_stl("sphere.stl")

Boolean volumes produce a quad mesh of the occupied cells::

    voxels = np.zeros((4, 4, 4), dtype=bool)
    voxels[1:3, 1:3, 1:3] = True
    mesh.make_from_voxels(voxels, box_size=1.0)
"""

import VoxelSurf.utils

VoxelSurf.utils.configure_logging()

__version__ = "1.0.0"
