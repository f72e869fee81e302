from VoxelSurf.mesh import Mesh, export_surface_mesh
import gustaf as gus
import numpy as np

# scalar field: 1 at the center of the volume, 0 on a sphere of radius 0.8
x, y, z = np.mgrid[-1:1:40j, -1:1:40j, -1:1:40j]
field = 1.0 - np.sqrt(x**2 + y**2 + z**2) / 0.8

sphere = Mesh()
sphere.make_from_voxels(field, box_size=0.05, level=0.0)
sphere.save_as_stl("sphere.stl")

# the same volume as occupancy grid gives a blocky version of the sphere
blocks = Mesh()
blocks.make_from_voxels(field > 0.0, box_size=0.05)
export_surface_mesh("blocks.obj", blocks)

gus.show(sphere.to_torch().to_gus(), blocks.to_torch().to_gus())
