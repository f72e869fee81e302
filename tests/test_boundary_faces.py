from VoxelSurf.boundary_faces import BoundaryFaces
from VoxelSurf.mesh import Mesh, calculate_normal
import numpy as np
import torch


def extract_quads(voxels, box_size=1.0):
    emitted = []
    BoundaryFaces(emitted.append).make_quads_from_voxels(voxels, box_size)
    return np.array(emitted).reshape(-1, 4, 3)


def assert_outward(quads, center):
    normals = calculate_normal(quads[:, 0], quads[:, 1], quads[:, 2])
    outward = quads.mean(axis=1) - center
    dots = np.sum(normals * outward, axis=1)
    assert (dots > 0).all(), f"Quads facing inwards: {quads[dots <= 0]}"


def test_single_voxel_surrounded():
    voxels = np.zeros((3, 3, 3), dtype=bool)
    voxels[1, 1, 1] = True
    quads = extract_quads(voxels)
    assert len(quads) == 6, f"Expected 6 quads, got {len(quads)}"
    assert_outward(quads, np.array([1.5, 1.5, 1.5]))


def test_single_voxel_volume():
    box_size = 3.0
    quads = extract_quads(np.ones((1, 1, 1), dtype=bool), box_size)
    assert len(quads) == 6
    assert_outward(quads, np.full(3, 0.5 * box_size))
    np.testing.assert_allclose(quads.min(axis=(0, 1)), 0.0)
    np.testing.assert_allclose(quads.max(axis=(0, 1)), box_size)


def test_emission_count():
    voxels = np.zeros((3, 3, 3), dtype=bool)
    voxels[1, 1, 1] = True
    emitted = []
    BoundaryFaces(emitted.append).make_quads_from_voxels(voxels, 1.0)
    assert len(emitted) == 24
    assert all(vertex.shape == (3,) for vertex in emitted)


def test_interior_wall_winding():
    # true voxel next to a false one along each axis, in both orders
    for axis in range(3):
        for true_first in (True, False):
            shape = [1, 1, 1]
            shape[axis] = 2
            voxels = np.zeros(shape, dtype=bool)
            index = [0, 0, 0]
            index[axis] = 0 if true_first else 1
            voxels[tuple(index)] = True

            center = np.full(3, 0.5)
            center[axis] += 0 if true_first else 1
            quads = extract_quads(voxels)
            assert len(quads) == 6
            assert_outward(quads, center)


def test_filled_block_is_closed():
    mesh = Mesh()
    mesh.make_from_voxels(np.ones((2, 2, 2), dtype=bool), 1.0)
    assert mesh.primitive == Mesh.QUADS
    assert len(mesh.faces) == 24
    assert mesh.n_triangles == 48

    torch_mesh = mesh.to_torch()
    torch.testing.assert_close(
        torch_mesh.area_weighted_normal_sum(),
        torch.zeros(3, dtype=torch_mesh.vertices.dtype),
        atol=1e-6,
        rtol=0,
    )
    assert len(torch_mesh.boundary_edges()) == 0


def test_l_shape_is_closed():
    voxels = np.zeros((3, 3, 2), dtype=bool)
    voxels[0, :, :] = True
    voxels[:, 0, :] = True
    mesh = Mesh()
    mesh.make_from_voxels(voxels, 0.5)
    torch_mesh = mesh.to_torch()
    assert len(torch_mesh.boundary_edges()) == 0
    torch.testing.assert_close(
        torch_mesh.area_weighted_normal_sum(),
        torch.zeros(3, dtype=torch_mesh.vertices.dtype),
        atol=1e-6,
        rtol=0,
    )


def test_empty_volume():
    assert len(extract_quads(np.zeros((2, 3, 4), dtype=bool))) == 0


if __name__ == "__main__":
    test_single_voxel_surrounded()
    test_single_voxel_volume()
    test_emission_count()
    test_interior_wall_winding()
    test_filled_block_is_closed()
    test_l_shape_is_closed()
    test_empty_volume()
