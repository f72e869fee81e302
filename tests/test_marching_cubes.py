from VoxelSurf.marching_cubes import MarchingCube
from VoxelSurf.marching_cubes.tables import EDGE_CORNERS, EDGE_TABLE, TRIANGLE_TABLE
from VoxelSurf.mesh import calculate_normal
import numpy as np
import pytest


def run_all_cubes(voxels, level):
    emitted = []
    cube = MarchingCube(level, emitted.append)
    for i in range(voxels.shape[0]):
        for j in range(voxels.shape[1]):
            for k in range(voxels.shape[2]):
                cube.calculate(voxels, i, j, k)
    return emitted


def test_tables_consistent():
    assert len(EDGE_TABLE) == 256
    assert len(TRIANGLE_TABLE) == 256
    for case in range(256):
        expected_mask = 0
        for edge, (c0, c1) in enumerate(EDGE_CORNERS):
            if bool(case & (1 << c0)) != bool(case & (1 << c1)):
                expected_mask |= 1 << edge
        assert (
            EDGE_TABLE[case] == expected_mask
        ), f"Edge mask of case {case} is {EDGE_TABLE[case]:#x}, expected {expected_mask:#x}"
        triangles = TRIANGLE_TABLE[case]
        assert len(triangles) % 3 == 0, f"Case {case} has an incomplete triangle"
        assert len(triangles) <= 15, f"Case {case} has more than 5 triangles"
        for edge in triangles:
            assert EDGE_TABLE[case] & (1 << edge), f"Case {case} uses uncrossed edge {edge}"


@pytest.mark.parametrize("value", [0.0, 1.0])
def test_uniform_volume_emits_nothing(value):
    voxels = np.full((4, 3, 5), value, dtype=np.float32)
    emitted = run_all_cubes(voxels, level=0.5)
    assert len(emitted) == 0, f"Uniform volume emitted {len(emitted)} vertices"


def test_single_corner_below():
    voxels = np.ones((2, 2, 2), dtype=np.float32)
    voxels[0, 0, 0] = 0.0
    emitted = run_all_cubes(voxels, level=0.5)

    assert len(emitted) == 3, f"Expected one triangle, got {len(emitted)} vertices"
    for vertex in emitted:
        # on an edge incident to corner (0, 0, 0): exactly one non-zero coordinate
        assert np.count_nonzero(vertex) == 1, f"Vertex {vertex} is not on a corner edge"
        assert 0.0 < vertex.max() < 1.0
    np.testing.assert_allclose(
        np.array(emitted), [[0.5, 0, 0], [0, 0, 0.5], [0, 0.5, 0]]
    )

    # the normal points towards the corner below the level
    normal = calculate_normal(*emitted)
    assert np.dot(normal, [1.0, 1.0, 1.0]) < 0, f"Normal {normal} points inwards"


def test_interpolation_fraction():
    voxels = np.ones((2, 2, 2), dtype=np.float32)
    voxels[0, 0, 0] = 0.0
    emitted = run_all_cubes(voxels, level=0.25)
    np.testing.assert_allclose(emitted[0], [0.25, 0.0, 0.0])


def test_cubes_at_last_index_are_skipped():
    voxels = np.ones((2, 2, 2), dtype=np.float32)
    voxels[1, 1, 1] = 0.0
    emitted = []
    cube = MarchingCube(0.5, emitted.append)
    cube.calculate(voxels, 1, 0, 0)
    cube.calculate(voxels, 0, 1, 0)
    cube.calculate(voxels, 0, 0, 1)
    assert len(emitted) == 0
    cube.calculate(voxels, 0, 0, 0)
    assert len(emitted) == 3


def test_emitted_vertices_are_copies():
    voxels = np.ones((3, 2, 2), dtype=np.float32)
    voxels[1, 0, 0] = 0.0
    emitted = run_all_cubes(voxels, level=0.5)
    assert len(emitted) == 6
    for i, a in enumerate(emitted):
        for b in emitted[i + 1 :]:
            assert not np.shares_memory(a, b)
    before = [v.copy() for v in emitted]
    emitted[0][:] = 42.0
    for a, b in zip(emitted[1:], before[1:]):
        np.testing.assert_array_equal(a, b)


def test_calculate_type():
    cube = MarchingCube(0.5, lambda vertex: None)
    assert cube.calculate_type(np.zeros(8)) == 255
    assert cube.calculate_type(np.ones(8)) == 0
    values = np.ones(8)
    values[[0, 3, 4, 7]] = 0.0
    assert cube.calculate_type(values) == 153


def test_neighbouring_cubes_share_crossings():
    voxels = np.ones((3, 2, 2), dtype=np.float32)
    voxels[1, 0, 0] = 0.0
    voxels[1, 1, 0] = 0.83
    voxels[1, 0, 1] = 0.61
    level = 0.37

    shared = []
    for pos_x in (0, 1):
        emitted = []
        MarchingCube(level, emitted.append).calculate(voxels, pos_x, 0, 0)
        on_face = [tuple(v.tolist()) for v in emitted if v[0] == 1.0]
        shared.append(set(on_face))

    # the face x = 1 is walked in opposite directions by the two cubes
    assert len(shared[0]) == 2
    assert shared[0] == shared[1]


if __name__ == "__main__":
    test_tables_consistent()
    test_uniform_volume_emits_nothing(0.0)
    test_uniform_volume_emits_nothing(1.0)
    test_single_corner_below()
    test_interpolation_fraction()
    test_cubes_at_last_index_are_skipped()
    test_emitted_vertices_are_copies()
    test_calculate_type()
    test_neighbouring_cubes_share_crossings()
