from VoxelSurf.marching_cubes import MarchingCube
from VoxelSurf.marching_squares import MarchingSquare, Winding
import numpy as np
import pytest

LEVEL = 0.5


def square_values(case: int) -> np.ndarray:
    """0/1 samples producing the given case index."""
    return np.array(
        [
            [float(bool(case & 8)), float(bool(case & 4))],
            [float(bool(case & 2)), float(bool(case & 1))],
        ]
    )


def signed_areas(vertices) -> np.ndarray:
    triangles = np.array(vertices).reshape(-1, 3, 2)
    e1 = triangles[:, 1] - triangles[:, 0]
    e2 = triangles[:, 2] - triangles[:, 0]
    return 0.5 * (e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0])


def expected_area(case: int) -> float:
    n_above = bin(case).count("1")
    if n_above == 2 and case in (6, 9):
        return 0.75
    return {0: 0.0, 1: 0.125, 2: 0.5, 3: 0.875, 4: 1.0}[n_above]


@pytest.mark.parametrize("case", range(16))
def test_calculate_type(case):
    square = MarchingSquare(LEVEL, lambda vertex: None)
    assert square.calculate_type(square_values(case)) == case


@pytest.mark.parametrize("case", range(16))
def test_triangulation_area_and_orientation(case):
    emitted = []
    square = MarchingSquare(LEVEL, emitted.append)
    square.calculate_faces(square_values(case), Winding.Clockwise)
    assert len(emitted) % 3 == 0
    areas = signed_areas(emitted) if emitted else np.zeros(0)
    assert (areas < 0).all(), f"Case {case} has inconsistent winding: {areas}"
    np.testing.assert_allclose(-areas.sum(), expected_area(case))

    emitted_ccw = []
    square.calculate_faces(square_values(case), Winding.CounterClockwise, emitted_ccw.append)
    if emitted_ccw:
        assert (signed_areas(emitted_ccw) > 0).all()
    np.testing.assert_array_equal(np.array(emitted_ccw), np.array(emitted[::-1]))


def test_triangulation_stays_in_square():
    emitted = []
    square = MarchingSquare(0.3, emitted.append)
    square.calculate_faces([[0.0, 0.9], [0.6, 0.1]])
    vertices = np.array(emitted)
    assert len(vertices) > 0
    assert (vertices >= 0.0).all() and (vertices <= 1.0).all()


def test_lines_single_corner():
    emitted = []
    square = MarchingSquare(LEVEL, emitted.append)
    square.calculate_lines([[0.0, 0.0], [0.0, 1.0]])
    np.testing.assert_allclose(np.array(emitted), [[0.5, 1.0], [1.0, 0.5]])


def test_lines_saddle():
    emitted = []
    square = MarchingSquare(LEVEL, emitted.append)
    square.calculate_lines([[0.0, 1.0], [1.0, 0.0]])
    assert len(emitted) == 4, "A saddle has two contour segments"
    np.testing.assert_allclose(
        np.array(emitted), [[0.0, 0.5], [0.5, 0.0], [1.0, 0.5], [0.5, 1.0]]
    )


@pytest.mark.parametrize("value", [0.0, 1.0])
def test_lines_uniform(value):
    emitted = []
    square = MarchingSquare(LEVEL, emitted.append)
    square.calculate_lines(np.full((2, 2), value))
    assert emitted == []


def test_interpolated_crossing():
    emitted = []
    square = MarchingSquare(0.25, emitted.append)
    square.calculate_lines([[0.0, 0.0], [1.0, 0.0]])
    # crossings on the bottom (v = 0) and right (u = 1) edges
    np.testing.assert_allclose(np.array(emitted), [[1.0, 0.75], [0.25, 0.0]])


def test_sample_equal_to_level_counts_as_above():
    square = MarchingSquare(LEVEL, lambda vertex: None)
    assert square.calculate_type([[LEVEL, 0.0], [0.0, 0.0]]) == 8
    assert square.calculate_type(np.full((2, 2), LEVEL)) == 15
    # same split as the cubes, which see no corner below the level
    assert MarchingCube(LEVEL, lambda vertex: None).calculate_type(np.full(8, LEVEL)) == 0


def test_crossings_match_marching_cube():
    voxels = np.zeros((2, 2, 2), dtype=np.float32)
    voxels[:, :, 0] = [[0.13, 0.71], [0.92, 0.27]]
    level = 0.5

    cube_vertices = []
    MarchingCube(level, cube_vertices.append).calculate(voxels, 0, 0, 0)
    cube_vertices = np.array(cube_vertices)
    on_bottom = cube_vertices[cube_vertices[:, 2] == 0.0][:, :2]

    square_vertices = []
    MarchingSquare(level, square_vertices.append).calculate_lines(voxels[:, :, 0])

    # the same crossings, bit for bit, whichever way the edges are walked
    assert set(map(tuple, on_bottom.tolist())) == set(
        map(tuple, np.array(square_vertices).tolist())
    )
    assert len(set(map(tuple, on_bottom.tolist()))) == 4


if __name__ == "__main__":
    for case in range(16):
        test_calculate_type(case)
        test_triangulation_area_and_orientation(case)
    test_triangulation_stays_in_square()
    test_lines_single_corner()
    test_lines_saddle()
    test_lines_uniform(0.0)
    test_lines_uniform(1.0)
    test_interpolated_crossing()
    test_sample_equal_to_level_counts_as_above()
    test_crossings_match_marching_cube()
