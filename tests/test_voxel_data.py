from VoxelSurf.voxel_data import VoxelData, VoxelDataFromSlices
import logging

import numpy as np


def test_set_and_calculate(tmp_path):
    data = VoxelData(4, 4, 4, box_size=0.5)
    for x in (1, 2):
        for y in (1, 2):
            for z in (1, 2):
                data.set(x, y, z, 1.0)
    mesh = data.calculate(0.5)
    assert mesh.n_triangles > 0
    assert len(mesh.to_torch().boundary_edges()) == 0

    filename = tmp_path / "blob.stl"
    data.save_as_stl(filename)
    assert filename.stat().st_size == 84 + 50 * mesh.n_triangles


def test_set_out_of_range(caplog):
    data = VoxelData(2, 2, 2)
    with caplog.at_level(logging.ERROR):
        data.set(2, 0, 0, 1.0)
        data.set(0, -1, 0, 1.0)
    assert np.all(data.data == 0.0)
    assert len(caplog.records) == 2
    assert "outside of the volume" in caplog.records[0].getMessage()


def test_fill_from_slices():
    data = VoxelDataFromSlices(2, 2, 3)
    slices = []
    for level in range(3):
        data.set_in_slice(0, 0, float(level + 1))
        data.set_in_slice(5, 0, 9.0)
        slices.append(data.increase_level())
    assert slices == [True, True, False]
    np.testing.assert_array_equal(data.data[0, 0], [1.0, 2.0, 3.0])
    assert data.data.sum() == 6.0

    # once every slice is filled further values are ignored
    data.set_in_slice(1, 1, 7.0)
    assert data.increase_level() is False
    assert data.data.sum() == 6.0

    data.reset_level()
    data.set_in_slice(1, 1, 7.0)
    assert data.data[1, 1, 0] == 7.0


if __name__ == "__main__":
    import pathlib

    out_dir = pathlib.Path("tests/tmp_outputs")
    out_dir.mkdir(parents=True, exist_ok=True)
    test_set_and_calculate(out_dir)
    test_fill_from_slices()
