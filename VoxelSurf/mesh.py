import logging
import os
import pathlib

import gustaf as gus
import numpy as np
import torch

from VoxelSurf.boundary_faces import BoundaryFaces
from VoxelSurf.isosurface import Isosurface
import VoxelSurf

logger = logging.getLogger(VoxelSurf.__name__)

# binary STL: 80 byte header, uint32 triangle count, 50 bytes per triangle
STL_HEADER_SIZE = 80
STL_TRIANGLE_DTYPE = np.dtype(
    [
        ("normal", "<f4", (3,)),
        ("vertices", "<f4", (3, 3)),
        ("attribute_byte_count", "<u2"),
    ]
)


class MeshExportError(OSError):
    """Raised when a mesh could not be written to its destination."""


def calculate_normal(v0, v1, v2, legacy: bool = False) -> np.ndarray:
    """
    Unit normal of the triangle(s) ``(v0, v1, v2)`` following the right-hand
    rule. Works on single vertices of shape ``(3,)`` as well as on stacks of
    shape ``(N, 3)``.

    With ``legacy=True`` the normal is computed the way older voxellib STL
    files were written: the y component is overwritten with the z formula and
    z stays zero before normalising. Use it only to reproduce such files byte
    by byte.

    Degenerate triangles give non-finite normals.
    """
    v0, v1, v2 = (np.asarray(v, dtype=np.float32) for v in (v0, v1, v2))
    v01 = v1 - v0
    v02 = v2 - v0
    if legacy:
        normal = np.zeros_like(v01)
        normal[..., 0] = v01[..., 1] * v02[..., 2] - v01[..., 2] * v02[..., 1]
        normal[..., 1] = v01[..., 0] * v02[..., 1] - v01[..., 1] * v02[..., 0]
    else:
        normal = np.cross(v01, v02)

    with np.errstate(divide="ignore", invalid="ignore"):
        size = np.sqrt(np.sum(normal * normal, axis=-1, keepdims=True))
        return normal / size


class torchSurfMesh:
    def __init__(self, vertices: torch.Tensor, faces: torch.Tensor):
        self.vertices = vertices
        self.faces = faces

    def to_gus(self):
        return gus.Faces(
            self.vertices.detach().cpu().numpy(), self.faces.detach().cpu().numpy()
        )

    def boundary_edges(self) -> torch.Tensor:
        """
        Edges (as sorted vertex index pairs) that are not shared by exactly
        two faces. Empty for a watertight mesh.
        """
        edges = torch.cat(
            [self.faces[:, [0, 1]], self.faces[:, [1, 2]], self.faces[:, [2, 0]]],
            dim=0,
        )
        edges, _ = torch.sort(edges, dim=1)
        unique_edges, counts = torch.unique(edges, dim=0, return_counts=True)
        return unique_edges[counts != 2]

    def area_weighted_normal_sum(self) -> torch.Tensor:
        """Sum of the face normals scaled by face area, zero for closed meshes."""
        v = self.vertices[self.faces]
        cross = torch.linalg.cross(v[:, 1] - v[:, 0], v[:, 2] - v[:, 0], dim=1)
        return 0.5 * cross.sum(dim=0)


class Mesh:
    """
    Collects the vertices emitted by one extraction run and writes them as a
    binary STL file.

    The mesh is a vertex soup: ``vertices`` holds every face vertex in face
    order, three per triangle or four per quad depending on ``primitive``.

    Parameters
    ----------
    legacy_normals : bool, default False
        Write normals with the arithmetic of older voxellib STL files, see
        ``calculate_normal``.
    """

    TRIANGLES = "triangles"
    QUADS = "quads"

    def __init__(self, legacy_normals: bool = False):
        self.vertices: list[np.ndarray] = []
        self.primitive = Mesh.TRIANGLES
        self.legacy_normals = legacy_normals

    @property
    def vertices_per_face(self) -> int:
        return 4 if self.primitive == Mesh.QUADS else 3

    def make_from_voxels(self, voxels, box_size: float, level: float | None = None):
        """
        Replaces the content of the mesh with the surface of ``voxels``.

        Without ``level`` the volume is read as boolean occupancy and a quad
        mesh of the occupied cells is generated (see ``BoundaryFaces``). With
        ``level`` the volume is read as a scalar field and the closed
        isosurface at that level is generated (see ``Isosurface``).

        Parameters
        ----------
        voxels : array_like
            Volume of shape ``(W, H, D)`` indexed ``[x, y, z]``.
        box_size : float
            Size of each cell (same width, length and height).
        level : float, optional
            Isolevel for scalar volumes.
        """
        vertices = []
        if level is None:
            primitive = Mesh.QUADS
            BoundaryFaces(vertices.append).make_quads_from_voxels(voxels, box_size)
        else:
            primitive = Mesh.TRIANGLES
            Isosurface(vertices.append).make_from_voxels(voxels, box_size, level)
        # only a completed run replaces the previous content
        self.vertices = vertices
        self.primitive = primitive
        logger.debug(
            f"Generated {len(self.vertices) // self.vertices_per_face} "
            f"{self.primitive} from {len(self.vertices)} vertices"
        )

    @property
    def faces(self) -> np.ndarray:
        """Face vertices as array of shape ``(F, 3 or 4, 3)``."""
        self._check_vertex_count()
        return np.asarray(self.vertices, dtype=np.float32).reshape(
            -1, self.vertices_per_face, 3
        )

    @property
    def n_triangles(self) -> int:
        if self.primitive == Mesh.QUADS:
            return len(self.vertices) // 2
        return len(self.vertices) // 3

    def _check_vertex_count(self):
        if len(self.vertices) % self.vertices_per_face != 0:
            raise ValueError(
                f"Mesh of {self.primitive} holds {len(self.vertices)} vertices, "
                f"which is not a multiple of {self.vertices_per_face}"
            )

    def triangles(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Splits the mesh into the triangles written to STL.

        Quads ``(v0, v1, v2, v3)`` become ``(v0, v1, v2)`` and ``(v0, v2, v3)``,
        both carrying the normal of the first one.

        Returns:
            (numpy.ndarray, numpy.ndarray): triangles ``(T, 3, 3)`` and their
            normals ``(T, 3)``.
        """
        faces = self.faces
        normals = calculate_normal(
            faces[:, 0], faces[:, 1], faces[:, 2], legacy=self.legacy_normals
        )
        if self.primitive == Mesh.QUADS:
            triangles = np.stack([faces[:, [0, 1, 2]], faces[:, [0, 2, 3]]], axis=1)
            return triangles.reshape(-1, 3, 3), np.repeat(normals, 2, axis=0)
        return faces, normals

    def to_bytes(self) -> bytes:
        """The binary STL representation, ``84 + 50 * n_triangles`` bytes."""
        triangles, normals = self.triangles()
        records = np.zeros(len(triangles), dtype=STL_TRIANGLE_DTYPE)
        records["normal"] = normals
        records["vertices"] = triangles
        count = np.array([len(triangles)], dtype="<u4")
        return bytes(STL_HEADER_SIZE) + count.tobytes() + records.tobytes()

    def serialize_binary(self, sink):
        """
        Writes the binary STL representation to a writable binary file
        object. The complete file is assembled before the first write, and
        partial writes are continued until every byte has been accepted.

        Raises:
            MeshExportError: if writing to ``sink`` fails or the sink stops
                accepting data.
        """
        remaining = memoryview(self.to_bytes())
        while remaining:
            try:
                written = sink.write(remaining)
            except OSError as err:
                raise MeshExportError(f"Could not write STL data: {err}") from err
            # raw sinks may accept only part of the data
            if not written:
                raise MeshExportError(
                    f"STL sink stopped accepting data with {len(remaining)} bytes left"
                )
            remaining = remaining[written:]

    def save_as_stl(self, filename: str | os.PathLike):
        """
        Saves the mesh as a binary STL file for 3D printing or for opening in
        a modelling or CAD package. Missing parent directories are created.

        The data is written to a temporary file next to the destination and
        moved into place once complete, so a failed export never leaves a
        truncated file behind.

        Raises:
            MeshExportError: if the file could not be written.
        """
        filepath = pathlib.Path(filename)
        data = self.to_bytes()
        logger.info(f"Exporting mesh with {self.n_triangles} triangles to {filepath}")

        tmp_path = filepath.with_name(filepath.name + ".part")
        try:
            if not os.path.isdir(filepath.parent):
                os.makedirs(filepath.parent)
            with open(tmp_path, "wb") as f:
                f.write(data)
            os.replace(tmp_path, filepath)
        except OSError as err:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning(f"Could not remove temporary file {tmp_path}")
            raise MeshExportError(f"Could not write STL file {filepath}: {err}") from err

    def to_torch(self) -> torchSurfMesh:
        """
        Welds the vertex soup into an indexed triangle mesh. Vertices closer
        than 1e-5 are merged, quads are split as in the STL export.
        """
        triangles, _ = self.triangles()
        verts = torch.from_numpy(triangles.reshape(-1, 3).astype(np.float64))
        verts_rounded = torch.round(verts * 10**5) / (10**5)
        verts_unique, inverse_indices = torch.unique(
            verts_rounded, dim=0, return_inverse=True
        )
        return torchSurfMesh(verts_unique, inverse_indices.reshape(-1, 3))


def export_surface_mesh(
    filename: str | bytes | os.PathLike[str] | os.PathLike[bytes],
    mesh: Mesh | torchSurfMesh | gus.Faces,
):
    """
    Exports a surface mesh. STL files of a ``Mesh`` are written with the
    byte-exact writer of ``Mesh.save_as_stl``, everything else goes through
    ``gustaf``/``meshio`` and is chosen by the file extension.
    """
    export_filename = pathlib.Path(os.fsdecode(filename))
    ext = export_filename.suffix.lower()
    if isinstance(mesh, Mesh):
        match ext:
            case ".stl":
                mesh.save_as_stl(export_filename)
                return
            case _:
                mesh = mesh.to_torch()
    if isinstance(mesh, torchSurfMesh):
        mesh = mesh.to_gus()
    if not isinstance(mesh, gus.Faces):
        raise TypeError(f"Cannot export mesh of type {type(mesh).__name__}")

    if not os.path.isdir(export_filename.parent):
        os.makedirs(export_filename.parent)
    logger.debug(
        f"Exporting mesh with {len(mesh.faces)} faces, {len(mesh.vertices)} "
        f"vertices to {export_filename}"
    )
    gus.io.meshio.export(export_filename, mesh)
