from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np


@dataclass
class MeshAnalysis:
    """Edge and face counts for checking that a tube closed up properly."""

    n_vertices: int
    n_faces: int
    degenerate_faces: int
    open_edges: int
    overshared_edges: int
    misoriented_edges: int

    @property
    def is_watertight(self) -> bool:
        return self.open_edges == 0 and self.overshared_edges == 0

    @property
    def is_consistently_wound(self) -> bool:
        return self.misoriented_edges == 0

    def issues(self) -> list[str]:
        issues: list[str] = []
        if self.degenerate_faces:
            issues.append(f"{self.degenerate_faces} zero-area triangles")
        if self.open_edges:
            issues.append(f"{self.open_edges} open edges")
        if self.overshared_edges:
            issues.append(f"{self.overshared_edges} edges shared by more than two triangles")
        if self.misoriented_edges:
            issues.append(f"{self.misoriented_edges} edges walked the same way by neighbouring triangles")
        return issues


@dataclass(frozen=True)
class Triangle:
    """Three corner positions plus the material the face is drawn with."""

    a: tuple[float, float, float]
    b: tuple[float, float, float]
    c: tuple[float, float, float]
    material: str

    @classmethod
    def from_points(cls, a: Sequence[float], b: Sequence[float], c: Sequence[float], material: str) -> "Triangle":
        return cls(_as_point(a), _as_point(b), _as_point(c), material)

    @property
    def corners(self) -> tuple[tuple[float, float, float], ...]:
        return (self.a, self.b, self.c)

    def normal(self) -> np.ndarray:
        a, b, c = (np.asarray(p, dtype=float) for p in self.corners)
        n = np.cross(b - a, c - a)
        length = np.linalg.norm(n)
        if length == 0:
            return np.zeros(3, dtype=float)
        return n / length


@dataclass(frozen=True)
class ModelChunk:
    """A bounded run of tube triangles compiled as one model."""

    triangles: tuple[Triangle, ...]
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    prism_range: tuple[int, int] = (0, 0)

    @property
    def n_triangles(self) -> int:
        return len(self.triangles)

    def materials(self) -> list[str]:
        seen: dict[str, None] = {}
        for tri in self.triangles:
            seen.setdefault(tri.material, None)
        return list(seen)


@dataclass
class Mesh:
    vertices: np.ndarray
    faces: np.ndarray
    face_materials: list[str] = field(default_factory=list)
    analysis: MeshAnalysis | None = None

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=float).reshape(-1, 3).copy()
        self.faces = np.asarray(self.faces, dtype=int).reshape(-1, 3).copy()
        if self.face_materials and len(self.face_materials) != self.n_faces:
            raise ValueError("face_materials must name one material per face.")

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0])


def _as_point(value: Sequence[float]) -> tuple[float, float, float]:
    x, y, z = (float(v) for v in np.asarray(value, dtype=float).reshape(3))
    return (x, y, z)


def mesh_from_triangles(triangles: Iterable[Triangle]) -> Mesh:
    """Build an indexed mesh, welding corners that share an exact position."""

    index: dict[tuple[float, float, float], int] = {}
    vertices: list[tuple[float, float, float]] = []
    faces: list[list[int]] = []
    materials: list[str] = []
    for tri in triangles:
        face = []
        for corner in tri.corners:
            if corner not in index:
                index[corner] = len(vertices)
                vertices.append(corner)
            face.append(index[corner])
        faces.append(face)
        materials.append(tri.material)
    if not faces:
        return Mesh(np.zeros((0, 3), dtype=float), np.zeros((0, 3), dtype=int))
    return Mesh(np.asarray(vertices, dtype=float), np.asarray(faces, dtype=int), face_materials=materials)


def analyze_mesh(mesh: Mesh, area_epsilon: float = 1e-12) -> MeshAnalysis:
    """Count open, over-shared and misoriented edges plus zero-area faces.

    In a closed, consistently wound tube every undirected edge is shared by
    exactly two triangles, which walk it in opposite directions.
    """

    faces = mesh.faces
    if faces.size == 0:
        analysis = MeshAnalysis(mesh.n_vertices, 0, 0, 0, 0, 0)
        mesh.analysis = analysis
        return analysis

    corners = mesh.vertices[faces]
    areas = 0.5 * np.linalg.norm(np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0]), axis=1)

    directed = np.concatenate([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]])
    _, undirected_counts = np.unique(np.sort(directed, axis=1), axis=0, return_counts=True)
    _, directed_counts = np.unique(directed, axis=0, return_counts=True)

    analysis = MeshAnalysis(
        n_vertices=mesh.n_vertices,
        n_faces=mesh.n_faces,
        degenerate_faces=int(np.count_nonzero(areas <= area_epsilon)),
        open_edges=int(np.count_nonzero(undirected_counts == 1)),
        overshared_edges=int(np.count_nonzero(undirected_counts > 2)),
        misoriented_edges=int(np.count_nonzero(directed_counts > 1)),
    )
    mesh.analysis = analysis
    return analysis


def mesh_to_pyvista(mesh: Mesh):
    """Convert to ``pyvista.PolyData``; face materials are not carried over."""

    import pyvista as pv

    if mesh.n_faces == 0:
        return pv.PolyData(mesh.vertices, deep=True)
    cells = np.column_stack([np.full(mesh.n_faces, 3, dtype=np.int64), mesh.faces.astype(np.int64)])
    return pv.PolyData(mesh.vertices, cells.ravel(), deep=True)
