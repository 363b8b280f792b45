from __future__ import annotations

import math
from typing import Iterator, Sequence

import numpy as np

from botpath.mesh import Mesh, ModelChunk, Triangle
from botpath.validation import InvalidParameterError, require_prisms

from .frames import SkeletonFace


def snap_to_grid(value: Sequence[float] | np.ndarray, grid_size: float) -> tuple[float, float, float]:
    """Round each coordinate to the nearest multiple of ``grid_size``, halves away from zero."""

    if not math.isfinite(grid_size) or grid_size <= 0:
        raise InvalidParameterError("invalid-grid", "grid_size must be positive.")
    snapped = []
    for coord in np.asarray(value, dtype=float).reshape(3):
        steps = math.copysign(math.floor(abs(coord) / grid_size + 0.5), coord)
        snapped.append(float(steps * grid_size) + 0.0)
    return (snapped[0], snapped[1], snapped[2])


def _resolve_materials(materials: str | Sequence[str], n_faces: int) -> list[str]:
    if isinstance(materials, str):
        return [materials] * max(n_faces, 1)
    names = list(materials)
    if len(names) not in (n_faces - 1, n_faces) or not names:
        raise InvalidParameterError(
            "invalid-materials",
            "Provide one material per prism or one per skeleton face.",
        )
    return names


def _sides(skeleton: Sequence[SkeletonFace]) -> int:
    sides = skeleton[0].sides
    if any(face.sides != sides for face in skeleton):
        raise InvalidParameterError("invalid-side-count", "Skeleton faces must share one side count.")
    return sides


def _indexed_faces(n_faces: int, sides: int) -> Iterator[tuple[int, list[int]]]:
    """Yield ``(prism, [i, j, k])`` into the stacked ring vertices.

    The start cap reports prism ``-1`` and the end cap prism ``n_faces - 1``.
    """

    for i in range(1, sides - 1):
        yield -1, [0, i + 1, i]

    for prism in range(n_faces - 1):
        back = prism * sides
        front = (prism + 1) * sides
        for n in range(sides):
            m = (n + 1) % sides
            yield prism, [back + n, back + m, front + n]
            yield prism, [front + m, front + n, back + m]

    end = (n_faces - 1) * sides
    for i in range(1, sides - 1):
        yield n_faces - 1, [end, end + i, end + i + 1]


def _material_for(prism: int, names: list[str]) -> str:
    if prism < 0:
        return names[0]
    if prism >= len(names):
        return names[-1]
    return names[prism]


def tube_mesh(skeleton: Sequence[SkeletonFace], materials: str | Sequence[str] = "default") -> Mesh:
    """Indexed, capped tube through every skeleton face."""

    if len(skeleton) < 2:
        return Mesh(np.zeros((0, 3), dtype=float), np.zeros((0, 3), dtype=int))
    sides = _sides(skeleton)
    names = _resolve_materials(materials, len(skeleton))
    vertices = np.vstack([face.points for face in skeleton])
    faces = []
    face_materials = []
    for prism, tri in _indexed_faces(len(skeleton), sides):
        face_materials.append(_material_for(prism, names))
        faces.append(tri)
    return Mesh(vertices, np.asarray(faces, dtype=int), face_materials=face_materials)


def build_prisms(
    skeleton: Sequence[SkeletonFace],
    materials: str | Sequence[str],
    prisms_per_chunk: int | None = None,
    grid_size: float = 64.0,
) -> list[ModelChunk]:
    """Stitch skeleton faces into capped prisms, split into chunks.

    ``materials`` is one name for the whole tube, or a name per prism (or per
    face); caps take the first and last names. Fewer than two faces produce
    no chunks.
    """

    per_chunk = require_prisms(prisms_per_chunk)
    if len(skeleton) < 2:
        return []

    mesh = tube_mesh(skeleton, materials)
    n_prisms = len(skeleton) - 1
    if per_chunk is None:
        per_chunk = n_prisms
    n_chunks = math.ceil(n_prisms / per_chunk)

    buckets: list[list[Triangle]] = [[] for _ in range(n_chunks)]
    sides = _sides(skeleton)
    for (prism, tri), material in zip(_indexed_faces(len(skeleton), sides), mesh.face_materials):
        if prism < 0:
            chunk = 0
        elif prism >= n_prisms:
            chunk = n_chunks - 1
        else:
            chunk = prism // per_chunk
        a, b, c = (mesh.vertices[idx] for idx in tri)
        buckets[chunk].append(Triangle.from_points(a, b, c, material))

    chunks = []
    for index, triangles in enumerate(buckets):
        first = index * per_chunk
        last = min(first + per_chunk, n_prisms)
        chunks.append(
            ModelChunk(
                triangles=tuple(triangles),
                origin=snap_to_grid(skeleton[first].center, grid_size),
                prism_range=(first, last),
            )
        )
    return chunks


__all__ = ["build_prisms", "snap_to_grid", "tube_mesh"]
