from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from botpath.validation import require_points, require_radius, require_sides

_EPSILON = 1e-9
WORLD_UP = np.array([0.0, 0.0, 1.0])
WORLD_X = np.array([1.0, 0.0, 0.0])


@dataclass(frozen=True)
class SkeletonFace:
    """Ring of cross-section points around one path vertex."""

    center: np.ndarray
    normal: np.ndarray
    up: np.ndarray
    points: np.ndarray

    @property
    def sides(self) -> int:
        return int(self.points.shape[0])


def project_plane(vec: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Project ``vec`` onto the plane through the origin with unit ``normal``."""
    return vec - np.dot(vec, normal) * normal


def rotate_around(vec: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotate vector around a unit axis by angle (radians)."""
    parallel = np.dot(vec, axis) * axis
    orthogonal = vec - parallel
    return parallel + np.cos(angle) * orthogonal + np.sin(angle) * np.cross(axis, orthogonal)


def segment_directions(points: np.ndarray) -> np.ndarray:
    deltas = np.diff(points, axis=0)
    lengths = np.linalg.norm(deltas, axis=1)
    if np.any(lengths == 0):
        raise ValueError("Polyline has zero-length segments; prune it first.")
    return deltas / lengths[:, np.newaxis]


def mitre_normals(points: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    """Normals of the planes that bisect each bend of the polyline."""

    pts = require_points(points)
    if pts.shape[0] < 2:
        return np.zeros((0, 3), dtype=float)
    directions = segment_directions(pts)
    normals = np.zeros_like(pts)
    normals[0] = directions[0]
    normals[-1] = directions[-1]
    for i in range(1, pts.shape[0] - 1):
        bisector = directions[i - 1] + directions[i]
        norm = np.linalg.norm(bisector)
        if norm < _EPSILON:
            # path doubles back on itself
            normals[i] = directions[i - 1]
        else:
            normals[i] = bisector / norm
    return normals


def _seed_up(normal: np.ndarray) -> np.ndarray:
    up = project_plane(WORLD_UP, normal)
    if np.linalg.norm(up) < _EPSILON:
        up = project_plane(WORLD_X, normal)
    return up / np.linalg.norm(up)


def build_skeleton(
    points: Sequence[Sequence[float]] | np.ndarray,
    radius: float,
    sides: int,
) -> list[SkeletonFace]:
    """Build one ring of ``sides`` points per polyline vertex.

    The up vector is carried from vertex to vertex by re-projecting it onto
    each mitre plane, so the rings turn with the path instead of twisting.
    """

    radius = require_radius(radius)
    sides = require_sides(sides)
    pts = require_points(points)
    if pts.shape[0] < 2:
        return []

    normals = mitre_normals(pts)
    angles = [2.0 * np.pi * n / sides for n in range(sides)]

    faces: list[SkeletonFace] = []
    up = _seed_up(normals[0])
    for center, normal in zip(pts, normals):
        carried = project_plane(up, normal)
        norm = np.linalg.norm(carried)
        if norm < _EPSILON:
            carried = _seed_up(normal)
            norm = 1.0
        up = carried / norm
        scaled = up * radius
        ring = np.vstack([rotate_around(scaled, normal, angle) for angle in angles]) + center
        faces.append(SkeletonFace(center=center.copy(), normal=normal.copy(), up=scaled, points=ring))
    return faces


__all__ = ["SkeletonFace", "build_skeleton", "mitre_normals", "project_plane", "rotate_around"]
