from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from botpath._config import OutputSettings, SplineSettings, TubeSettings
from botpath.io.pathlog import to_model_space
from botpath.io.smd import emit_chunks
from botpath.materials import Material, flat, from_colors, gradient, unique_materials
from botpath.mesh import Mesh, ModelChunk, Triangle
from botpath.modeling._color import Color, parse_color
from botpath.modeling.frames import SkeletonFace, build_skeleton
from botpath.modeling.prism import build_prisms, tube_mesh
from botpath.modeling.prune import prune_indices
from botpath.modeling.spline import ControlPoint, sample_spline, sample_spline_colors
from botpath.validation import (
    InvalidParameterError,
    require_points,
    require_prisms,
    require_radius,
    require_sides,
)


@dataclass(frozen=True)
class BuildIssue:
    code: str
    message: str


@dataclass
class ModelBuild:
    """Everything produced for one tube, ready to be written out."""

    points: np.ndarray
    skeleton: list[SkeletonFace]
    chunks: list[ModelChunk]
    materials: list[Material]
    documents: list[tuple[str, str, str]]
    output: OutputSettings
    material_refs: str | list[str] = "default"
    issues: list[BuildIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    @property
    def n_triangles(self) -> int:
        return sum(chunk.n_triangles for chunk in self.chunks)

    def triangles(self) -> list[Triangle]:
        return [tri for chunk in self.chunks for tri in chunk.triangles]

    def mesh(self) -> Mesh:
        """The whole tube as one indexed mesh, ignoring chunk boundaries."""
        return tube_mesh(self.skeleton, self.material_refs)


def _assign_materials(
    n_vertices: int,
    output: OutputSettings,
    color: Color,
    gradient_end: Color | None,
    point_colors: Sequence[Color] | None,
) -> list[Material]:
    texture = output.texture_ref
    prefix = output.material_prefix
    if point_colors:
        return from_colors(point_colors, texture=texture, prefix=prefix)
    if gradient_end is not None and n_vertices >= 2:
        return gradient(color, gradient_end, n_vertices - 1, texture=texture, prefix=prefix)
    return [flat(color, texture=texture, prefix=prefix)]


def generate_model(
    points: Sequence[Sequence[float]] | np.ndarray,
    tube: TubeSettings | None = None,
    output: OutputSettings | None = None,
    color: Color | str | None = None,
    gradient_end: Color | str | None = None,
    point_colors: Sequence[Color] | None = None,
) -> ModelBuild:
    """Prune the path, build its skeleton, stitch prisms and format the files.

    Parameters are validated up front and raise
    :class:`~botpath.validation.InvalidParameterError`. A path that prunes
    to fewer than two vertices is not an error: the build has no chunks and
    reports an ``insufficient-vertices`` issue.
    """

    tube = tube or TubeSettings()
    output = output or OutputSettings()
    radius = require_radius(tube.radius)
    sides = require_sides(tube.sides)
    per_chunk = require_prisms(tube.prisms_per_chunk)
    base_color = parse_color(color if color is not None else output.color)
    end_color = parse_color(gradient_end) if gradient_end is not None else None

    pts = require_points(points)
    if point_colors is not None and len(point_colors) != pts.shape[0]:
        raise InvalidParameterError("invalid-colors", "Provide exactly one colour per point.")

    kept = prune_indices(pts, tube.prune_tolerance)
    pruned = pts[kept]
    kept_colors = [point_colors[i] for i in kept] if point_colors is not None else None

    issues: list[BuildIssue] = []
    if pruned.shape[0] < 2:
        issues.append(
            BuildIssue(
                "insufficient-vertices",
                f"Path has {pruned.shape[0]} distinct vertices; at least 2 are needed.",
            )
        )

    skeleton = build_skeleton(pruned, radius, sides)
    materials = _assign_materials(pruned.shape[0], output, base_color, end_color, kept_colors)
    names = [m.name for m in materials]
    refs: str | list[str] = names[0] if len(names) == 1 else names
    chunks = build_prisms(
        skeleton,
        refs,
        prisms_per_chunk=per_chunk,
        grid_size=tube.grid_size,
    )
    documents = emit_chunks(
        chunks,
        model_name=output.model_name,
        base_name=output.base_name,
        material_dir=output.material_dir,
    )
    return ModelBuild(
        points=pruned,
        skeleton=skeleton,
        chunks=chunks,
        materials=unique_materials(materials) if chunks else [],
        documents=documents,
        output=output,
        material_refs=refs,
        issues=issues,
    )


def generate_from_spline(
    control_points: Sequence[ControlPoint],
    tube: TubeSettings | None = None,
    spline: SplineSettings | None = None,
    output: OutputSettings | None = None,
    color: Color | str | None = None,
    gradient_end: Color | str | None = None,
) -> ModelBuild:
    """Sample an authored spline and build it like a recorded path.

    Per-point colours on the control points take precedence over a gradient.
    """

    output = output or OutputSettings()
    base_color = parse_color(color if color is not None else output.color)
    sampled = sample_spline(control_points, spline)
    point_colors = None
    if any(cp.color is not None for cp in control_points):
        point_colors = sample_spline_colors(control_points, base_color, spline)
    return generate_model(
        to_model_space(sampled),
        tube=tube,
        output=output,
        color=base_color,
        gradient_end=gradient_end,
        point_colors=point_colors,
    )


__all__ = ["BuildIssue", "ModelBuild", "generate_from_spline", "generate_model"]
