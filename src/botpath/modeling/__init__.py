"""Geometry stages: pruning, framing, spline sampling and prism stitching."""

from __future__ import annotations

from ._color import Color, parse_color
from .frames import SkeletonFace, build_skeleton, mitre_normals, rotate_around
from .prism import build_prisms, snap_to_grid, tube_mesh
from .prune import prune_indices, prune_vertices
from .spline import ControlPoint, sample_spline, sample_spline_colors

__all__ = [
    "Color",
    "ControlPoint",
    "SkeletonFace",
    "build_prisms",
    "build_skeleton",
    "mitre_normals",
    "parse_color",
    "prune_indices",
    "prune_vertices",
    "rotate_around",
    "sample_spline",
    "sample_spline_colors",
    "snap_to_grid",
    "tube_mesh",
]
