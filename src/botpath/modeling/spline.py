from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from botpath._config import SplineSettings
from botpath.validation import InvalidParameterError

from ._color import Color


def _require_vec3(value: Sequence[float], label: str) -> np.ndarray:
    try:
        arr = np.asarray(value, dtype=float).reshape(3)
    except Exception as exc:
        raise InvalidParameterError("invalid-point", f"{label} must be a 3D coordinate.") from exc
    if not np.all(np.isfinite(arr)):
        raise InvalidParameterError("invalid-point", f"{label} must be finite.")
    return arr


@dataclass(frozen=True)
class ControlPoint:
    """A user-placed spline point with a Bezier handle.

    ``heading`` and ``pitch`` are in radians; ``tangent_length`` is the
    handle magnitude. ``color`` is optional per-point tint.
    """

    position: np.ndarray
    heading: float = 0.0
    pitch: float = 0.0
    tangent_length: float = 0.0
    color: Color | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _require_vec3(self.position, "position"))
        heading = float(self.heading)
        pitch = float(self.pitch)
        length = float(self.tangent_length)
        if not (0.0 <= heading < 2.0 * math.pi):
            raise InvalidParameterError("invalid-heading", "heading must be in [0, 2*pi).")
        if not (-math.pi / 2.0 <= pitch <= math.pi / 2.0):
            raise InvalidParameterError("invalid-pitch", "pitch must be in [-pi/2, pi/2].")
        if not math.isfinite(length) or length < 0:
            raise InvalidParameterError("invalid-tangent", "tangent_length must be >= 0.")
        object.__setattr__(self, "heading", heading)
        object.__setattr__(self, "pitch", pitch)
        object.__setattr__(self, "tangent_length", length)

    @classmethod
    def from_degrees(
        cls,
        position: Sequence[float],
        heading_deg: float,
        pitch_deg: float,
        tangent_length: float,
        color: Color | None = None,
    ) -> "ControlPoint":
        return cls(
            position=position,
            heading=math.radians(heading_deg),
            pitch=math.radians(pitch_deg),
            tangent_length=tangent_length,
            color=color,
        )

    def tangent(self) -> np.ndarray:
        cos_pitch = math.cos(self.pitch)
        direction = np.array(
            [
                math.cos(self.heading) * cos_pitch,
                math.sin(self.heading) * cos_pitch,
                math.sin(self.pitch),
            ]
        )
        return direction * self.tangent_length


def bezier_handles(start: ControlPoint, end: ControlPoint) -> np.ndarray:
    """The four cubic Bezier control points joining two control points."""

    return np.vstack(
        [
            start.position,
            start.position + start.tangent(),
            end.position - end.tangent(),
            end.position,
        ]
    )


def _lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return a * (1 - t) + b * t


def de_casteljau(handles: np.ndarray, t: float) -> np.ndarray:
    points = np.asarray(handles, dtype=float)
    while points.shape[0] > 1:
        points = _lerp(points[:-1], points[1:], t)
    return points[0]


def _samples(settings: SplineSettings | None) -> int:
    settings = settings or SplineSettings()
    count = settings.samples_per_segment
    if int(count) != count or count < 1:
        raise InvalidParameterError("invalid-samples", "samples_per_segment must be at least 1.")
    return int(count)


def sample_spline(
    control_points: Sequence[ControlPoint],
    settings: SplineSettings | None = None,
) -> np.ndarray:
    """Sample every segment at ``t = i / samples`` and close with the last point."""

    samples = _samples(settings)
    if len(control_points) < 2:
        return np.zeros((0, 3), dtype=float)

    sampled: list[np.ndarray] = []
    for start, end in zip(control_points[:-1], control_points[1:]):
        handles = bezier_handles(start, end)
        for i in range(samples):
            sampled.append(de_casteljau(handles, i / samples))
    sampled.append(control_points[-1].position.copy())
    return np.vstack(sampled)


def sample_spline_colors(
    control_points: Sequence[ControlPoint],
    default: Color,
    settings: SplineSettings | None = None,
) -> list[Color]:
    """One colour per sample from :func:`sample_spline`, blended between points."""

    samples = _samples(settings)
    if len(control_points) < 2:
        return []

    colors: list[Color] = []
    for start, end in zip(control_points[:-1], control_points[1:]):
        a = start.color or default
        b = end.color or default
        for i in range(samples):
            colors.append(a.lerp(b, i / samples))
    colors.append(control_points[-1].color or default)
    return colors


__all__ = ["ControlPoint", "bezier_handles", "de_casteljau", "sample_spline", "sample_spline_colors"]
