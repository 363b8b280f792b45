from __future__ import annotations

import math
from typing import Sequence

import numpy as np


class BotpathError(Exception):
    """Base class for every error raised by botpath."""


class ValidationError(BotpathError, ValueError):
    """Raised when validation constraints are violated."""


class InvalidParameterError(ValidationError):
    """A generation parameter is outside its accepted range."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class SplineFormatError(ValidationError):
    """A spline save file line could not be read."""

    def __init__(self, line_number: int, message: str) -> None:
        super().__init__(f"Line {line_number} malformed - {message}")
        self.line_number = line_number


def require_sides(sides: int) -> int:
    if int(sides) != sides or sides < 2:
        raise InvalidParameterError("invalid-side-count", "Sides must be at least 2.")
    return int(sides)


def require_prisms(prisms_per_chunk: int | None) -> int | None:
    if prisms_per_chunk is None:
        return None
    if int(prisms_per_chunk) != prisms_per_chunk or prisms_per_chunk < 1:
        raise InvalidParameterError(
            "invalid-prism-count", "Number of prisms per model must be at least 1."
        )
    return int(prisms_per_chunk)


def require_radius(radius: float) -> float:
    radius = float(radius)
    if not math.isfinite(radius) or radius <= 0:
        raise InvalidParameterError("invalid-radius", "Radius must be positive.")
    return radius


def require_tolerance(angle_tolerance: float) -> float:
    angle_tolerance = float(angle_tolerance)
    if not math.isfinite(angle_tolerance) or angle_tolerance < 0 or angle_tolerance >= math.pi:
        raise InvalidParameterError(
            "invalid-tolerance", "Angle tolerance must be in [0, pi) radians."
        )
    return angle_tolerance


def require_points(points: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    arr = np.asarray(points, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 3), dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValidationError("Points must be an Nx3 sequence of coordinates.")
    if not np.all(np.isfinite(arr)):
        raise ValidationError("Points contain invalid values.")
    return arr
