from __future__ import annotations

import math
import re
from typing import Iterable

from botpath.modeling._color import Color
from botpath.modeling.spline import ControlPoint
from botpath.validation import InvalidParameterError, SplineFormatError

_FLOAT = re.compile(r"^[-+]?(?:[0-9]*\.[0-9]+|[0-9]+)$")


def _parse_line(line: str, line_number: int) -> ControlPoint:
    fields = line.split()
    if len(fields) not in (6, 7):
        raise SplineFormatError(line_number, "Incorrect # of parameters")
    numbers = fields[:6]
    if not all(_FLOAT.match(value) for value in numbers):
        raise SplineFormatError(line_number, "Non-FP parameter")
    x, y, z, heading, pitch, length = (float(value) for value in numbers)
    if heading >= 360.0 or heading < 0.0:
        raise SplineFormatError(line_number, "XY angle out of range (0.0 <= x < 360.0)")
    if pitch > 90.0 or pitch < -90.0:
        raise SplineFormatError(line_number, "Z angle out of range (-90.0 <= x <= 90.0)")
    if length < 0.0:
        raise SplineFormatError(line_number, "Control length out of range (0.0 <= x)")

    color = None
    if len(fields) == 7:
        try:
            color = Color.from_hex(fields[6])
        except InvalidParameterError as exc:
            raise SplineFormatError(line_number, str(exc)) from exc

    heading_rad = math.radians(heading)
    if heading_rad >= 2.0 * math.pi:
        heading_rad = 0.0
    return ControlPoint(
        position=(x, y, z),
        heading=heading_rad,
        pitch=math.radians(pitch),
        tangent_length=length,
        color=color,
    )


def load_spline(text: str) -> list[ControlPoint]:
    """Read ``x y z heading pitch length [#rrggbb]`` lines (angles in degrees).

    Blank lines are ignored; anything else that does not parse raises
    :class:`SplineFormatError`.
    """

    points = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        points.append(_parse_line(line, line_number))
    return points


def _round(value: float) -> str:
    return f"{round(float(value), 5) + 0.0:.5f}"


def dump_spline(points: Iterable[ControlPoint]) -> str:
    lines = []
    for point in points:
        values = [
            *point.position,
            math.degrees(point.heading),
            math.degrees(point.pitch),
            point.tangent_length,
        ]
        fields = [_round(v) for v in values]
        if fields[3] == "360.00000":
            fields[3] = "0.00000"
        if point.color is not None:
            fields.append(point.color.to_hex(hash=True))
        lines.append(" ".join(fields))
    return "\n".join(lines) + ("\n" if lines else "")


__all__ = ["dump_spline", "load_spline"]
