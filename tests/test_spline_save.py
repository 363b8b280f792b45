from __future__ import annotations

import math

import numpy as np
import pytest

from botpath.io.spline_save import dump_spline, load_spline
from botpath.modeling import Color, ControlPoint
from botpath.validation import SplineFormatError

SAVE = """\
0 0 0 0 0 100

256.5 -128 64 90 -15.5 80 #ff8000
512 0 64 359.99999 90 0
"""


def test_load_spline():
    points = load_spline(SAVE)
    assert len(points) == 3
    assert np.array_equal(points[1].position, [256.5, -128, 64])
    assert points[1].heading == pytest.approx(math.pi / 2)
    assert points[1].pitch == pytest.approx(math.radians(-15.5))
    assert points[1].tangent_length == 80.0
    assert points[1].color == Color.from_hex("#ff8000")
    assert points[0].color is None
    assert points[2].pitch == pytest.approx(math.pi / 2)


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("0 0 0 0 0", "Incorrect # of parameters"),
        ("0 0 0 0 0 1 #ffffff extra", "Incorrect # of parameters"),
        ("0 0 zero 0 0 1", "Non-FP parameter"),
        ("0 0 0 360 0 1", "XY angle out of range"),
        ("0 0 0 -1 0 1", "XY angle out of range"),
        ("0 0 0 0 90.5 1", "Z angle out of range"),
        ("0 0 0 0 0 -1", "Control length out of range"),
        ("0 0 0 0 0 1 blue", "Color does not match format"),
    ],
)
def test_malformed_lines_report_line_number(line: str, message: str):
    with pytest.raises(SplineFormatError) as info:
        load_spline("0 0 0 0 0 1\n" + line + "\n")
    assert info.value.line_number == 2
    assert str(info.value).startswith("Line 2 malformed - ")
    assert message in str(info.value)


def test_dump_spline_format():
    points = [
        ControlPoint.from_degrees((1, 2, 3), 90.0, -45.0, 12.5),
        ControlPoint.from_degrees((-0.000001, 0, 0), 0.0, 0.0, 0.0, color=Color.from_hex("#00ff7f")),
    ]
    assert dump_spline(points).splitlines() == [
        "1.00000 2.00000 3.00000 90.00000 -45.00000 12.50000",
        "0.00000 0.00000 0.00000 0.00000 0.00000 0.00000 #00ff7f",
    ]


def test_heading_just_below_full_turn_dumps_as_zero():
    point = ControlPoint((0, 0, 0), heading=2.0 * math.pi - 1e-9)
    assert dump_spline([point]).split()[3] == "0.00000"


def test_dump_then_load_preserves_points():
    points = load_spline(SAVE)
    again = load_spline(dump_spline(points))
    assert len(again) == len(points)
    for a, b in zip(points, again):
        assert np.allclose(a.position, b.position)
        assert a.tangent_length == pytest.approx(b.tangent_length)
        assert a.color == b.color


def test_empty_save():
    assert load_spline("") == []
    assert dump_spline([]) == ""
