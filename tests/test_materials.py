from __future__ import annotations

import base64

import numpy as np
import pytest

from botpath.materials import (
    PLACEHOLDER_VTF,
    Material,
    flat,
    from_colors,
    gradient,
    gradient_colors,
    material_name,
    unique_materials,
)
from botpath.modeling import Color, parse_color
from botpath.modeling._color import channel_to_byte
from botpath.validation import InvalidParameterError


def test_flat_red_material():
    material = flat("#FF0000")
    assert material.name == "botpath-ff0000"
    assert material.tint == (1.0, 0.0, 0.0)
    vmt = material.to_vmt()
    assert '"UnlitGeneric"' in vmt
    assert '"$basetexture" "bp-gen/botpath"' in vmt
    assert '"$model" "1"' in vmt
    assert '"$color2" "[1.0 0.0 0.0]"' in vmt
    assert vmt.endswith("}\n")


def test_material_name_and_tint_agree():
    color = Color(0.2, 0.5, 0.7)
    material = flat(color)
    assert material.name == f"botpath-{color.to_hex()}"
    assert Color.from_hex(material.name.split("-")[-1]).rgb == material.tint


def test_translucent_flag():
    assert '"$translucent" "1"' in flat("#123456").to_vmt(translucent=True)
    assert "$translucent" not in flat("#123456").to_vmt()


def test_channel_rounding_and_clamping():
    assert channel_to_byte(0.5) == 128
    assert channel_to_byte(1.0) == 255
    assert channel_to_byte(0.0) == 0
    assert channel_to_byte(1.2) == 255
    assert channel_to_byte(-0.1) == 0


def test_hex_round_trip_within_one_step():
    rng = np.random.default_rng(5)
    for rgb in rng.random((50, 3)):
        color = Color.from_rgb(rgb)
        decoded = Color.from_hex(color.to_hex())
        assert np.all(np.abs(np.array(decoded.rgb) - rgb) <= 1.0 / 255.0)


@pytest.mark.parametrize("text", ["#ff00", "red", "#gg0000", "ff00001", ""])
def test_malformed_colour(text: str):
    with pytest.raises(InvalidParameterError) as info:
        Color.from_hex(text)
    assert info.value.code == "invalid-color"


def test_hex_accepts_missing_hash():
    assert Color.from_hex("00ff00") == Color.from_hex("#00FF00")
    assert parse_color((0, 1, 0)).to_hex(hash=True) == "#00ff00"


@pytest.mark.parametrize("count", [2, 3, 7])
def test_gradient_endpoints_are_exact(count: int):
    start = Color(0.1, 0.2, 0.3)
    end = Color(0.9, 0.4, 0.05)
    colors = gradient_colors(start, end, count)
    assert len(colors) == count
    assert colors[0] == start
    assert colors[-1] == end


def test_gradient_materials():
    materials = gradient("#000000", "#ffffff", 5)
    assert [m.name for m in materials] == [
        "botpath-000000",
        "botpath-404040",
        "botpath-808080",
        "botpath-bfbfbf",
        "botpath-ffffff",
    ]


def test_single_sample_gradient_is_start():
    assert gradient_colors(Color(1, 0, 0), Color(0, 0, 1), 1) == [Color(1, 0, 0)]
    with pytest.raises(InvalidParameterError):
        gradient_colors(Color(1, 0, 0), Color(0, 0, 1), 0)


def test_unique_materials_keep_first_seen_order():
    materials = from_colors([Color(1, 0, 0), Color(0, 0, 1), Color(1, 0, 0)], prefix="tube")
    assert [m.name for m in unique_materials(materials)] == ["tube-ff0000", "tube-0000ff"]


def test_material_name_prefix():
    assert material_name(Color(0, 0, 0), "tube") == "tube-000000"
    assert Material("x", Color(0, 0, 0), "t").file_name == "x.vmt"


def test_placeholder_texture_is_tiny_vtf():
    assert PLACEHOLDER_VTF.startswith(b"VTF\0")
    assert len(PLACEHOLDER_VTF) == 136
    assert base64.b64decode(base64.b64encode(PLACEHOLDER_VTF)) == PLACEHOLDER_VTF
