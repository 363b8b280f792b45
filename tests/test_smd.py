from __future__ import annotations

from botpath.io.smd import (
    SMD_HEADER,
    CompileOptions,
    chunk_model_name,
    emit_chunks,
    format_qc,
    format_smd,
    origin_directive,
)
from botpath.mesh import Triangle
from botpath.modeling import build_prisms, build_skeleton


def _chunks(prisms_per_chunk=None):
    skeleton = build_skeleton([(0, 0, 0), (100, 0, 0), (200, 0, 0), (300, 0, 0)], radius=4.0, sides=4)
    return build_prisms(skeleton, "botpath-ffffff", prisms_per_chunk=prisms_per_chunk)


def test_smd_header_and_triangle_block():
    tri = Triangle.from_points((1, 2, 3), (-0.0000001, 0, 0), (0.5, -1.25, 10), "botpath-ff0000")
    text = format_smd([tri])
    assert text.startswith(SMD_HEADER)
    lines = text[len(SMD_HEADER):].splitlines()
    assert lines == [
        "botpath-ff0000.vmt",
        "0 1.000000 2.000000 3.000000 0.0 0.0 0.0 0.0 0.0",
        "0 0.000000 0.000000 0.000000 0.0 0.0 0.0 0.0 0.0",
        "0 0.500000 -1.250000 10.000000 0.0 0.0 0.0 0.0 0.0",
        "end",
    ]


def test_smd_header_declares_single_static_bone():
    lines = SMD_HEADER.splitlines()
    assert lines[0] == "version 1"
    assert '0 "static_prop" -1' in lines
    assert lines[-1] == "triangles"


def test_empty_smd_is_header_and_end():
    assert format_smd([]) == SMD_HEADER + "end\n"


def test_qc_without_origin():
    qc = format_qc(CompileOptions(model_name="bp-gen/botpath", body="botpath_sec1"))
    assert qc.splitlines() == [
        "$staticprop",
        '$modelname "bp-gen/botpath"',
        '$scale "1.000000"',
        '$body "Body" "botpath_sec1"',
        '$cdmaterials "bp-gen"',
        '$sequence idle "botpath_sec1"',
        '$surfaceprop "default"',
        "$opaque",
    ]


def test_origin_reorders_and_negates_axes():
    assert origin_directive((64.0, 128.0, -64.0)) == "$origin 128.000000 -64.000000 64.000000"
    assert origin_directive((0.0, 0.0, 0.0)) == "$origin 0.000000 0.000000 0.000000"
    qc = format_qc(CompileOptions(model_name="m", body="b", origin=(64.0, 0.0, 0.0)))
    assert "$origin 0.000000 -64.000000 0.000000" in qc.splitlines()


def test_single_chunk_keeps_model_name():
    documents = emit_chunks(_chunks(), "bp-gen/botpath", "botpath", "bp-gen")
    assert len(documents) == 1
    stem, smd, qc = documents[0]
    assert stem == "botpath_sec1"
    assert '$modelname "bp-gen/botpath"' in qc
    assert "$origin" not in qc
    assert smd.count(".vmt\n") == 2 * 2 + 3 * 2 * 4


def test_multiple_chunks_are_numbered():
    documents = emit_chunks(_chunks(prisms_per_chunk=2), "bp-gen/botpath", "tube", "bp-gen")
    assert [stem for stem, _, _ in documents] == ["tube_sec1", "tube_sec2"]
    assert '$modelname "bp-gen/botpath_sec2"' in documents[1][2]
    assert '$body "Body" "tube_sec2"' in documents[1][2]
    # second chunk starts at x=200, which snaps to 192
    assert "$origin 0.000000 -192.000000 0.000000" in documents[1][2]


def test_chunk_model_name():
    assert chunk_model_name("a/b", 0, 1) == "a/b"
    assert chunk_model_name("a/b", 2, 3) == "a/b_sec3"
