from __future__ import annotations

import zipfile
from pathlib import Path

from typer.testing import CliRunner

from botpath.cli import app

runner = CliRunner()

SPLINE_SAVE = """\
0 0 0 0 0 100 #ff0000
400 400 0 90 0 100 #0000ff
"""


def test_build_writes_models_and_materials(sample_log_path: Path, tmp_path: Path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["build", str(sample_log_path), "-o", str(out), "-c", "#ff0000"])
    assert result.exit_code == 0, result.output
    assert (out / "botpath_sec1.smd").exists()
    assert (out / "botpath_sec1.qc").exists()
    assert (out / "materials" / "bp-gen" / "botpath.vtf").exists()
    assert (out / "materials" / "bp-gen" / "botpath-ff0000.vmt").exists()


def test_build_chunks_and_names(sample_log_path: Path, tmp_path: Path):
    out = tmp_path / "out"
    result = runner.invoke(
        app,
        ["build", str(sample_log_path), "-o", str(out), "-p", "1", "-n", "tubes/demo", "--base", "demo"],
    )
    assert result.exit_code == 0, result.output
    qcs = sorted(out.glob("demo_sec*.qc"))
    assert [path.name for path in qcs] == ["demo_sec1.qc", "demo_sec2.qc", "demo_sec3.qc"]
    assert '$modelname "tubes/demo_sec2"' in (out / "demo_sec2.qc").read_text()


def test_build_to_zip_and_stl(sample_log_path: Path, tmp_path: Path):
    archive = tmp_path / "tube.zip"
    stl = tmp_path / "tube.stl"
    result = runner.invoke(
        app, ["build", str(sample_log_path), "--zip", str(archive), "--stl", str(stl), "-g", "#000000"]
    )
    assert result.exit_code == 0, result.output
    with zipfile.ZipFile(archive) as handle:
        assert "botpath_sec1.smd" in handle.namelist()
    assert stl.stat().st_size > 84


def test_config_defaults_apply(sample_log_path: Path, tmp_path: Path, user_config_dir: Path):
    user_config_dir.mkdir(parents=True)
    (user_config_dir / "botpath.cfg").write_text('{"base_name": "configured", "sides": 3}')
    out = tmp_path / "out"
    result = runner.invoke(app, ["build", str(sample_log_path), "-o", str(out)])
    assert result.exit_code == 0, result.output
    smd = (out / "configured_sec1.smd").read_text()
    # 4 vertices after pruning, 3 prisms of 3 sides, one-triangle caps
    assert smd.count(".vmt\n") == 2 + 3 * 2 * 3


def test_empty_log_produces_nothing(tmp_path: Path):
    log = tmp_path / "empty.log"
    log.write_text("nothing to see\n")
    out = tmp_path / "out"
    result = runner.invoke(app, ["build", str(log), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "insufficient-vertices" in result.output
    assert not out.exists()


def test_invalid_options_exit_non_zero(sample_log_path: Path, tmp_path: Path):
    for extra in (["-s", "1"], ["-p", "0"], ["-c", "#12"], ["-r", "0"], ["-t", "180"]):
        result = runner.invoke(app, ["build", str(sample_log_path), "-o", str(tmp_path), *extra])
        assert result.exit_code != 0, extra
    assert not (tmp_path / "botpath_sec1.smd").exists()


def test_missing_log_exits_non_zero(tmp_path: Path):
    result = runner.invoke(app, ["build", str(tmp_path / "missing.log")])
    assert result.exit_code != 0


def test_spline_command(tmp_path: Path):
    save = tmp_path / "path.spline"
    save.write_text(SPLINE_SAVE)
    out = tmp_path / "out"
    log_out = tmp_path / "sampled.log"
    result = runner.invoke(app, ["spline", str(save), "-o", str(out), "--samples", "4", "--log", str(log_out)])
    assert result.exit_code == 0, result.output
    assert len(log_out.read_text().splitlines()) == 5
    assert (out / "botpath_sec1.smd").exists()
    assert (out / "materials" / "bp-gen" / "botpath-ff0000.vmt").exists()
    assert (out / "materials" / "bp-gen" / "botpath-0000ff.vmt").exists()


def test_malformed_spline_reports_line(tmp_path: Path):
    save = tmp_path / "bad.spline"
    save.write_text("0 0 0 0 0 1\n0 0 0 400 0 1\n")
    result = runner.invoke(app, ["spline", str(save), "-o", str(tmp_path)])
    assert result.exit_code != 0
    assert not (tmp_path / "botpath_sec1.smd").exists()
