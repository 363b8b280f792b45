from __future__ import annotations

import os
from pathlib import Path

import pytest

import botpath._config as config

PROJECT_ROOT = Path(__file__).resolve().parents[1]

SAMPLE_LOG = """\
] getpos
setpos 100.0 200.0 64.0;setang 0.0 90.0 0.0
setpos 100.0 260.0 64.0;setang 0.0 90.0 0.0
this line is not a position
setpos 100.0 320.0 64.0;setang 0.0 90.0 0.0
setang 0.0 45.0 0.0
setpos 160.0 320.0 64.0;
setpos 160.0 320.0 128.0;setang 0.0 0.0 0.0
"""


def pytest_configure():
    os.environ.setdefault("PYVISTA_OFF_SCREEN", "true")
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(autouse=True)
def user_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real ~/.botpath."""

    config_dir = tmp_path / "home" / ".botpath"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_FILE", config_dir / "botpath.cfg")
    return config_dir


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def sample_log() -> str:
    return SAMPLE_LOG


@pytest.fixture
def sample_log_path(tmp_path: Path) -> Path:
    path = tmp_path / "console.log"
    path.write_text(SAMPLE_LOG)
    return path
