from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

CONFIG_DIR = Path.home() / ".botpath"
CONFIG_FILE = CONFIG_DIR / "botpath.cfg"
DEFAULT_CONFIG = {
    "_comment": "Defaults for botpath. Angles are in degrees, lengths in map units.",
    "color": "#ffffff",
    "radius": 4.0,
    "sides": 6,
    "prisms_per_chunk": None,
    "prune_tolerance_deg": 0.5,
    "grid_size": 64.0,
    "samples_per_segment": 16,
    "model_name": "bp-gen/botpath",
    "material_dir": "bp-gen",
    "texture_name": "botpath",
    "base_name": "botpath",
}


@dataclass(frozen=True)
class TubeSettings:
    """Cross-section and chunking parameters for tube generation."""

    radius: float = 4.0
    sides: int = 6
    prune_tolerance_deg: float = 0.5
    prisms_per_chunk: int | None = None
    grid_size: float = 64.0

    @property
    def prune_tolerance(self) -> float:
        return math.radians(self.prune_tolerance_deg)


@dataclass(frozen=True)
class SplineSettings:
    """Sampling density for authored splines."""

    samples_per_segment: int = 16


@dataclass(frozen=True)
class OutputSettings:
    """Names used when emitting model and material files."""

    model_name: str = "bp-gen/botpath"
    material_dir: str = "bp-gen"
    texture_name: str = "botpath"
    base_name: str = "botpath"
    color: str = "#ffffff"

    @property
    def texture_ref(self) -> str:
        return f"{self.material_dir}/{self.texture_name}"

    @property
    def material_prefix(self) -> str:
        return self.texture_name


@dataclass(frozen=True)
class UserSettings:
    tube: TubeSettings
    spline: SplineSettings
    output: OutputSettings


def ensure_user_config() -> None:
    """Ensure ~/.botpath/botpath.cfg exists with sane defaults."""

    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        return

    if CONFIG_FILE.exists():
        return

    try:
        CONFIG_FILE.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n")
    except OSError:
        return


def _load_user_config() -> Dict[str, Any]:
    ensure_user_config()
    try:
        data = json.loads(CONFIG_FILE.read_text())
    except (OSError, json.JSONDecodeError):
        return DEFAULT_CONFIG.copy()
    if not isinstance(data, dict):
        return DEFAULT_CONFIG.copy()
    return data


def _number(raw: Dict[str, Any], key: str, minimum: float, inclusive: bool = True) -> float:
    value = raw.get(key, DEFAULT_CONFIG[key])
    try:
        value = float(value)
    except (TypeError, ValueError):
        return float(DEFAULT_CONFIG[key])
    if not math.isfinite(value) or value < minimum or (not inclusive and value == minimum):
        return float(DEFAULT_CONFIG[key])
    return value


def _integer(raw: Dict[str, Any], key: str, minimum: int) -> int | None:
    value = raw.get(key, DEFAULT_CONFIG[key])
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        return DEFAULT_CONFIG[key]
    if value < minimum:
        return DEFAULT_CONFIG[key]
    return int(value)


def _text(raw: Dict[str, Any], key: str) -> str:
    value = raw.get(key, DEFAULT_CONFIG[key])
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_CONFIG[key]
    return value.strip()


def get_user_settings() -> UserSettings:
    """Return settings from botpath.cfg, falling back per key to defaults."""

    raw = _load_user_config()
    tolerance = _number(raw, "prune_tolerance_deg", 0.0)
    if tolerance >= 180.0:
        tolerance = float(DEFAULT_CONFIG["prune_tolerance_deg"])
    tube = TubeSettings(
        radius=_number(raw, "radius", 0.0, inclusive=False),
        sides=_integer(raw, "sides", 2) or DEFAULT_CONFIG["sides"],
        prune_tolerance_deg=tolerance,
        prisms_per_chunk=_integer(raw, "prisms_per_chunk", 1),
        grid_size=_number(raw, "grid_size", 0.0, inclusive=False),
    )
    spline = SplineSettings(
        samples_per_segment=_integer(raw, "samples_per_segment", 1) or DEFAULT_CONFIG["samples_per_segment"],
    )
    output = OutputSettings(
        model_name=_text(raw, "model_name"),
        material_dir=_text(raw, "material_dir"),
        texture_name=_text(raw, "texture_name"),
        base_name=_text(raw, "base_name"),
        color=_text(raw, "color"),
    )
    return UserSettings(tube=tube, spline=spline, output=output)
