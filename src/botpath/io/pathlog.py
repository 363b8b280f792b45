"""Read ``setpos``/``setang`` console logs into model-space points."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

import numpy as np

_FP = r"[-+]?(?:[0-9]*\.[0-9]+|[0-9]+)"
_FLOAT = re.compile(rf"^{_FP}$")
# getpos occasionally prints "setang a b c" on the line before "setpos x y z;".
_SWAPPED = re.compile(
    rf"^setang ({_FP}) ({_FP}) ({_FP})\nsetpos ({_FP}) ({_FP}) ({_FP});",
    re.MULTILINE,
)


def repair_swapped_lines(log: str) -> str:
    return _SWAPPED.sub(r"setpos \4 \5 \6;setang \1 \2 \3\n", log)


def _command(tokens: list[str], name: str) -> list[float] | None:
    if len(tokens) != 4 or tokens[0] != name:
        return None
    if not all(_FLOAT.match(tok) for tok in tokens[1:]):
        return None
    return [float(tok) for tok in tokens[1:]]


def parse_line(line: str) -> np.ndarray | None:
    """Position from ``setpos x y z[;setang a b c]``; ``None`` when malformed."""

    parts = [part.split() for part in line.split(";")]
    parts = [tokens for tokens in parts if tokens]
    if not parts or len(parts) > 2:
        return None
    position = _command(parts[0], "setpos")
    if position is None:
        return None
    if len(parts) == 2 and _command(parts[1], "setang") is None:
        return None
    return np.asarray(position, dtype=float)


def to_model_space(points: Sequence[Sequence[float]] | np.ndarray, recenter: bool = True) -> np.ndarray:
    """Shift the first point to the origin and turn 90 degrees about z.

    The model compiler's frame is rotated against the editor's, so every
    point ``(x, y, z)`` becomes ``(y, -x, z)``.
    """

    pts = np.asarray(points, dtype=float).reshape(-1, 3).copy()
    if pts.shape[0] == 0:
        return pts
    if recenter:
        pts = pts - pts[0]
    rotated = np.column_stack([pts[:, 1], -pts[:, 0], pts[:, 2]])
    return rotated + 0.0


def parse_log(log: str) -> np.ndarray:
    """Best-effort parse: malformed lines are skipped."""

    log = repair_swapped_lines(log)
    points = [pos for pos in (parse_line(line) for line in log.splitlines()) if pos is not None]
    if not points:
        return np.zeros((0, 3), dtype=float)
    return to_model_space(np.vstack(points))


def format_log(points: Iterable[Sequence[float]]) -> str:
    lines = []
    for x, y, z in points:
        lines.append(f"setpos {float(x):.6f} {float(y):.6f} {float(z):.6f};setang 0 0 0")
    return "\n".join(lines) + ("\n" if lines else "")


__all__ = ["format_log", "parse_line", "parse_log", "repair_swapped_lines", "to_model_space"]
