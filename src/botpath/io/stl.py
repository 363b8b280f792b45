"""Write tube triangles as STL for inspection outside the model compiler."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Iterable

from botpath.mesh import Triangle

_HEADER_SIZE = 80
_FACET = struct.Struct("<12fH")


def _fmt(values) -> str:
    return " ".join(f"{float(v):.6e}" for v in values)


def write_stl(triangles: Iterable[Triangle], path: Path, ascii: bool = False, name: str = "botpath") -> int:
    """Write ``triangles`` to ``path`` and return how many facets were written.

    Facet normals come from each triangle's winding; materials are dropped.
    """

    path = Path(path)
    triangles = list(triangles)

    if ascii:
        lines = [f"solid {name}"]
        for tri in triangles:
            lines.append(f"  facet normal {_fmt(tri.normal())}")
            lines.append("    outer loop")
            lines.extend(f"      vertex {_fmt(corner)}" for corner in tri.corners)
            lines.append("    endloop")
            lines.append("  endfacet")
        lines.append(f"endsolid {name}")
        path.write_text("\n".join(lines) + "\n")
        return len(triangles)

    header = name[:_HEADER_SIZE].encode("ascii", errors="replace").ljust(_HEADER_SIZE, b"\0")
    with path.open("wb") as handle:
        handle.write(header)
        handle.write(struct.pack("<I", len(triangles)))
        for tri in triangles:
            handle.write(_FACET.pack(*tri.normal(), *tri.a, *tri.b, *tri.c, 0))
    return len(triangles)
