from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from botpath.mesh import ModelChunk, Triangle

SMD_HEADER = """version 1
nodes
0 "static_prop" -1
end
skeleton
time 0
0 0.000000 0.000000 0.000000 0.000000 0.000000 0.000000
end
triangles
"""
SMD_FOOTER = "end\n"


def _fmt(value: float) -> str:
    text = f"{float(value):.6f}"
    return "0.000000" if text == "-0.000000" else text


def _vertex_line(point: Sequence[float]) -> str:
    x, y, z = point
    return f"0 {_fmt(x)} {_fmt(y)} {_fmt(z)} 0.0 0.0 0.0 0.0 0.0"


def format_smd(triangles: Iterable[Triangle]) -> str:
    """Reference mesh with a single static bone; normals and UVs are zero."""

    parts = [SMD_HEADER]
    for tri in triangles:
        parts.append(f"{tri.material}.vmt\n")
        for corner in tri.corners:
            parts.append(_vertex_line(corner) + "\n")
    parts.append(SMD_FOOTER)
    return "".join(parts)


@dataclass(frozen=True)
class CompileOptions:
    model_name: str
    body: str
    material_dir: str = "bp-gen"
    scale: float = 1.0
    surface_prop: str = "default"
    origin: tuple[float, float, float] | None = None


def origin_directive(origin: Sequence[float]) -> str:
    """``$origin`` for a model whose local origin should sit at ``origin``.

    The compiler reads the offset in its own axis order, so x and y swap
    and the translation is reversed.
    """

    x, y, z = origin
    return f"$origin {_fmt(y)} {_fmt(-x)} {_fmt(-z)}"


def format_qc(options: CompileOptions) -> str:
    lines = [
        "$staticprop",
        f'$modelname "{options.model_name}"',
    ]
    if options.origin is not None:
        lines.append(origin_directive(options.origin))
    lines.extend(
        [
            f'$scale "{options.scale:.6f}"',
            f'$body "Body" "{options.body}"',
            f'$cdmaterials "{options.material_dir}"',
            f'$sequence idle "{options.body}"',
            f'$surfaceprop "{options.surface_prop}"',
            "$opaque",
        ]
    )
    return "\n".join(lines) + "\n"


def chunk_stem(base_name: str, index: int) -> str:
    return f"{base_name}_sec{index + 1}"


def chunk_model_name(model_name: str, index: int, total: int) -> str:
    if total <= 1:
        return model_name
    return f"{model_name}_sec{index + 1}"


def emit_chunks(
    chunks: Sequence[ModelChunk],
    model_name: str,
    base_name: str,
    material_dir: str,
    scale: float = 1.0,
) -> list[tuple[str, str, str]]:
    """Return ``(stem, smd_text, qc_text)`` for each chunk.

    ``$origin`` is only written when the tube was split into several chunks.
    """

    total = len(chunks)
    documents = []
    for index, chunk in enumerate(chunks):
        stem = chunk_stem(base_name, index)
        options = CompileOptions(
            model_name=chunk_model_name(model_name, index, total),
            body=stem,
            material_dir=material_dir,
            scale=scale,
            origin=chunk.origin if total > 1 else None,
        )
        documents.append((stem, format_smd(chunk.triangles), format_qc(options)))
    return documents


__all__ = [
    "CompileOptions",
    "chunk_model_name",
    "chunk_stem",
    "emit_chunks",
    "format_qc",
    "format_smd",
    "origin_directive",
]
