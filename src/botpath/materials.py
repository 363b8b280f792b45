"""Unlit colour materials and the placeholder texture they share."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Iterable, Sequence

from botpath.modeling._color import Color, parse_color
from botpath.validation import InvalidParameterError

# Tiny solid white VTF; every material tints it with $color2.
PLACEHOLDER_VTF = base64.b64decode(
    "VlRGAAcAAAACAAAAUAAAAAQABAABAwAAAQAAAAAAAAAAAIA/AACAPwAAgD8AAAAAAACAPwMAAAAB"
    "DQAAAAQEAQAAAAAAAAAAAAAAAAAAAAD//wAAAAAAAP//////////////////////////////////"
    "/////////////////////////////w=="
)


@dataclass(frozen=True)
class Material:
    """An unlit material tinting the shared placeholder texture."""

    name: str
    color: Color
    texture: str

    @property
    def file_name(self) -> str:
        return f"{self.name}.vmt"

    @property
    def tint(self) -> tuple[float, float, float]:
        return self.color.quantized().rgb

    def to_vmt(self, translucent: bool = False) -> str:
        r, g, b = self.tint
        lines = [
            '"UnlitGeneric"',
            "{",
            f'    "$basetexture" "{self.texture}"',
            '    "$model" "1"',
            f'    "$color2" "[{r!r} {g!r} {b!r}]"',
        ]
        if translucent:
            lines.append('    "$translucent" "1"')
        lines.append("}")
        return "\n".join(lines) + "\n"


def material_name(color: Color, prefix: str = "botpath") -> str:
    return f"{prefix}-{color.to_hex()}"


def flat(color: Color | str, texture: str = "bp-gen/botpath", prefix: str = "botpath") -> Material:
    color = parse_color(color).quantized()
    return Material(name=material_name(color, prefix), color=color, texture=texture)


def gradient_colors(start: Color, end: Color, sample_count: int) -> list[Color]:
    if int(sample_count) != sample_count or sample_count < 1:
        raise InvalidParameterError("invalid-samples", "Gradient needs at least one sample.")
    if sample_count == 1:
        return [start]
    last = sample_count - 1
    return [start.lerp(end, i / last) for i in range(sample_count)]


def gradient(
    start: Color | str,
    end: Color | str,
    sample_count: int,
    texture: str = "bp-gen/botpath",
    prefix: str = "botpath",
) -> list[Material]:
    """Materials for ``sample_count`` colours blended linearly from start to end."""

    colors = gradient_colors(parse_color(start), parse_color(end), sample_count)
    return [flat(color, texture=texture, prefix=prefix) for color in colors]


def from_colors(colors: Sequence[Color], texture: str = "bp-gen/botpath", prefix: str = "botpath") -> list[Material]:
    return [flat(color, texture=texture, prefix=prefix) for color in colors]


def unique_materials(materials: Iterable[Material]) -> list[Material]:
    """Drop repeats by name, keeping first-seen order."""

    seen: dict[str, Material] = {}
    for material in materials:
        seen.setdefault(material.name, material)
    return list(seen.values())


__all__ = [
    "Material",
    "PLACEHOLDER_VTF",
    "flat",
    "from_colors",
    "gradient",
    "gradient_colors",
    "material_name",
    "unique_materials",
]
