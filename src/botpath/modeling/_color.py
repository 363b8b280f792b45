from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Sequence

from botpath.validation import InvalidParameterError

_HEX_PATTERN = re.compile(r"\A#?([0-9a-fA-F]{6})\Z")


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def channel_to_byte(value: float) -> int:
    """Convert a [0, 1] channel to 0..255, rounding half away from zero."""

    return min(max(_round_half_away(float(value) * 255.0), 0), 255)


@dataclass(frozen=True)
class Color:
    red: float
    green: float
    blue: float

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise InvalidParameterError("invalid-color", f"{name} channel must be finite.")
            object.__setattr__(self, name, value)

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        match = _HEX_PATTERN.match(text.strip()) if isinstance(text, str) else None
        if match is None:
            raise InvalidParameterError("invalid-color", "Color does not match format of #XXXXXX")
        digits = match.group(1)
        return cls(
            int(digits[0:2], 16) / 255.0,
            int(digits[2:4], 16) / 255.0,
            int(digits[4:6], 16) / 255.0,
        )

    @classmethod
    def from_rgb(cls, rgb: Sequence[float]) -> "Color":
        values = [float(c) for c in rgb]
        if len(values) != 3:
            raise InvalidParameterError("invalid-color", "Color must be RGB.")
        return cls(*values)

    @property
    def rgb(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    def to_bytes(self) -> tuple[int, int, int]:
        return (channel_to_byte(self.red), channel_to_byte(self.green), channel_to_byte(self.blue))

    def to_hex(self, hash: bool = False) -> str:
        text = "".join(f"{b:02x}" for b in self.to_bytes())
        return f"#{text}" if hash else text

    def quantized(self) -> "Color":
        """Return the colour exactly as its hex name encodes it."""

        r, g, b = self.to_bytes()
        return Color(r / 255.0, g / 255.0, b / 255.0)

    def lerp(self, other: "Color", t: float) -> "Color":
        if t == 0:
            return self
        if t == 1:
            return other
        return Color(
            self.red * (1 - t) + other.red * t,
            self.green * (1 - t) + other.green * t,
            self.blue * (1 - t) + other.blue * t,
        )

    def __str__(self) -> str:
        return self.to_hex()


def parse_color(value: "Color | str | Sequence[float]") -> Color:
    if isinstance(value, Color):
        return value
    if isinstance(value, str):
        return Color.from_hex(value)
    return Color.from_rgb(value)


__all__ = ["Color", "channel_to_byte", "parse_color"]
