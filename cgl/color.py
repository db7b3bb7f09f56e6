"""RGB colors and spectra with components in the range [0, 1]."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

_HEX_NUMBER = re.compile(r"\s*(?:0[xX])?([0-9a-fA-F]+)")


def _fmt(value: float) -> str:
    return format(value, "g")


@dataclass
class Color:
    """An RGB color with floating-point channels."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    WHITE: ClassVar[Color]
    BLACK: ClassVar[Color]

    @classmethod
    def from_bytes(cls, data: bytes) -> Color:
        """Build a color from the first three bytes of ``data``."""
        if len(data) < 3:
            raise ValueError("at least three bytes are required")
        inv = 1.0 / 255.0
        return cls(data[0] * inv, data[1] * inv, data[2] * inv)

    @classmethod
    def from_hex(cls, text: str) -> Color:
        """Parse a hexadecimal color such as ``#ff8000``; the hash is optional."""
        if text.startswith("#"):
            text = text[1:]
        match = _HEX_NUMBER.match(text)
        if match is None:
            raise ValueError(f"not a hexadecimal color: {text!r}")
        rgb = int(match.group(1), 16)
        if rgb > 0xFFFFFFFF:
            raise ValueError(f"hexadecimal color out of range: {text!r}")
        return cls(
            ((rgb & 0xFF0000) >> 16) / 255.0,
            ((rgb & 0x00FF00) >> 8) / 255.0,
            (rgb & 0x0000FF) / 255.0,
        )

    def to_hex(self) -> str:
        """Hexadecimal form of the clamped channels, without zero padding."""
        channels = (int(max(0.0, min(255.0, 255.0 * c))) for c in (self.r, self.g, self.b))
        return "".join(format(c, "x") for c in channels)

    def __str__(self) -> str:
        return f"(r={_fmt(self.r)} g={_fmt(self.g)} b={_fmt(self.b)})"


Color.WHITE = Color(1.0, 1.0, 1.0)
Color.BLACK = Color(0.0, 0.0, 0.0)


@dataclass
class Spectrum:
    """Radiance in red, green and blue channels."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    def __str__(self) -> str:
        return f"(r={_fmt(self.r)} g={_fmt(self.g)} b={_fmt(self.b)})"