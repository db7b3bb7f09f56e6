"""Complex numbers and quaternions."""

from __future__ import annotations

from dataclasses import dataclass


def _fmt(value: float) -> str:
    return format(value, "g")


@dataclass
class Complex:
    """A complex number ``x + y i``."""

    x: float = 0.0
    y: float = 0.0

    def __str__(self) -> str:
        if self.y > 0:
            return f"{_fmt(self.x)} + {_fmt(self.y)}i"
        if self.y < 0:
            return f"{_fmt(self.x)} - {_fmt(-self.y)}i"
        return _fmt(self.x)


@dataclass
class Quaternion:
    """A quaternion ``x i + y j + z k + w``."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def __str__(self) -> str:
        return (
            f"{{ {_fmt(self.x)}i, {_fmt(self.y)}j, "
            f"{_fmt(self.z)}k, {_fmt(self.w)} }}"
        )