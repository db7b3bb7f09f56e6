"""Small fixed-size vectors in two, three and four dimensions."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from numbers import Real
from typing import Iterator, TypeVar

_V = TypeVar("_V", bound="_Vector")


def _fmt(value: float) -> str:
    return format(value, "g")


class _Vector:
    """Component-wise arithmetic shared by the concrete vector types."""

    __slots__ = ()

    def __iter__(self) -> Iterator[float]:
        for field in fields(self):
            yield getattr(self, field.name)

    def __len__(self) -> int:
        return len(fields(self))

    def __getitem__(self, index: int) -> float:
        return tuple(self)[index]

    def __setitem__(self, index: int, value: float) -> None:
        setattr(self, fields(self)[index].name, value)

    def __neg__(self: _V) -> _V:
        return type(self)(*(-c for c in self))

    def __add__(self: _V, other: _V) -> _V:
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(*(a + b for a, b in zip(self, other)))

    def __sub__(self: _V, other: _V) -> _V:
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(*(a - b for a, b in zip(self, other)))

    def __mul__(self: _V, scalar: float) -> _V:
        if not isinstance(scalar, Real):
            return NotImplemented
        return type(self)(*(c * scalar for c in self))

    def __rmul__(self: _V, scalar: float) -> _V:
        if not isinstance(scalar, Real):
            return NotImplemented
        return type(self)(*(scalar * c for c in self))

    def __truediv__(self: _V, scalar: float) -> _V:
        if not isinstance(scalar, Real):
            return NotImplemented
        return type(self)(*(c / scalar for c in self))

    def __str__(self) -> str:
        return "(" + ",".join(_fmt(c) for c in self) + ")"

    def norm2(self) -> float:
        """Squared Euclidean length."""
        return sum(c * c for c in self)

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.norm2())


@dataclass(slots=True)
class Vector2D(_Vector):
    """A 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y)

    def norm2(self) -> float:
        """Squared Euclidean length."""
        return self.x * self.x + self.y * self.y

    def unit(self) -> Vector2D:
        """Unit vector parallel to this one."""
        return self / self.norm()


@dataclass(slots=True)
class Vector3D(_Vector):
    """A 3D vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.norm2())

    def norm2(self) -> float:
        """Squared Euclidean length."""
        return self.x * self.x + self.y * self.y + self.z * self.z


@dataclass(slots=True)
class Vector4D(_Vector):
    """A 4D vector; ``w`` defaults to zero."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def __truediv__(self, scalar: float) -> Vector4D:
        if not isinstance(scalar, Real):
            return NotImplemented
        rc = 1.0 / scalar
        return Vector4D(rc * self.x, rc * self.y, rc * self.z, rc * self.w)

    def norm(self) -> float:
        """Euclidean length in four dimensions."""
        return math.sqrt(self.norm2())

    def norm2(self) -> float:
        """Squared Euclidean length in four dimensions."""
        return (
            self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w
        )

    def unit(self) -> Vector4D:
        """Normalized copy of x, y and z; the ``w`` component is set to zero."""
        r = 1.0 / self.norm()
        return Vector4D(r * self.x, r * self.y, r * self.z)

    def normalize(self) -> None:
        """Scale this vector in place to unit length."""
        r = 1.0 / self.norm()
        self.x *= r
        self.y *= r
        self.z *= r
        self.w *= r

    def to_3d(self) -> Vector3D:
        """Drop the ``w`` component."""
        return Vector3D(self.x, self.y, self.z)

    def project_to_3d(self) -> Vector3D:
        """Divide x, y and z by ``w``."""
        inv_w = 1.0 / self.w
        return Vector3D(self.x * inv_w, self.y * inv_w, self.z * inv_w)


def dot(u: _Vector, v: _Vector) -> float:
    """Inner product of two vectors of the same type."""
    if type(u) is not type(v) or not isinstance(u, _Vector):
        raise TypeError("dot requires two vectors of the same type")
    return sum(a * b for a, b in zip(u, v))


def cross(u: _Vector, v: _Vector) -> float | Vector3D:
    """Cross product: a scalar for 2D vectors, a vector for 3D vectors."""
    if isinstance(u, Vector2D) and isinstance(v, Vector2D):
        return u.x * v.y - u.y * v.x
    if isinstance(u, Vector3D) and isinstance(v, Vector3D):
        return Vector3D(
            u.y * v.z - u.z * v.y,
            u.z * v.x - u.x * v.z,
            u.x * v.y - u.y * v.x,
        )
    raise TypeError("cross requires two 2D or two 3D vectors")