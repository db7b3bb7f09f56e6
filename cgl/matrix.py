"""Dense 3x3 and 4x4 matrices stored as columns of vectors."""

from __future__ import annotations

import math
from itertools import product
from numbers import Real
from typing import ClassVar, Iterable, Iterator, Sequence, TypeVar

from cgl.vectors import Vector3D, Vector4D

_M = TypeVar("_M", bound="_SquareMatrix")


def _fmt(value: float) -> str:
    return format(value, "g")


def _det3(
    a00: float, a01: float, a02: float,
    a10: float, a11: float, a12: float,
    a20: float, a21: float, a22: float,
) -> float:
    return (
        -a02 * a11 * a20 + a01 * a12 * a20
        + a02 * a10 * a21 - a00 * a12 * a21
        - a01 * a10 * a22 + a00 * a11 * a22
    )


def _identity_rows(n: int) -> list[list[float]]:
    return [[1.0 if i == j else 0.0 for j in range(n)] for i in range(n)]


class _SquareMatrix:
    """Shared behaviour of square matrices; entry ``(i, j)`` is row i, column j."""

    __slots__ = ("_columns",)

    _SIZE: ClassVar[int]
    _VECTOR: ClassVar[type]

    def __init__(self, rows: Iterable[Iterable[float]] | None = None) -> None:
        n = self._SIZE
        if rows is None:
            self._columns = [self._VECTOR() for _ in range(n)]
            return
        grid = [[float(v) for v in row] for row in rows]
        if len(grid) != n or any(len(row) != n for row in grid):
            raise ValueError(f"expected {n} rows of {n} values")
        self._columns = [self._VECTOR(*(row[j] for row in grid)) for j in range(n)]

    @classmethod
    def _from_columns(cls: type[_M], columns: Iterable) -> _M:
        matrix = cls.__new__(cls)
        matrix._columns = list(columns)
        return matrix

    def _indices(self) -> Iterator[tuple[int, int]]:
        return product(range(self._SIZE), repeat=2)

    def _rows(self) -> list[list[float]]:
        return [[self[i, j] for j in range(self._SIZE)] for i in range(self._SIZE)]

    def __getitem__(self, key):
        if isinstance(key, tuple):
            i, j = key
            return self._columns[j][i]
        return self._columns[key]

    def __setitem__(self, key, value) -> None:
        if isinstance(key, tuple):
            i, j = key
            self._columns[j][i] = float(value)
            return
        if not isinstance(value, self._VECTOR):
            raise TypeError(f"a column must be a {self._VECTOR.__name__}")
        self._columns[key] = self._VECTOR(*value)

    def _column(self, i: int):
        return self._columns[i]

    def _zero(self, val: float) -> None:
        for col in self._columns:
            for k in range(self._SIZE):
                col[k] = val

    def _norm(self) -> float:
        return math.sqrt(sum(col.norm2() for col in self._columns))

    def _transpose(self: _M) -> _M:
        return type(self)([list(col) for col in self._columns])

    def __neg__(self: _M) -> _M:
        return self._from_columns(-col for col in self._columns)

    def __add__(self: _M, other: _M) -> _M:
        if type(other) is not type(self):
            return NotImplemented
        return self._from_columns(a + b for a, b in zip(self._columns, other._columns))

    def __iadd__(self: _M, other: _M) -> _M:
        if type(other) is not type(self):
            return NotImplemented
        for col, other_col in zip(self._columns, other._columns):
            for k in range(self._SIZE):
                col[k] += other_col[k]
        return self

    def __sub__(self: _M, other: _M) -> _M:
        if type(other) is not type(self):
            return NotImplemented
        return self._from_columns(a - b for a, b in zip(self._columns, other._columns))

    def _product(self, other):
        if type(other) is type(self):
            n = self._SIZE
            return type(self)(
                [
                    [sum(self[i, k] * other[k, j] for k in range(n)) for j in range(n)]
                    for i in range(n)
                ]
            )
        if isinstance(other, self._VECTOR):
            total = self._VECTOR()
            for weight, col in zip(other, self._columns):
                total = total + weight * col
            return total
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Real):
            return self._from_columns(col * other for col in self._columns)
        return self._product(other)

    def __rmul__(self, other):
        if isinstance(other, Real):
            return self._from_columns(other * col for col in self._columns)
        return NotImplemented

    def __matmul__(self, other):
        return self._product(other)

    def __truediv__(self: _M, scalar: float) -> _M:
        if not isinstance(scalar, Real):
            return NotImplemented
        rx = 1.0 / scalar
        return self._from_columns(col * rx for col in self._columns)

    def __itruediv__(self: _M, scalar: float) -> _M:
        if not isinstance(scalar, Real):
            return NotImplemented
        rx = 1.0 / scalar
        for col in self._columns:
            for k in range(self._SIZE):
                col[k] *= rx
        return self

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._columns == other._columns

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._rows()!r})"

    def __str__(self) -> str:
        return "".join(
            "[ " + "".join(_fmt(v) + " " for v in row) + "]\n" for row in self._rows()
        )


class Matrix3x3(_SquareMatrix):
    """A 3x3 matrix of floats."""

    __slots__ = ()
    _SIZE = 3
    _VECTOR = Vector3D

    def zero(self, val: float = 0.0) -> None:
        """Set every entry to ``val``."""
        self._zero(val)

    def det(self) -> float:
        """Determinant."""
        return _det3(*(v for row in self._rows() for v in row))

    def norm(self) -> float:
        """Frobenius norm."""
        return self._norm()

    def transpose(self) -> Matrix3x3:
        """The transposed matrix."""
        return self._transpose()

    def inv(self) -> Matrix3x3:
        """Inverse; raises ZeroDivisionError for a singular matrix."""
        A = self
        B = Matrix3x3(
            [
                [
                    -A[1, 2] * A[2, 1] + A[1, 1] * A[2, 2],
                    A[0, 2] * A[2, 1] - A[0, 1] * A[2, 2],
                    -A[0, 2] * A[1, 1] + A[0, 1] * A[1, 2],
                ],
                [
                    A[1, 2] * A[2, 0] - A[1, 0] * A[2, 2],
                    -A[0, 2] * A[2, 0] + A[0, 0] * A[2, 2],
                    A[0, 2] * A[1, 0] - A[0, 0] * A[1, 2],
                ],
                [
                    -A[1, 1] * A[2, 0] + A[1, 0] * A[2, 1],
                    A[0, 1] * A[2, 0] - A[0, 0] * A[2, 1],
                    -A[0, 1] * A[1, 0] + A[0, 0] * A[1, 1],
                ],
            ]
        )
        B /= self.det()
        return B

    @staticmethod
    def identity() -> Matrix3x3:
        """The identity matrix."""
        return Matrix3x3(_identity_rows(3))

    @staticmethod
    def cross_product(u: Vector3D) -> Matrix3x3:
        """Matrix that maps v to the cross product of u and v."""
        return Matrix3x3(
            [
                [0.0, -u.z, u.y],
                [u.z, 0.0, -u.x],
                [-u.y, u.x, 0.0],
            ]
        )

    def column(self, i: int) -> Vector3D:
        """The i-th column; changing it changes the matrix."""
        return self._column(i)


class Matrix4x4(_SquareMatrix):
    """A 4x4 matrix of floats."""

    __slots__ = ()
    _SIZE = 4
    _VECTOR = Vector4D

    def _minor(self, row: int, col: int) -> float:
        rows = self._rows()
        values = [
            rows[i][j]
            for i in range(4)
            if i != row
            for j in range(4)
            if j != col
        ]
        return _det3(*values)

    def zero(self, val: float = 0.0) -> None:
        """Set every entry to ``val``."""
        self._zero(val)

    def det(self) -> float:
        """Determinant."""
        return sum(
            (-1) ** j * self[0, j] * self._minor(0, j) for j in range(4)
        )

    def norm(self) -> float:
        """Frobenius norm."""
        return self._norm()

    def transpose(self) -> Matrix4x4:
        """The transposed matrix."""
        return self._transpose()

    def inv(self) -> Matrix4x4:
        """Inverse; raises ZeroDivisionError for a singular matrix."""
        B = Matrix4x4(
            [
                [(-1) ** (i + j) * self._minor(j, i) for j in range(4)]
                for i in range(4)
            ]
        )
        B /= self.det()
        return B

    @staticmethod
    def identity() -> Matrix4x4:
        """The identity matrix."""
        return Matrix4x4(_identity_rows(4))

    def column(self, i: int) -> Vector4D:
        """The i-th column; changing it changes the matrix."""
        return self._column(i)


def outer(u: Sequence[float], v: Sequence[float]):
    """Outer product of two 3D or two 4D vectors."""
    if isinstance(u, Vector3D) and isinstance(v, Vector3D):
        cls = Matrix3x3
    elif isinstance(u, Vector4D) and isinstance(v, Vector4D):
        cls = Matrix4x4
    else:
        raise TypeError("outer requires two 3D or two 4D vectors")
    return cls([[a * b for b in v] for a in u])