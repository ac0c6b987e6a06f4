"""Row-major 4x4 matrix used for projection and view transforms.

The matrix product is evaluated the way a SIMD implementation would: the
right operand is transposed so that every output cell is the dot product of
a left row with a right row.

Example:
    >>> from termray.core.matrix import Matrix4
    >>> from termray.core.vector import Vector4
    >>> m = Matrix4.from_diagonal((2.0, 2.0, 2.0, 1.0))
    >>> m @ Vector4(1.0, 2.0, 3.0, 1.0)
    Vector4(2.0, 4.0, 6.0, 1.0)
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from termray.core.vector import Vector4


class Matrix4:
    """Immutable 4x4 matrix stored as four Vector4 rows."""

    __slots__ = ("_rows",)

    IDENTITY: Matrix4

    def __init__(self, x: Vector4, y: Vector4, z: Vector4, w: Vector4) -> None:
        object.__setattr__(self, "_rows", (x, y, z, w))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Matrix4 is immutable")

    @classmethod
    def from_rows(cls, x: Vector4, y: Vector4, z: Vector4, w: Vector4) -> Matrix4:
        """Build a matrix from its four rows."""
        return cls(x, y, z, w)

    @classmethod
    def from_array(cls, values: Sequence[Sequence[float]]) -> Matrix4:
        """Build a matrix from a nested 4x4 sequence (row-major).

        Raises:
            ValueError: If ``values`` is not 4x4.
        """
        array = np.asarray(values, dtype=np.float64)
        if array.shape != (4, 4):
            raise ValueError(f"expected a 4x4 array, got shape {array.shape}")
        return cls(*(Vector4._from_lanes(row) for row in array))

    @classmethod
    def from_diagonal(cls, diagonal: Sequence[float]) -> Matrix4:
        """Build a diagonal matrix."""
        return cls.from_array(np.diag(np.asarray(diagonal, dtype=np.float64)))

    @property
    def rows(self) -> tuple[Vector4, Vector4, Vector4, Vector4]:
        return self._rows

    def row(self, index: int) -> Vector4:
        return self._rows[index]

    def __getitem__(self, index: tuple[int, int]) -> float:
        r, c = index
        return self._rows[r][c]

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return the matrix as a (4, 4) float64 array."""
        return np.stack([row.to_numpy() for row in self._rows])

    def to_list(self) -> list[list[float]]:
        return [list(row.to_tuple()) for row in self._rows]

    def transpose(self) -> Matrix4:
        """Swap rows and columns."""
        return Matrix4.from_array(self.to_numpy().T)

    def __add__(self, other: Matrix4) -> Matrix4:
        return Matrix4(*(a + b for a, b in zip(self._rows, other._rows)))

    def __sub__(self, other: Matrix4) -> Matrix4:
        return Matrix4(*(a - b for a, b in zip(self._rows, other._rows)))

    def __mul__(self, scalar: float) -> Matrix4:
        if isinstance(scalar, (Matrix4, Vector4)):
            raise TypeError("use the @ operator for matrix products")
        return Matrix4(*(row * scalar for row in self._rows))

    def __rmul__(self, scalar: float) -> Matrix4:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Matrix4:
        return Matrix4(*(row / scalar for row in self._rows))

    def __matmul__(self, other):
        if isinstance(other, Vector4):
            return Vector4(*(row.dot(other) for row in self._rows))
        if isinstance(other, Matrix4):
            columns = other.transpose().rows
            return Matrix4(
                *(Vector4(*(row.dot(col) for col in columns)) for row in self._rows)
            )
        return NotImplemented

    def isclose(self, other: Matrix4, tolerance: float = 1e-6) -> bool:
        return all(a.isclose(b, tolerance) for a, b in zip(self._rows, other._rows))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"Matrix4({self.to_list()!r})"


Matrix4.IDENTITY = Matrix4.from_diagonal((1.0, 1.0, 1.0, 1.0))
