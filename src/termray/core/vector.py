"""Fixed-width vector value types for host-side scene maths.

This module provides immutable 2, 3 and 4 lane vectors backed by NumPy
arrays, plus the UnitVector3 refinement used for ray directions and surface
normals. They are the host-side counterpart of ``taichi.math.vec3``: scenes
are built and queried with these types, then packed into Taichi fields for
the frame kernel.

Products are spelled out so that no operator is ambiguous:
    - ``v * s`` / ``s * v``: scale by a scalar
    - ``a.wide_mul(b)`` / ``a.wide_div(b)``: per-lane product / quotient
    - ``a.dot(b)`` or ``a @ b``: algebraic dot product (a scalar)
    - ``a.cross(b)``: cross product (Vector3 only)

Multiplying two vectors with ``*`` raises TypeError.

Example:
    >>> from termray.core.vector import Vector3, UnitVector3
    >>> a = Vector3(1.0, 0.0, 0.0)
    >>> b = Vector3(0.0, 1.0, 0.0)
    >>> a.cross(b)
    Vector3(0.0, 0.0, 1.0)
    >>> UnitVector3.from_vector(Vector3(2.0, 0.0, 0.0)) is None
    True
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Optional

import numpy as np
import numpy.typing as npt

# Unit-length tolerance: float32 machine epsilon, matching the ti.f32 kernel
EPSILON = float(np.finfo(np.float32).eps)

# Lane permutation (x, y, z) -> (z, x, y)
_ZXY = [2, 0, 1]


class _Vector:
    """Shared implementation of the fixed-width vector types.

    Subclasses set ``LANES``. Instances are immutable; every operation
    returns a new vector.
    """

    __slots__ = ("_lanes",)

    LANES = 0

    def __init__(self, *components: float) -> None:
        if len(components) != self.LANES:
            raise TypeError(
                f"{type(self).__name__} takes {self.LANES} components, got {len(components)}"
            )
        lanes = np.array(components, dtype=np.float64)
        lanes.setflags(write=False)
        object.__setattr__(self, "_lanes", lanes)

    @classmethod
    def _from_lanes(cls, lanes: npt.NDArray[np.float64]):
        instance = object.__new__(cls)
        lanes = np.array(lanes, dtype=np.float64)
        lanes.setflags(write=False)
        object.__setattr__(instance, "_lanes", lanes)
        return instance

    def _wrap(self, lanes: npt.NDArray[np.float64]):
        """Build the plain vector type for an arithmetic result."""
        return type(self)._from_lanes(lanes)

    @classmethod
    def splat(cls, value: float):
        """Create a vector with every lane set to ``value``."""
        return cls._from_lanes(np.full(cls.LANES, value, dtype=np.float64))

    @classmethod
    def zero(cls):
        """Create the zero vector."""
        return cls.splat(0.0)

    @classmethod
    def from_iterable(cls, values: Iterable[float]):
        """Create a vector from any iterable of ``LANES`` numbers.

        Raises:
            TypeError: If the iterable has the wrong number of elements.
        """
        return cls(*(float(v) for v in values))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # -------------------------------------------------------------------------
    # Sequence protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return self.LANES

    def __iter__(self) -> Iterator[float]:
        return (float(v) for v in self._lanes)

    def __getitem__(self, index: int) -> float:
        return float(self._lanes[index])

    def to_tuple(self) -> tuple[float, ...]:
        """Return the lanes as a tuple of Python floats."""
        return tuple(float(v) for v in self._lanes)

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a writable copy of the lanes."""
        return self._lanes.copy()

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _check_same(self, other: object) -> None:
        if not isinstance(other, _Vector) or other.LANES != self.LANES:
            raise TypeError(
                f"expected a {self.LANES}-lane vector, got {type(other).__name__}"
            )

    def __add__(self, other: _Vector):
        self._check_same(other)
        return self._wrap(self._lanes + other._lanes)

    def __sub__(self, other: _Vector):
        self._check_same(other)
        return self._wrap(self._lanes - other._lanes)

    def __neg__(self):
        return self._wrap(-self._lanes)

    def __mul__(self, scalar: float):
        if isinstance(scalar, _Vector):
            raise TypeError(
                "vector * vector is ambiguous; use dot(), cross() or wide_mul()"
            )
        return self._wrap(self._lanes * float(scalar))

    def __rmul__(self, scalar: float):
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float):
        if isinstance(scalar, _Vector):
            raise TypeError("vector / vector is ambiguous; use wide_div()")
        with np.errstate(divide="ignore", invalid="ignore"):
            return self._wrap(self._lanes / float(scalar))

    def wide_mul(self, other: _Vector):
        """Per-lane product."""
        self._check_same(other)
        return self._wrap(self._lanes * other._lanes)

    def wide_div(self, other: _Vector):
        """Per-lane quotient. Zero lanes in ``other`` give non-finite lanes."""
        self._check_same(other)
        with np.errstate(divide="ignore", invalid="ignore"):
            return self._wrap(self._lanes / other._lanes)

    def reduce_add(self) -> float:
        """Sum of all lanes."""
        return float(np.sum(self._lanes))

    def dot(self, other: _Vector) -> float:
        """Algebraic dot product."""
        self._check_same(other)
        return float(np.dot(self._lanes, other._lanes))

    def __matmul__(self, other: _Vector) -> float:
        return self.dot(other)

    def sq_norm(self) -> float:
        """Squared Euclidean length."""
        return self.dot(self)

    def norm(self) -> float:
        """Euclidean length."""
        return float(np.sqrt(self.sq_norm()))

    def unit(self):
        """Scale to unit length.

        A zero vector produces non-finite lanes; callers guard against it.
        """
        return self / self.norm()

    def distance(self, other: _Vector) -> float:
        """Euclidean distance to ``other``."""
        return (self - other).norm()

    def clamp(self, low: float, high: float):
        """Clamp every lane into ``[low, high]``."""
        return self._wrap(np.clip(self._lanes, low, high))

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def is_finite(self) -> bool:
        """True if every lane is finite."""
        return bool(np.all(np.isfinite(self._lanes)))

    def is_nan(self) -> bool:
        """True if any lane is NaN."""
        return bool(np.any(np.isnan(self._lanes)))

    def isclose(self, other: _Vector, tolerance: float = 1e-6) -> bool:
        """Lane-wise absolute comparison."""
        self._check_same(other)
        return bool(np.allclose(self._lanes, other._lanes, rtol=0.0, atol=tolerance))

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Vector) or other.LANES != self.LANES:
            return NotImplemented
        return bool(np.array_equal(self._lanes, other._lanes))

    def __hash__(self) -> int:
        return hash((self.LANES, self.to_tuple()))

    def __repr__(self) -> str:
        components = ", ".join(repr(v) for v in self.to_tuple())
        return f"{type(self).__name__}({components})"


class Vector2(_Vector):
    """Two-lane vector (x, y)."""

    __slots__ = ()
    LANES = 2

    @property
    def x(self) -> float:
        return float(self._lanes[0])

    @property
    def y(self) -> float:
        return float(self._lanes[1])

    def extend(self, z: float) -> Vector3:
        """Append a third lane."""
        return Vector3(self.x, self.y, z)


class Vector3(_Vector):
    """Three-lane vector (x, y, z).

    Only three lanes are stored. Conversions to and from four lanes happen
    through ``extend`` and ``Vector4.xyz``, so a padding lane never takes
    part in arithmetic.
    """

    __slots__ = ()
    LANES = 3

    @classmethod
    def from_vector2(cls, xy: Vector2, z: float) -> Vector3:
        """Build (xy.x, xy.y, z)."""
        return cls(xy.x, xy.y, z)

    @property
    def x(self) -> float:
        return float(self._lanes[0])

    @property
    def y(self) -> float:
        return float(self._lanes[1])

    @property
    def z(self) -> float:
        return float(self._lanes[2])

    @property
    def zxy(self) -> Vector3:
        """Lane swizzle (z, x, y)."""
        return Vector3._from_lanes(self._lanes[_ZXY])

    def cross(self, other: Vector3) -> Vector3:
        """Right-handed cross product ``self x other``.

        Uses the swizzle identity ``(a.zxy * b - a * b.zxy).zxy``.
        """
        self._check_same(other)
        a = self._lanes
        b = other._lanes
        return Vector3._from_lanes((a[_ZXY] * b - a * b[_ZXY])[_ZXY])

    def extend(self, w: float = 0.0) -> Vector4:
        """Append a fourth lane (0 for directions, 1 for points)."""
        return Vector4(self.x, self.y, self.z, w)


class UnitVector3(Vector3):
    """A Vector3 known to have unit length.

    Build with ``from_vector`` (checked), ``new_unchecked`` (asserted) or
    ``normalize``. Direct construction raises TypeError.
    """

    __slots__ = ()

    def __init__(self, *components: float) -> None:
        raise TypeError(
            "UnitVector3 cannot be built directly; "
            "use from_vector(), new_unchecked() or normalize()"
        )

    @staticmethod
    def _is_unit(vector: _Vector) -> bool:
        return abs(vector.sq_norm() - 1.0) <= EPSILON

    @classmethod
    def from_vector(cls, vector: Vector3) -> Optional[UnitVector3]:
        """Return ``vector`` as a UnitVector3, or None if it is not unit length."""
        if not isinstance(vector, Vector3) or not cls._is_unit(vector):
            return None
        return cls._from_lanes(vector._lanes)

    @classmethod
    def new_unchecked(cls, vector: Vector3) -> UnitVector3:
        """Wrap ``vector`` without a runtime check.

        The caller guarantees unit length; it is only asserted.
        """
        assert cls._is_unit(vector), f"{vector!r} is not a unit vector"
        return cls._from_lanes(vector._lanes)

    @classmethod
    def normalize(cls, vector: Vector3) -> UnitVector3:
        """Scale ``vector`` to unit length.

        A zero-length input yields NaN lanes, which callers must guard.
        """
        return cls._from_lanes(vector.unit()._lanes)

    def _wrap(self, lanes: npt.NDArray[np.float64]) -> Vector3:
        return Vector3._from_lanes(lanes)

    def __neg__(self) -> UnitVector3:
        return UnitVector3._from_lanes(-self._lanes)


class Vector4(_Vector):
    """Four-lane vector (x, y, z, w)."""

    __slots__ = ()
    LANES = 4

    @property
    def x(self) -> float:
        return float(self._lanes[0])

    @property
    def y(self) -> float:
        return float(self._lanes[1])

    @property
    def z(self) -> float:
        return float(self._lanes[2])

    @property
    def w(self) -> float:
        return float(self._lanes[3])

    @property
    def xyz(self) -> Vector3:
        """Drop the fourth lane."""
        return Vector3._from_lanes(self._lanes[:3])
