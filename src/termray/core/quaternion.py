"""Quaternions, unit quaternions (versors) and Euler angles.

A Quaternion is an unconstrained (r, i, j, k) value with the Hamilton
product. A Versor is a quaternion with unit norm; it is the only type that
rotates vectors, through the sandwich product ``q * (0, v) * q^-1``.

The basis convention is the usual one: ``i*j = k``, ``j*k = i``,
``k*i = j`` and the reversed products are negated.

Example:
    >>> from termray.core.quaternion import EulerAngles, Versor
    >>> from termray.core.vector import Vector3
    >>> quarter_turn = Versor.from_euler(EulerAngles(0.0, 0.0, 90.0))
    >>> quarter_turn.apply(Vector3(1.0, 0.0, 0.0)).isclose(Vector3(0.0, 1.0, 0.0))
    True
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Optional

from termray.core.matrix import Matrix4
from termray.core.vector import EPSILON, Vector3, Vector4


@dataclass(frozen=True)
class EulerAngles:
    """Roll, pitch and yaw in degrees.

    Attributes:
        roll: Rotation about the x axis.
        pitch: Rotation about the y axis.
        yaw: Rotation about the z axis.
    """

    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0

    @classmethod
    def from_vector(cls, angles: Vector3) -> EulerAngles:
        return cls(angles.x, angles.y, angles.z)

    def to_vector(self) -> Vector3:
        return Vector3(self.roll, self.pitch, self.yaw)

    def to_radians(self) -> Vector3:
        """Angles converted to radians, as (roll, pitch, yaw)."""
        return Vector3(*(math.radians(a) for a in (self.roll, self.pitch, self.yaw)))


class Quaternion:
    """Immutable quaternion ``r + i*I + j*J + k*K``."""

    __slots__ = ("_v",)

    def __init__(self, r: float, i: float, j: float, k: float) -> None:
        object.__setattr__(self, "_v", Vector4(r, i, j, k))

    @classmethod
    def _from_vec(cls, v: Vector4):
        instance = object.__new__(cls)
        object.__setattr__(instance, "_v", v)
        return instance

    def _wrap(self, v: Vector4) -> Quaternion:
        return Quaternion._from_vec(v)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_vector(cls, v: Vector4) -> Quaternion:
        """Interpret (x, y, z, w) as (r, i, j, k)."""
        return Quaternion._from_vec(v)

    @classmethod
    def identity(cls) -> Quaternion:
        return Quaternion(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_euler(cls, euler: EulerAngles) -> Quaternion:
        """Quaternion for a roll/pitch/yaw rotation (degrees)."""
        half = euler.to_radians() * 0.5
        cr, cp, cy = (math.cos(a) for a in half)
        sr, sp, sy = (math.sin(a) for a in half)
        return Quaternion(
            cr * cp * cy + sr * sp * sy,
            sr * cp * cy - cr * sp * sy,
            cr * sp * cy + sr * cp * sy,
            cr * cp * sy - sr * sp * cy,
        )

    @property
    def r(self) -> float:
        return self._v.x

    @property
    def i(self) -> float:
        return self._v.y

    @property
    def j(self) -> float:
        return self._v.z

    @property
    def k(self) -> float:
        return self._v.w

    @property
    def imaginary(self) -> Vector3:
        """The vector part (i, j, k)."""
        return Vector3(self.i, self.j, self.k)

    def to_vector(self) -> Vector4:
        return self._v

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.r, self.i, self.j, self.k)

    def sq_norm(self) -> float:
        return self._v.sq_norm()

    def norm(self) -> float:
        return self._v.norm()

    def unit(self) -> Quaternion:
        return Quaternion._from_vec(self._v / self.norm())

    def conjugate(self) -> Quaternion:
        return self._wrap(self._v.wide_mul(Vector4(1.0, -1.0, -1.0, -1.0)))

    def inverse(self) -> Quaternion:
        return Quaternion._from_vec(self.conjugate()._v / self.sq_norm())

    def __add__(self, other: Quaternion) -> Quaternion:
        return Quaternion._from_vec(self._v + other._v)

    def __sub__(self, other: Quaternion) -> Quaternion:
        return Quaternion._from_vec(self._v - other._v)

    def __neg__(self) -> Quaternion:
        return Quaternion._from_vec(-self._v)

    def __mul__(self, other):
        if isinstance(other, Quaternion):
            return Quaternion._from_vec(_hamilton(self._v, other._v))
        if isinstance(other, numbers.Real):
            return Quaternion._from_vec(self._v * other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return Quaternion._from_vec(self._v * other)
        return NotImplemented

    def __truediv__(self, scalar: float) -> Quaternion:
        return Quaternion._from_vec(self._v / scalar)

    def isclose(self, other: Quaternion, tolerance: float = 1e-6) -> bool:
        return self._v.isclose(other._v, tolerance)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self._v == other._v

    def __hash__(self) -> int:
        return hash(self._v)

    def __repr__(self) -> str:
        return f"{self.r} + {self.i}i + {self.j}j + {self.k}k"


def _hamilton(a: Vector4, b: Vector4) -> Vector4:
    a0, a1, a2, a3 = a
    b0, b1, b2, b3 = b
    return Vector4(
        a0 * b0 - a1 * b1 - a2 * b2 - a3 * b3,
        a0 * b1 + a1 * b0 + a2 * b3 - a3 * b2,
        a0 * b2 - a1 * b3 + a2 * b0 + a3 * b1,
        a0 * b3 + a1 * b2 - a2 * b1 + a3 * b0,
    )


class Versor(Quaternion):
    """A quaternion known to have unit norm, i.e. a pure rotation.

    Build with ``new`` (checked), ``new_unchecked`` (asserted),
    ``from_quaternion`` (normalises), ``from_euler`` or ``identity``.
    """

    __slots__ = ()

    def __init__(self, *components: float) -> None:
        raise TypeError(
            "Versor cannot be built directly; use new(), from_quaternion() or from_euler()"
        )

    @classmethod
    def new(cls, q: Quaternion) -> Optional[Versor]:
        """Return ``q`` as a Versor, or None if its norm is not one."""
        if abs(q.sq_norm() - 1.0) > EPSILON:
            return None
        return cls._from_vec(q.to_vector())

    @classmethod
    def new_unchecked(cls, q: Quaternion) -> Versor:
        assert abs(q.sq_norm() - 1.0) <= EPSILON, f"{q!r} is not a unit quaternion"
        return cls._from_vec(q.to_vector())

    @classmethod
    def from_quaternion(cls, q: Quaternion) -> Versor:
        return cls.new_unchecked(q.unit())

    @classmethod
    def from_euler(cls, euler: EulerAngles) -> Versor:
        return cls.new_unchecked(Quaternion.from_euler(euler))

    @classmethod
    def identity(cls) -> Versor:
        return cls._from_vec(Vector4(1.0, 0.0, 0.0, 0.0))

    def conjugate(self) -> Versor:
        return Versor._from_vec(self._v.wide_mul(Vector4(1.0, -1.0, -1.0, -1.0)))

    def inverse(self) -> Versor:
        # The inverse of a unit quaternion is its conjugate.
        return self.conjugate()

    def __mul__(self, other):
        if isinstance(other, Versor):
            return Versor._from_vec(_hamilton(self._v, other._v))
        return super().__mul__(other)

    def __neg__(self) -> Versor:
        return Versor._from_vec(-self._v)

    def apply(self, v: Vector3) -> Vector3:
        """Rotate ``v`` with the sandwich product ``q * (0, v) * q^-1``."""
        p = Quaternion(0.0, v.x, v.y, v.z)
        result = (self * p) * self.inverse()
        assert abs(result.r) <= EPSILON * max(1.0, v.sq_norm()), (
            f"rotation produced a non-pure quaternion: {result!r}"
        )
        return result.imaginary

    def to_matrix(self) -> Matrix4:
        """Homogeneous rotation matrix equivalent to ``apply``."""
        r, i, j, k = self.to_tuple()
        return Matrix4.from_array(
            [
                [1.0 - 2.0 * (j * j + k * k), 2.0 * (i * j - k * r), 2.0 * (i * k + j * r), 0.0],
                [2.0 * (i * j + k * r), 1.0 - 2.0 * (i * i + k * k), 2.0 * (j * k - i * r), 0.0],
                [2.0 * (i * k - j * r), 2.0 * (j * k + i * r), 1.0 - 2.0 * (i * i + j * j), 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )
