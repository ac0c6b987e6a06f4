"""Rays, hit records and reflection.

This module provides the host-side Ray and HitInfo value types together with
the Taichi functions the frame kernel uses for the same operations. A Ray's
direction is always a UnitVector3; the invariant is checked whenever a Ray
is built.

Example:
    >>> from termray.core.ray import Ray
    >>> from termray.core.vector import Vector3
    >>> ray = Ray.toward(Vector3(0.0, 0.0, -5.0), Vector3(0.0, 0.0, 2.0))
    >>> ray.at(4.0)
    Vector3(0.0, 0.0, -1.0)
"""

from dataclasses import dataclass
from typing import Optional

import taichi as ti
import taichi.math as tm

from termray.core.vector import UnitVector3, Vector3

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@dataclass(frozen=True)
class Ray:
    """A half-line with an origin point and a unit-length direction.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of travel (unit length).

    Raises:
        TypeError: If ``direction`` is not a UnitVector3.
    """

    origin: Vector3
    direction: UnitVector3

    def __post_init__(self) -> None:
        if not isinstance(self.direction, UnitVector3):
            raise TypeError(
                f"Ray direction must be a UnitVector3, got {type(self.direction).__name__}; "
                "use Ray.toward() to normalise"
            )

    @classmethod
    def toward(cls, origin: Vector3, direction: Vector3) -> "Ray":
        """Build a ray, normalising ``direction``."""
        return cls(origin, UnitVector3.normalize(direction))

    def at(self, time: float) -> Vector3:
        """The point ``origin + time * direction``."""
        return self.origin + self.direction * time

    def reflect(self, position: Vector3, normal: UnitVector3) -> "Optional[Ray]":
        """Mirror this ray about ``normal`` and restart it at ``position``.

        Returns:
            The reflected ray, or None if the reflected direction is
            degenerate (zero length or non-finite).
        """
        mirrored = reflect(self.direction, normal)
        if not mirrored.is_finite() or mirrored.sq_norm() == 0.0:
            return None
        return Ray(position, UnitVector3.normalize(mirrored))


@dataclass(frozen=True)
class HitInfo:
    """Where a ray first touches a surface.

    Attributes:
        time: Ray parameter at the contact point (never negative).
        position: The contact point, ``origin + time * direction``.
    """

    time: float
    position: Vector3

    @classmethod
    def along(cls, ray: Ray, time: float) -> "HitInfo":
        return cls(time, ray.at(time))


def reflect(direction: Vector3, normal: Vector3) -> Vector3:
    """Mirror ``direction`` about ``normal``: ``d - 2 (d . n) n``."""
    return direction - normal * (2.0 * direction.dot(normal))


# =============================================================================
# Taichi counterparts
# =============================================================================


@ti.func
def ray_at(origin: vec3, direction: vec3, t: ti.f32) -> vec3:
    """Compute the point along a ray at parameter t.

    Args:
        origin: The ray origin.
        direction: The ray direction.
        t: The parameter value.

    Returns:
        The point origin + t * direction.
    """
    return origin + t * direction


@ti.func
def reflect_direction(direction: vec3, normal: vec3) -> vec3:
    """Reflect a direction about a unit normal and renormalise.

    Args:
        direction: The incoming direction.
        normal: The surface normal (unit length).

    Returns:
        The normalised mirrored direction.
    """
    return tm.normalize(direction - 2.0 * tm.dot(direction, normal) * normal)
