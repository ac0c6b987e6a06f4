"""Sphere primitive with line-sphere intersection.

This module provides the Sphere object and the matching Taichi functions
used by the frame kernel. Both follow the line-sphere derivation:

    d     = origin - center
    alpha = direction . d
    delta = alpha^2 - (d . d - r^2)

A negative (or non-finite) delta means the line misses. Otherwise the
nearest non-negative root of ``-alpha +/- sqrt(delta)`` is the hit time:
the near root when the origin is outside the sphere, the far root when the
origin is inside, and no hit when both roots lie behind the origin.

Example:
    >>> from termray.core.ray import Ray
    >>> from termray.core.vector import Vector3
    >>> from termray.geometry.sphere import Sphere
    >>> sphere = Sphere(Vector3(0.0, 0.0, 0.0), 1.0)
    >>> ray = Ray.toward(Vector3(0.0, 0.0, -5.0), Vector3(0.0, 0.0, 1.0))
    >>> sphere.is_hit_by(ray).time
    4.0
"""

import math
from typing import Optional

import taichi as ti
import taichi.math as tm

from termray.core.ray import HitInfo, Ray
from termray.core.vector import UnitVector3, Vector3
from termray.geometry.object import Object, ObjectKind

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Time reported by hit_sphere when the ray misses
MISS = -1.0


def intersect_time(
    origin: Vector3, direction: Vector3, center: Vector3, radius: float
) -> Optional[float]:
    """Nearest non-negative intersection time of a line with a sphere.

    Args:
        origin: Ray origin.
        direction: Ray direction (unit length).
        center: Sphere center.
        radius: Sphere radius.

    Returns:
        The hit time, or None if the ray misses or the sphere is behind it.
    """
    d = origin - center
    alpha = direction.dot(d)
    delta = alpha * alpha - (d.sq_norm() - radius * radius)

    if not math.isfinite(delta) or delta < 0.0:
        return None

    if delta == 0.0:
        # Tangent: a single contact point
        time = -alpha
        return time if time >= 0.0 else None

    root = math.sqrt(delta)
    if -alpha > root:
        # Origin outside the sphere, take the near root
        return -alpha - root

    # Origin inside (or sphere behind): only the far root can be ahead
    time = -alpha + root
    return time if time >= 0.0 else None


class Sphere(Object):
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).

    Raises:
        ValueError: If ``radius`` is not positive.
    """

    device_kind = ObjectKind.SPHERE

    def __init__(self, center: Vector3, radius: float) -> None:
        if not radius > 0.0:
            raise ValueError(f"Sphere radius = {radius} must be positive")
        self.center = center
        self.radius = float(radius)

    def is_hit_by(self, ray: Ray) -> Optional[HitInfo]:
        time = intersect_time(ray.origin, ray.direction, self.center, self.radius)
        if time is None:
            return None
        return HitInfo.along(ray, time)

    def normal(self, point: Vector3) -> UnitVector3:
        return UnitVector3.normalize(point - self.center)

    def device_params(self) -> tuple[float, float, float, float]:
        return (self.center.x, self.center.y, self.center.z, self.radius)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sphere):
            return NotImplemented
        return self.center == other.center and self.radius == other.radius

    def __hash__(self) -> int:
        return hash((self.center, self.radius))

    def __repr__(self) -> str:
        return f"Sphere(center={self.center!r}, radius={self.radius!r})"


# =============================================================================
# Taichi counterparts
# =============================================================================


@ti.func
def hit_sphere(origin: vec3, direction: vec3, center: vec3, radius: ti.f32) -> ti.f32:
    """Test for ray-sphere intersection inside a Taichi kernel.

    Follows the same root selection as ``intersect_time``.

    Args:
        origin: The starting point of the ray.
        direction: The direction of the ray (unit length).
        center: The sphere center.
        radius: The sphere radius.

    Returns:
        The hit time, or MISS (-1.0) if there is no hit ahead of the origin.
    """
    d = origin - center
    alpha = tm.dot(direction, d)
    delta = alpha * alpha - (tm.dot(d, d) - radius * radius)

    time = MISS
    # NaN fails every comparison below, so it falls through as a miss
    if delta == 0.0:
        if -alpha >= 0.0:
            time = -alpha
    elif delta > 0.0 and not tm.isinf(delta):
        root = ti.sqrt(delta)
        if -alpha > root:
            time = -alpha - root
        else:
            far = -alpha + root
            if far >= 0.0:
                time = far

    return time


@ti.func
def sphere_normal(center: vec3, point: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point.

    Args:
        center: The sphere center.
        point: A point on the sphere surface.

    Returns:
        The normalised vector from center to point.
    """
    return tm.normalize(point - center)
