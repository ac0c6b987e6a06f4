"""Point light with inverse-square falloff.

The light arriving at a point ``p`` is

    intensity / |p - position|^2 * color

Contributions at or below float32 machine epsilon are treated as no light,
as are non-finite ones (a point coinciding with the light position).

Example:
    >>> from termray.core.vector import Vector3
    >>> from termray.lighting.point import Point
    >>> light = Point(Vector3(0.0, 0.0, 0.0), Vector3(1.0, 1.0, 1.0), 1.0)
    >>> light.hits(Vector3(2.0, 0.0, 0.0))
    Vector3(0.25, 0.25, 0.25)
"""

import math
from typing import Optional

import taichi as ti
import taichi.math as tm

from termray.core.vector import EPSILON, Vector3
from termray.lighting.light import Light, LightKind

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class Point(Light):
    """An omnidirectional light at a position.

    Attributes:
        position: Where the light sits.
        color: The light colour.
        intensity: Scale of the inverse-square falloff.
    """

    device_kind = LightKind.POINT

    def __init__(self, position: Vector3, color: Vector3, intensity: float) -> None:
        self.position = position
        self.color = color
        self.intensity = float(intensity)

    def hits(self, point: Vector3) -> Optional[Vector3]:
        with_falloff = falloff(self.intensity, point.distance(self.position) ** 2)
        if with_falloff is None:
            return None
        return self.color * with_falloff

    def device_params(self) -> tuple[Vector3, Vector3, float]:
        return (self.position, self.color, self.intensity)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return (
            self.position == other.position
            and self.color == other.color
            and self.intensity == other.intensity
        )

    def __hash__(self) -> int:
        return hash((self.position, self.color, self.intensity))

    def __repr__(self) -> str:
        return (
            f"Point(position={self.position!r}, color={self.color!r}, "
            f"intensity={self.intensity!r})"
        )


def falloff(intensity: float, sq_distance: float) -> Optional[float]:
    """Inverse-square intensity, or None if negligible or non-finite."""
    if sq_distance == 0.0:
        return None
    value = intensity / sq_distance
    if not math.isfinite(value) or value <= EPSILON:
        return None
    return value


@ti.func
def point_light_contribution(
    position: vec3, color: vec3, intensity: ti.f32, point: vec3
) -> vec3:
    """Light from a point source arriving at a point, inside a Taichi kernel.

    Args:
        position: Light position.
        color: Light colour.
        intensity: Falloff scale.
        point: The receiving point.

    Returns:
        The incident colour, or zero when the contribution is negligible
        or non-finite.
    """
    offset = point - position
    sq_distance = tm.dot(offset, offset)
    result = vec3(0.0)
    if sq_distance > 0.0:
        value = intensity / sq_distance
        if value > EPSILON and not tm.isinf(value) and not tm.isnan(value):
            result = value * color
    return result
