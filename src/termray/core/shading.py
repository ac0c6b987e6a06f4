"""Host-side Whitted shading loop.

This module traces a single ray through a Scene in Python, using only the
object and light capability interfaces, so it works for any primitive or
light type. The Taichi kernel in ``termray.core.integrator`` implements the
same loop for device-ready scenes.

For each bounce:
    1. find the nearest hit; on a miss stop
    2. ``radiance += throughput * color * incident`` (per channel)
    3. ``throughput *= reflectiveness`` (per channel)
    4. mirror the ray about the surface normal unless this is the last bounce

A miss on the primary ray yields None so the caller can keep its
background.

Example:
    >>> from termray.core.ray import Ray
    >>> from termray.core.shading import trace
    >>> from termray.core.vector import Vector3
    >>> from termray.scene.presets import create_demo_scene
    >>> scene = create_demo_scene()
    >>> trace(scene, Ray.toward(Vector3.zero(), Vector3(1.0, 0.0, 0.0)), 1) is None
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from termray.core.ray import Ray
from termray.core.vector import Vector3

if TYPE_CHECKING:
    from termray.scene.scene import Scene

# Default number of bounces (1 = primary hit only)
DEFAULT_MAX_DEPTH = 4


def check_max_depth(max_depth: int) -> None:
    """Raise ValueError unless ``max_depth`` is at least 1."""
    if max_depth < 1:
        raise ValueError(f"max_depth = {max_depth} must be at least 1")


def trace(scene: Scene, ray: Ray, max_depth: int = DEFAULT_MAX_DEPTH) -> Optional[Vector3]:
    """Trace a ray through the scene with up to ``max_depth`` bounces.

    Args:
        scene: The scene to trace against.
        ray: The primary ray.
        max_depth: Maximum number of surface interactions (>= 1).

    Returns:
        The accumulated colour, or None if the primary ray hits nothing.

    Raises:
        ValueError: If ``max_depth`` is less than 1.
    """
    check_max_depth(max_depth)

    radiance = Vector3.zero()
    throughput = Vector3.splat(1.0)

    for depth in range(max_depth):
        nearest = scene.nearest_hit(ray)
        if nearest is None:
            if depth == 0:
                return None
            break

        element, hit = nearest
        material = element.material
        incident = scene.incident_light(hit.position)
        radiance = radiance + throughput.wide_mul(material.color).wide_mul(incident)
        throughput = throughput.wide_mul(material.reflectiveness)

        if depth < max_depth - 1:
            reflected = ray.reflect(hit.position, element.object.normal(hit.position))
            if reflected is None:
                break
            ray = reflected

    return radiance
