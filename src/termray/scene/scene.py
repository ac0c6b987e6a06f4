"""Scene container and host-side scene queries.

A Scene owns the camera, an insertion-ordered list of elements and a list of
lights. Its two queries drive the host tracer:

    - ``nearest_hit(ray)``: linear scan for the closest element
    - ``incident_light(point)``: sum of every light reaching a point

Example:
    >>> from termray.core.vector import Vector3
    >>> from termray.geometry.sphere import Sphere
    >>> from termray.lighting.ambient import Ambient
    >>> from termray.scene.element import Material
    >>> from termray.scene.scene import Scene
    >>> scene = Scene()
    >>> element = scene.add(Sphere(Vector3(0.0, 0.0, -3.0), 1.0), Material(Vector3(1.0, 0.0, 0.0)))
    >>> scene.add_light(Ambient(Vector3.splat(0.1)))
"""

from __future__ import annotations

from typing import Any, Optional

from termray.camera.perspective import Camera
from termray.core.ray import HitInfo, Ray
from termray.core.vector import Vector3
from termray.geometry.object import Object
from termray.lighting.light import Light
from termray.scene.config import (
    SceneConfig,
    light_from_dict,
    light_to_dict,
    object_from_dict,
    object_to_dict,
)
from termray.scene.element import Element, Material

# =============================================================================
# Intersection Constants
# =============================================================================

# Hits closer than this are ignored so a bounce does not re-hit its surface
SELF_HIT_EPSILON = 1e-4

# Upper bound on hit times
T_MAX = 1e10


class Scene:
    """Camera, elements and lights.

    Attributes:
        camera: The perspective camera.
        elements: Elements in insertion order; earlier ones win exact ties.
        lights: Light sources.
    """

    def __init__(
        self,
        camera: Optional[Camera] = None,
        elements: Optional[list[Element]] = None,
        lights: Optional[list[Light]] = None,
    ) -> None:
        self.camera = camera if camera is not None else Camera()
        self.elements: list[Element] = list(elements) if elements else []
        self.lights: list[Light] = list(lights) if lights else []

    def add(self, obj: Object, material: Material) -> Element:
        """Add an object with its material.

        Returns:
            The new Element.
        """
        element = Element(obj, material)
        self.elements.append(element)
        return element

    def add_light(self, light: Light) -> None:
        self.lights.append(light)

    def clear(self) -> None:
        """Remove all elements and lights, keeping the camera."""
        self.elements.clear()
        self.lights.clear()

    @property
    def is_device_ready(self) -> bool:
        """True if every element and light can be uploaded to the kernel."""
        return all(e.object.device_kind is not None for e in self.elements) and all(
            light.device_kind is not None for light in self.lights
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def nearest_hit(self, ray: Ray) -> Optional[tuple[Element, HitInfo]]:
        """Find the closest element hit by a ray.

        Elements are scanned in insertion order and only a strictly smaller
        time replaces the current best. Hits closer than SELF_HIT_EPSILON
        are ignored.

        Args:
            ray: The ray to trace.

        Returns:
            The element and its hit, or None if nothing is hit.
        """
        best: Optional[tuple[Element, HitInfo]] = None
        best_time = T_MAX
        for element in self.elements:
            hit = element.object.is_hit_by(ray)
            if hit is None or hit.time < SELF_HIT_EPSILON:
                continue
            if hit.time < best_time:
                best_time = hit.time
                best = (element, hit)
        return best

    def incident_light(self, point: Vector3) -> Vector3:
        """Sum the light reaching a point; absent contributions count as zero."""
        total = Vector3.zero()
        for light in self.lights:
            contribution = light.hits(point)
            if contribution is not None:
                total = total + contribution
        return total

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Raises:
            ValueError: If an object or light has no configuration form.
        """
        config = SceneConfig(
            camera={"fov": self.camera.fov, "near": self.camera.near, "far": self.camera.far}
        )
        for element in self.elements:
            config.elements.append(
                {**object_to_dict(element.object), "material": element.material.to_dict()}
            )
        for light in self.lights:
            config.lights.append(light_to_dict(light))
        return config

    @classmethod
    def from_config(cls, config: SceneConfig) -> Scene:
        """Build a scene from a configuration object.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        scene = cls(camera=Camera(**config.camera))
        for element_config in config.elements:
            material = Material.from_dict(element_config.get("material", {}))
            scene.add(object_from_dict(element_config), material)
        for light_config in config.lights:
            scene.add_light(light_from_dict(light_config))
        return scene

    def to_dict(self) -> dict[str, Any]:
        return self.to_config().to_dict()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        return cls.from_config(SceneConfig.from_dict(data))

    def __repr__(self) -> str:
        return (
            f"Scene(camera={self.camera!r}, elements={len(self.elements)}, "
            f"lights={len(self.lights)})"
        )
