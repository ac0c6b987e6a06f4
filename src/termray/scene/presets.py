"""Ready-made scenes for the CLI and tests.

Example:
    >>> from termray.scene.presets import create_demo_scene
    >>> scene = create_demo_scene()
    >>> len(scene.elements), len(scene.lights)
    (1, 2)
"""

from __future__ import annotations

from typing import Callable

from termray.camera.perspective import Camera
from termray.core.vector import Vector3
from termray.geometry.sphere import Sphere
from termray.lighting.ambient import Ambient
from termray.lighting.point import Point
from termray.scene.element import Material
from termray.scene.scene import Scene

# =============================================================================
# Demo Scene Parameters
# =============================================================================

DEMO_SPHERE_CENTER = (0.0, 0.0, -2.0)
DEMO_SPHERE_RADIUS = 1.0
DEMO_AMBIENT = 0.1


def create_demo_scene(camera: Camera | None = None) -> Scene:
    """A single red sphere in front of the camera.

    Lit by a white point light up and to the right, plus a dim ambient term.

    Args:
        camera: Optional camera; defaults to ``Camera()``.

    Returns:
        The populated Scene.
    """
    scene = Scene(camera=camera)
    scene.add(
        Sphere(Vector3(*DEMO_SPHERE_CENTER), DEMO_SPHERE_RADIUS),
        Material(color=Vector3(1.0, 0.0, 0.0)),
    )
    scene.add_light(Ambient(Vector3.splat(DEMO_AMBIENT)))
    scene.add_light(Point(Vector3(2.0, 2.0, 0.0), Vector3(1.0, 1.0, 1.0), 6.0))
    return scene


def create_mirror_scene(camera: Camera | None = None) -> Scene:
    """Two spheres side by side, the right one a partial mirror.

    Exercises reflection chains: rays that hit the mirror bounce and pick up
    the colour of the diffuse sphere.

    Args:
        camera: Optional camera; defaults to ``Camera()``.

    Returns:
        The populated Scene.
    """
    scene = Scene(camera=camera)
    scene.add(
        Sphere(Vector3(-1.1, 0.0, -3.0), 1.0),
        Material(color=Vector3(0.2, 0.4, 1.0)),
    )
    scene.add(
        Sphere(Vector3(1.1, 0.0, -3.0), 1.0),
        Material(color=Vector3(0.3, 0.3, 0.3), reflectiveness=Vector3.splat(0.7)),
    )
    scene.add_light(Ambient(Vector3.splat(0.05)))
    scene.add_light(Point(Vector3(0.0, 3.0, -1.0), Vector3(1.0, 1.0, 1.0), 8.0))
    return scene


PRESETS: dict[str, Callable[..., Scene]] = {
    "demo": create_demo_scene,
    "mirror": create_mirror_scene,
}
