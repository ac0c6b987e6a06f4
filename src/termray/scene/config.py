"""Scene configuration and JSON scene files.

A SceneConfig is the plain-data form of a Scene: dictionaries tagged with a
``"type"`` key, ready for ``json``. The JSON layout is

    {
        "camera": {"fov": 1.5708, "near": 0.1, "far": 100.0},
        "elements": [
            {"type": "sphere", "center": [0, 0, -3], "radius": 1.0,
             "material": {"color": [1, 0, 0], "reflectiveness": [0, 0, 0]}}
        ],
        "lights": [
            {"type": "ambient", "color": [0.1, 0.1, 0.1]},
            {"type": "point", "position": [2, 2, 0], "color": [1, 1, 1],
             "intensity": 10.0}
        ]
    }

Example:
    >>> from termray.scene.config import load_scene
    >>> scene = load_scene("scenes/demo.json")
    >>> len(scene.elements)
    1
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from termray.core.vector import Vector3
from termray.geometry.object import Object
from termray.geometry.sphere import Sphere
from termray.lighting.ambient import Ambient
from termray.lighting.light import Light
from termray.lighting.point import Point

if TYPE_CHECKING:
    from termray.scene.scene import Scene


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        camera: Camera parameters (fov, near, far).
        elements: List of element configurations.
        lights: List of light configurations.
    """

    camera: dict[str, Any] = field(default_factory=dict)
    elements: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        return cls(
            camera=dict(data.get("camera", {})),
            elements=list(data.get("elements", [])),
            lights=list(data.get("lights", [])),
        )


# =============================================================================
# Object and light (de)serialization
# =============================================================================


def object_to_dict(obj: Object) -> dict[str, Any]:
    """Describe an object as a tagged dictionary.

    Raises:
        ValueError: If the object type has no configuration form.
    """
    if isinstance(obj, Sphere):
        return {"type": "sphere", "center": list(obj.center), "radius": obj.radius}
    raise ValueError(f"Cannot serialize object of type {type(obj).__name__}")


def object_from_dict(data: dict[str, Any]) -> Object:
    """Build an object from a tagged dictionary.

    Raises:
        ValueError: If the type tag is unknown.
    """
    obj_type = data.get("type", "").lower()
    if obj_type == "sphere":
        return Sphere(
            center=Vector3.from_iterable(data.get("center", [0.0, 0.0, 0.0])),
            radius=data.get("radius", 1.0),
        )
    raise ValueError(f"Unknown object type: {obj_type!r}")


def light_to_dict(light: Light) -> dict[str, Any]:
    """Describe a light as a tagged dictionary.

    Raises:
        ValueError: If the light type has no configuration form.
    """
    if isinstance(light, Ambient):
        return {"type": "ambient", "color": list(light.color)}
    if isinstance(light, Point):
        return {
            "type": "point",
            "position": list(light.position),
            "color": list(light.color),
            "intensity": light.intensity,
        }
    raise ValueError(f"Cannot serialize light of type {type(light).__name__}")


def light_from_dict(data: dict[str, Any]) -> Light:
    """Build a light from a tagged dictionary.

    Raises:
        ValueError: If the type tag is unknown.
    """
    light_type = data.get("type", "").lower()
    if light_type == "ambient":
        return Ambient(Vector3.from_iterable(data.get("color", [0.1, 0.1, 0.1])))
    if light_type == "point":
        return Point(
            position=Vector3.from_iterable(data.get("position", [0.0, 0.0, 0.0])),
            color=Vector3.from_iterable(data.get("color", [1.0, 1.0, 1.0])),
            intensity=data.get("intensity", 1.0),
        )
    raise ValueError(f"Unknown light type: {light_type!r}")


# =============================================================================
# JSON files
# =============================================================================


def load_scene(path: str | Path) -> Scene:
    """Load a scene from a JSON file.

    Args:
        path: Path to the JSON scene file.

    Returns:
        The loaded Scene.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON or describes an invalid scene.
    """
    from termray.scene.scene import Scene

    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {path}: {e}") from e
    return Scene.from_config(SceneConfig.from_dict(data))


def save_scene(scene: Scene, path: str | Path) -> None:
    """Write a scene to a JSON file.

    Args:
        scene: The scene to save.
        path: Destination path.
    """
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene.to_config().to_dict(), f, indent=2)
