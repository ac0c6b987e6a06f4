"""Materials and scene elements.

An Element pairs a hittable Object with the Material that shades it. The
material holds a base colour that filters incident light and a per-channel
reflectiveness that weights the mirror bounce.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from termray.core.vector import Vector3
from termray.geometry.object import Object


def _check_unit_range(name: str, value: Vector3) -> None:
    for channel in value:
        if not 0.0 <= channel <= 1.0:
            raise ValueError(f"Material {name} = {value!r} has components outside [0, 1]")


@dataclass(frozen=True)
class Material:
    """Surface appearance of an element.

    Attributes:
        color: RGB filter applied to incident light, each channel in [0, 1].
        reflectiveness: RGB weight of the reflected ray, each channel in
            [0, 1]. Zero (the default) means no reflection.

    Raises:
        ValueError: If any channel is outside [0, 1] (NaN included).
    """

    color: Vector3
    reflectiveness: Vector3 = field(default_factory=Vector3.zero)

    def __post_init__(self) -> None:
        _check_unit_range("color", self.color)
        _check_unit_range("reflectiveness", self.reflectiveness)

    @property
    def is_reflective(self) -> bool:
        return any(channel > 0.0 for channel in self.reflectiveness)

    def to_dict(self) -> dict[str, Any]:
        return {
            "color": list(self.color),
            "reflectiveness": list(self.reflectiveness),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Material:
        return cls(
            color=Vector3.from_iterable(data.get("color", [1.0, 1.0, 1.0])),
            reflectiveness=Vector3.from_iterable(data.get("reflectiveness", [0.0, 0.0, 0.0])),
        )


@dataclass(frozen=True)
class Element:
    """An object together with its material.

    Attributes:
        object: The hittable shape.
        material: How the shape is shaded.
    """

    object: Object
    material: Material
