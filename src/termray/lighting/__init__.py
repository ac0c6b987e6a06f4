"""Light sources.

Components:
    light: The Light interface and kernel kind tags
    ambient: Constant light everywhere
    point: Point light with inverse-square falloff
"""

from .ambient import Ambient
from .light import Light, LightKind
from .point import Point, falloff, point_light_contribution

__all__ = [
    "Light",
    "LightKind",
    "Ambient",
    "Point",
    "falloff",
    "point_light_contribution",
]
