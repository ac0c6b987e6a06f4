"""Ambient light: a constant colour everywhere."""

from __future__ import annotations

from typing import Optional

from termray.core.vector import Vector3
from termray.lighting.light import Light, LightKind


class Ambient(Light):
    """Uniform light that reaches every point unchanged.

    Attributes:
        color: The colour added at every hit point.
    """

    device_kind = LightKind.AMBIENT

    def __init__(self, color: Vector3) -> None:
        self.color = color

    def hits(self, point: Vector3) -> Optional[Vector3]:
        return self.color

    def device_params(self) -> tuple[Vector3, Vector3, float]:
        return (Vector3.zero(), self.color, 1.0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ambient):
            return NotImplemented
        return self.color == other.color

    def __hash__(self) -> int:
        return hash(self.color)

    def __repr__(self) -> str:
        return f"Ambient(color={self.color!r})"
