"""Rigid placement with per-axis scale.

A Transform positions things in the world: points are rotated by a Versor,
scaled per axis, then translated. The renderer uses one as its view so the
camera can be moved and turned without touching the projection.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from termray.core.matrix import Matrix4
from termray.core.quaternion import Versor
from termray.core.vector import Vector3


@dataclass(frozen=True)
class Transform:
    """Position, scale and rotation.

    Attributes:
        position: Translation applied last.
        scale: Per-axis scale applied after rotation.
        rotation: Unit quaternion applied first.
    """

    position: Vector3 = field(default_factory=Vector3.zero)
    scale: Vector3 = field(default_factory=lambda: Vector3.splat(1.0))
    rotation: Versor = field(default_factory=Versor.identity)

    def apply(self, point: Vector3) -> Vector3:
        """Map a point: ``position + rotation.apply(point) * scale``."""
        return self.position + self.apply_direction(point)

    def apply_direction(self, direction: Vector3) -> Vector3:
        """Map a direction (no translation)."""
        return self.rotation.apply(direction).wide_mul(self.scale)

    def translate(self, offset: Vector3) -> Transform:
        """Return a copy moved by ``offset``."""
        return replace(self, position=self.position + offset)

    def to_matrix(self) -> Matrix4:
        """Homogeneous matrix ``T @ S @ R`` equal to ``apply`` on (p, 1)."""
        translation = Matrix4.from_array(
            [
                [1.0, 0.0, 0.0, self.position.x],
                [0.0, 1.0, 0.0, self.position.y],
                [0.0, 0.0, 1.0, self.position.z],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )
        scale = Matrix4.from_diagonal((*self.scale, 1.0))
        return translation @ scale @ self.rotation.to_matrix()
