"""Capability interface for hittable scene objects.

Every primitive answers two questions: where (if anywhere) a ray first
touches it, and what the outward surface normal is at a point. The host
tracer only relies on these two methods, so new primitives work there
without renderer changes.

The Taichi frame kernel cannot call Python methods. A primitive that also
wants to run on the kernel declares an ``ObjectKind`` tag and packs its
parameters into four floats; the kernel dispatches on the tag.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Optional

from termray.core.ray import HitInfo, Ray
from termray.core.vector import UnitVector3, Vector3


class ObjectKind(IntEnum):
    """Kind tags understood by the Taichi frame kernel."""

    SPHERE = 0


class Object(ABC):
    """A primitive that rays can hit."""

    # Kernel dispatch tag; None means host-only.
    device_kind: Optional[ObjectKind] = None

    @abstractmethod
    def is_hit_by(self, ray: Ray) -> Optional[HitInfo]:
        """Return the nearest non-negative hit of ``ray``, or None."""

    @abstractmethod
    def normal(self, point: Vector3) -> UnitVector3:
        """Return the outward unit normal at ``point`` on the surface."""

    def device_params(self) -> tuple[float, float, float, float]:
        """Pack the primitive for the kernel.

        Raises:
            NotImplementedError: If the primitive is host-only.
        """
        raise NotImplementedError(f"{type(self).__name__} has no kernel representation")
