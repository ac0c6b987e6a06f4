"""Capability interface for light sources.

A light answers one question: how much light reaches a given point. The
answer is a colour, or None when the light contributes nothing there.

Lights that can run in the Taichi frame kernel declare a ``LightKind`` tag
and pack themselves as ``(position, color, intensity)``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Optional

from termray.core.vector import Vector3


class LightKind(IntEnum):
    """Kind tags understood by the Taichi frame kernel."""

    AMBIENT = 0
    POINT = 1


class Light(ABC):
    """A source of light in the scene."""

    device_kind: Optional[LightKind] = None

    @abstractmethod
    def hits(self, point: Vector3) -> Optional[Vector3]:
        """Return the light colour arriving at ``point``, or None."""

    def device_params(self) -> tuple[Vector3, Vector3, float]:
        """Pack the light as ``(position, color, intensity)`` for the kernel.

        Raises:
            NotImplementedError: If the light is host-only.
        """
        raise NotImplementedError(f"{type(self).__name__} has no kernel representation")
