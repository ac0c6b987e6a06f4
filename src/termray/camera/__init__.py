"""Camera models.

Components:
    perspective: Perspective projection and primary ray directions
"""

from .perspective import Camera, camera_direction

__all__ = ["Camera", "camera_direction"]
