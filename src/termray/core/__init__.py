"""Core maths and shading.

Components:
    vector: Vector2, Vector3, Vector4 and UnitVector3 value types
    matrix: Row-major Matrix4
    quaternion: Quaternion, Versor and EulerAngles
    transform: Position, scale and rotation
    ray: Ray and HitInfo with their Taichi counterparts
    shading: Host-side shading loop
    integrator: Taichi frame kernel
    renderer: Frame renderer
"""

from .matrix import Matrix4
from .quaternion import EulerAngles, Quaternion, Versor
from .ray import HitInfo, Ray, reflect, reflect_direction, ray_at
from .shading import DEFAULT_MAX_DEPTH, trace
from .transform import Transform
from .vector import EPSILON, UnitVector3, Vector2, Vector3, Vector4

# Note: integrator and renderer depend on the scene and display packages and
# are not re-exported here. Import them directly, e.g.:
#   from termray.core.renderer import Renderer

__all__ = [
    "EPSILON",
    "Vector2",
    "Vector3",
    "Vector4",
    "UnitVector3",
    "Matrix4",
    "Quaternion",
    "Versor",
    "EulerAngles",
    "Transform",
    "Ray",
    "HitInfo",
    "reflect",
    "reflect_direction",
    "ray_at",
    "DEFAULT_MAX_DEPTH",
    "trace",
]
