"""Hittable geometry.

Components:
    object: The Object interface and kernel kind tags
    sphere: Sphere primitive with line-sphere intersection

Host-side primitives implement ``is_hit_by`` and ``normal``; the kernel
counterparts are Taichi functions dispatched by ObjectKind.
"""

from .object import Object, ObjectKind
from .sphere import MISS, Sphere, hit_sphere, intersect_time, sphere_normal

__all__ = [
    "Object",
    "ObjectKind",
    "Sphere",
    "MISS",
    "intersect_time",
    "hit_sphere",
    "sphere_normal",
]
