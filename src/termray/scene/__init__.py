"""Scene description.

Components:
    element: Material and Element
    scene: Scene container and host-side queries
    config: SceneConfig and JSON scene files
    presets: Ready-made scenes
    device: Taichi field upload of a scene
"""

from .config import SceneConfig, load_scene, save_scene
from .device import DeviceHit, DeviceScene
from .element import Element, Material
from .presets import PRESETS, create_demo_scene, create_mirror_scene
from .scene import SELF_HIT_EPSILON, T_MAX, Scene

__all__ = [
    "Material",
    "Element",
    "Scene",
    "SELF_HIT_EPSILON",
    "T_MAX",
    "SceneConfig",
    "load_scene",
    "save_scene",
    "PRESETS",
    "create_demo_scene",
    "create_mirror_scene",
    "DeviceScene",
    "DeviceHit",
]
