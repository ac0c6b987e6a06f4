"""Whitted-style ray tracer for sphere scenes.

Renders a scene of primitives and lights into a framebuffer by casting one
ray per pixel through a perspective camera, with recursive mirror
reflection. Frames can be traced by a Taichi kernel or on the host, and shown
as ASCII in the terminal or written as PNG.

Subpackages:
    core: Vector, matrix and quaternion maths, rays, shading and the renderer
    camera: Perspective camera with primary ray generation
    geometry: Hittable object interface and the sphere primitive
    lighting: Light interface, ambient and point lights
    scene: Materials, the scene container, configuration and presets
    display: Framebuffer, pixel formats and output sinks
"""

__version__ = "0.1.0"
