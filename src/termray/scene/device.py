"""Taichi-side copy of a Scene for the frame kernel.

The kernel cannot walk Python objects, so a DeviceScene packs the scene into
Structure-of-Arrays Taichi fields:

    - objects: kind tag, four packed floats, material colour, reflectiveness
    - lights: kind tag, position, colour, intensity

Kind tags come from ObjectKind and LightKind; the ti.func queries dispatch on
them. Only scenes whose every element and light declares a kind can be
uploaded.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from termray.scene.device import DeviceScene
    >>> from termray.scene.presets import create_demo_scene
    >>> device = DeviceScene(create_demo_scene())
    >>> device.object_count, device.light_count
    (1, 2)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from termray.geometry.object import ObjectKind
from termray.geometry.sphere import MISS, hit_sphere, sphere_normal
from termray.lighting.light import LightKind
from termray.lighting.point import point_light_contribution
from termray.scene.scene import SELF_HIT_EPSILON, T_MAX, Scene

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class DeviceHit:
    """Result of a kernel-side nearest-hit query.

    Attributes:
        hit: 1 if an element was hit, 0 otherwise.
        index: Index of the hit element. Only valid if hit == 1.
        time: Ray parameter at the hit. Only valid if hit == 1.
        position: The hit point. Only valid if hit == 1.
    """

    hit: ti.i32
    index: ti.i32
    time: ti.f32
    position: vec3


@ti.data_oriented
class DeviceScene:
    """Scene data uploaded into Taichi fields.

    Fields are sized to the scene (at least one slot, since Taichi fields
    cannot be empty); the live counts are stored separately. A later scene
    with no more elements and lights can be loaded into the same fields with
    reload().

    Args:
        scene: The scene to upload.

    Raises:
        ValueError: If an element or light has no kernel representation.
    """

    def __init__(self, scene: Scene) -> None:
        if not scene.is_device_ready:
            raise ValueError("Scene contains objects or lights without a kernel representation")

        self.object_count = len(scene.elements)
        self.light_count = len(scene.lights)
        self.object_capacity = n_objects = max(self.object_count, 1)
        self.light_capacity = n_lights = max(self.light_count, 1)

        self.num_objects = ti.field(dtype=ti.i32, shape=())
        self.object_kinds = ti.field(dtype=ti.i32, shape=n_objects)
        self.object_params = ti.Vector.field(4, dtype=ti.f32, shape=n_objects)
        self.colors = ti.Vector.field(3, dtype=ti.f32, shape=n_objects)
        self.reflectiveness = ti.Vector.field(3, dtype=ti.f32, shape=n_objects)

        self.num_lights = ti.field(dtype=ti.i32, shape=())
        self.light_kinds = ti.field(dtype=ti.i32, shape=n_lights)
        self.light_positions = ti.Vector.field(3, dtype=ti.f32, shape=n_lights)
        self.light_colors = ti.Vector.field(3, dtype=ti.f32, shape=n_lights)
        self.light_intensities = ti.field(dtype=ti.f32, shape=n_lights)

        self._upload(scene)

    def fits(self, scene: Scene) -> bool:
        """Whether ``scene`` fits in the allocated fields."""
        return (
            len(scene.elements) <= self.object_capacity
            and len(scene.lights) <= self.light_capacity
        )

    def reload(self, scene: Scene) -> None:
        """Replace the uploaded data with ``scene``, keeping the fields.

        Raises:
            ValueError: If the scene cannot be uploaded or does not fit.
        """
        if not scene.is_device_ready:
            raise ValueError("Scene contains objects or lights without a kernel representation")
        if not self.fits(scene):
            raise ValueError(
                f"Scene has {len(scene.elements)} elements and {len(scene.lights)} lights; "
                f"fields hold {self.object_capacity} and {self.light_capacity}"
            )
        self.object_count = len(scene.elements)
        self.light_count = len(scene.lights)
        self._upload(scene)

    def _upload(self, scene: Scene) -> None:
        n_objects, n_lights = self.object_capacity, self.light_capacity
        kinds = np.zeros(n_objects, dtype=np.int32)
        params = np.zeros((n_objects, 4), dtype=np.float32)
        colors = np.zeros((n_objects, 3), dtype=np.float32)
        reflectiveness = np.zeros((n_objects, 3), dtype=np.float32)
        for i, element in enumerate(scene.elements):
            kinds[i] = int(element.object.device_kind)
            params[i] = element.object.device_params()
            colors[i] = element.material.color.to_tuple()
            reflectiveness[i] = element.material.reflectiveness.to_tuple()

        self.num_objects[None] = self.object_count
        self.object_kinds.from_numpy(kinds)
        self.object_params.from_numpy(params)
        self.colors.from_numpy(colors)
        self.reflectiveness.from_numpy(reflectiveness)

        light_kinds = np.zeros(n_lights, dtype=np.int32)
        positions = np.zeros((n_lights, 3), dtype=np.float32)
        light_colors = np.zeros((n_lights, 3), dtype=np.float32)
        intensities = np.zeros(n_lights, dtype=np.float32)
        for i, light in enumerate(scene.lights):
            position, color, intensity = light.device_params()
            light_kinds[i] = int(light.device_kind)
            positions[i] = position.to_tuple()
            light_colors[i] = color.to_tuple()
            intensities[i] = intensity

        self.num_lights[None] = self.light_count
        self.light_kinds.from_numpy(light_kinds)
        self.light_positions.from_numpy(positions)
        self.light_colors.from_numpy(light_colors)
        self.light_intensities.from_numpy(intensities)

    # -------------------------------------------------------------------------
    # Kernel-side queries
    # -------------------------------------------------------------------------

    @ti.func
    def nearest_hit(self, origin: vec3, direction: vec3) -> DeviceHit:
        """Closest element hit by a ray, scanning in insertion order.

        Hits closer than SELF_HIT_EPSILON are skipped and only a strictly
        smaller time replaces the current best.
        """
        closest_t = T_MAX
        closest_index = -1

        for i in range(self.num_objects[None]):
            t = MISS
            if self.object_kinds[i] == int(ObjectKind.SPHERE):
                params = self.object_params[i]
                t = hit_sphere(
                    origin, direction, vec3(params[0], params[1], params[2]), params[3]
                )
            if t >= SELF_HIT_EPSILON and t < closest_t:
                closest_t = t
                closest_index = i

        result = DeviceHit(hit=0, index=-1, time=MISS, position=vec3(0.0))
        if closest_index >= 0:
            result = DeviceHit(
                hit=1,
                index=closest_index,
                time=closest_t,
                position=origin + closest_t * direction,
            )
        return result

    @ti.func
    def normal_at(self, index: ti.i32, position: vec3) -> vec3:
        """Outward unit normal of element ``index`` at ``position``."""
        normal = vec3(0.0)
        if self.object_kinds[index] == int(ObjectKind.SPHERE):
            params = self.object_params[index]
            normal = sphere_normal(vec3(params[0], params[1], params[2]), position)
        return normal

    @ti.func
    def incident_light(self, point: vec3) -> vec3:
        """Sum of all light arriving at ``point``."""
        total = vec3(0.0)
        for i in range(self.num_lights[None]):
            kind = self.light_kinds[i]
            if kind == int(LightKind.AMBIENT):
                total += self.light_colors[i]
            elif kind == int(LightKind.POINT):
                total += point_light_contribution(
                    self.light_positions[i],
                    self.light_colors[i],
                    self.light_intensities[i],
                    point,
                )
        return total
