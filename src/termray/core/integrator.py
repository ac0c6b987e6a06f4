"""Whitted-style frame kernel.

This module traces a whole frame in one Taichi kernel. It runs the same
shading loop as ``termray.core.shading.trace`` against a DeviceScene:

    - one primary ray per pixel through the perspective camera
    - nearest hit by linear scan, with the self-hit epsilon
    - ``radiance += throughput * color * incident`` then
      ``throughput *= reflectiveness``
    - mirror reflection until ``max_depth`` interactions

The outermost loop runs over rows and is parallelised by Taichi; columns
within a row are traced sequentially. Each pixel writes only its own image
cell and hit flag.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from termray.core.integrator import WhittedIntegrator
    >>> from termray.scene.device import DeviceScene
    >>> from termray.scene.presets import create_demo_scene
    >>> scene = create_demo_scene()
    >>> integrator = WhittedIntegrator(32, 16)
    >>> image, mask = integrator.render(DeviceScene(scene), scene.camera, max_depth=2)
    >>> image.shape
    (16, 32, 3)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from termray.camera.perspective import Camera, camera_direction
from termray.core.ray import reflect_direction
from termray.core.shading import check_max_depth
from termray.core.transform import Transform
from termray.scene.device import DeviceScene

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def _is_finite(v: vec3) -> ti.i32:
    """1 if every component of v is finite, else 0."""
    finite = 1
    for c in ti.static(range(3)):
        if tm.isnan(v[c]) or tm.isinf(v[c]):
            finite = 0
    return finite


@ti.data_oriented
class WhittedIntegrator:
    """Render target and kernel for one frame size.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        image: (height, width) RGB radiance field.
        hit_mask: (height, width) field, 1 where the primary ray hit.

    Raises:
        ValueError: If either dimension is not positive.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
        self.width = width
        self.height = height
        self.image = ti.Vector.field(3, dtype=ti.f32, shape=(height, width))
        self.hit_mask = ti.field(dtype=ti.i32, shape=(height, width))

        # View transform: linear part (rotation and scale) plus eye position
        self.view_linear = ti.Matrix.field(3, 3, dtype=ti.f32, shape=())
        self.view_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.set_view(Transform())

    def set_view(self, view: Transform) -> None:
        """Upload the view transform used for primary rays."""
        matrix = view.to_matrix().to_numpy()
        self.view_linear[None] = matrix[:3, :3].tolist()
        self.view_origin[None] = list(view.position)

    def clear(self) -> None:
        self.image.fill(0.0)
        self.hit_mask.fill(0)

    @ti.func
    def _trace_pixel(
        self,
        scene: ti.template(),
        row: ti.i32,
        col: ti.i32,
        x_scale: ti.f32,
        y_scale: ti.f32,
        max_depth: ti.i32,
    ):
        """Shade one pixel; returns (radiance, primary_hit)."""
        origin = self.view_origin[None]
        direction = tm.normalize(
            self.view_linear[None]
            @ camera_direction(x_scale, y_scale, col, row, self.width, self.height)
        )

        radiance = vec3(0.0)
        throughput = vec3(1.0)
        primary_hit = 0

        # Active flag for loop continuation (no break inside ti.func loops)
        active = 1

        for depth in range(max_depth):
            if active == 1:
                rec = scene.nearest_hit(origin, direction)

                if rec.hit == 0:
                    active = 0
                else:
                    if depth == 0:
                        primary_hit = 1

                    index = rec.index
                    incident = scene.incident_light(rec.position)
                    radiance += throughput * scene.colors[index] * incident
                    throughput *= scene.reflectiveness[index]

                    if depth < max_depth - 1:
                        normal = scene.normal_at(index, rec.position)
                        reflected = reflect_direction(direction, normal)
                        if _is_finite(reflected) == 1:
                            origin = rec.position
                            direction = reflected
                        else:
                            active = 0

        return radiance, primary_hit

    @ti.kernel
    def _render(
        self,
        scene: ti.template(),
        x_scale: ti.f32,
        y_scale: ti.f32,
        max_depth: ti.i32,
    ):
        for row in range(self.height):
            for col in range(self.width):
                radiance, primary_hit = self._trace_pixel(
                    scene, row, col, x_scale, y_scale, max_depth
                )
                self.image[row, col] = radiance
                self.hit_mask[row, col] = primary_hit

    def render(
        self,
        scene: DeviceScene,
        camera: Camera,
        max_depth: int,
        aspect_ratio: float | None = None,
    ) -> tuple[npt.NDArray[np.float32], npt.NDArray[np.bool_]]:
        """Trace the full frame.

        Args:
            scene: The uploaded scene.
            camera: Projection parameters.
            max_depth: Maximum number of surface interactions (>= 1).
            aspect_ratio: Overrides ``width / height``.

        Returns:
            Tuple of (image, mask): a (height, width, 3) float32 array and a
            (height, width) bool array that is True where the primary ray hit.

        Raises:
            ValueError: If ``max_depth`` is less than 1.
        """
        check_max_depth(max_depth)
        if aspect_ratio is None:
            aspect_ratio = self.width / self.height

        projection = camera.transform(aspect_ratio)
        self._render(scene, projection[0, 0], projection[1, 1], max_depth)
        return self.image.to_numpy(), self.hit_mask.to_numpy().astype(bool)
