"""Perspective camera producing primary ray directions.

The camera holds only the projection parameters. It sits at the origin
looking down -z; moving or turning it is done by the renderer's view
Transform.

A pixel (col, row) in a width x height buffer maps to normalised device
coordinates with

    ndc_x = 2 * col / width - 1
    ndc_y = 1 - 2 * row / height

(rows count down the screen). The inverse perspective mapping then divides
by the projection's x and y scale factors and points the result at z = -1.

Example:
    >>> import math
    >>> from termray.camera.perspective import Camera
    >>> camera = Camera(fov=math.pi / 2, near=0.1, far=100.0)
    >>> camera.ray_direction(8, 8, 16, 16)
    UnitVector3(0.0, 0.0, -1.0)
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from termray.core.matrix import Matrix4
from termray.core.ray import Ray
from termray.core.vector import UnitVector3, Vector3

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@dataclass(frozen=True)
class Camera:
    """Perspective projection parameters.

    Attributes:
        fov: Vertical field of view in radians.
        near: Distance of the near clipping plane.
        far: Distance of the far clipping plane.

    Raises:
        ValueError: If ``near >= far`` or ``fov`` is not in (0, pi).
    """

    fov: float = math.pi / 2.0
    near: float = 0.1
    far: float = 100.0

    def __post_init__(self) -> None:
        if self.near >= self.far:
            raise ValueError(
                f"Camera near plane ({self.near}) must be closer than the far plane ({self.far})"
            )
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"Camera fov = {self.fov} is outside (0, pi) radians")

    def transform(self, aspect_ratio: float) -> Matrix4:
        """Build the perspective projection matrix.

        Args:
            aspect_ratio: Width divided by height of the output.

        Returns:
            The 4x4 projection matrix.
        """
        yy = 1.0 / math.tan(self.fov / 2.0)
        zm = self.far - self.near
        zp = self.far + self.near
        return Matrix4.from_array(
            [
                [yy / aspect_ratio, 0.0, 0.0, 0.0],
                [0.0, yy, 0.0, 0.0],
                [0.0, 0.0, -zp / zm, -2.0 * self.far * self.near / zm],
                [0.0, 0.0, -1.0, 0.0],
            ]
        )

    def ray_direction(
        self,
        col: int,
        row: int,
        width: int,
        height: int,
        aspect_ratio: float | None = None,
    ) -> UnitVector3:
        """Unit direction of the primary ray through pixel (col, row).

        Args:
            col: Pixel column (0 = left).
            row: Pixel row (0 = top).
            width: Buffer width in pixels.
            height: Buffer height in pixels.
            aspect_ratio: Overrides ``width / height`` (e.g. for tall
                terminal cells).

        Returns:
            The camera-space ray direction.
        """
        if aspect_ratio is None:
            aspect_ratio = width / height
        projection = self.transform(aspect_ratio)
        ndc_x = 2.0 * col / width - 1.0
        ndc_y = 1.0 - 2.0 * row / height
        return UnitVector3.normalize(
            Vector3(ndc_x / projection[0, 0], ndc_y / projection[1, 1], -1.0)
        )

    def primary_ray(self, col: int, row: int, width: int, height: int) -> Ray:
        """Camera-space primary ray from the origin through pixel (col, row)."""
        return Ray(Vector3.zero(), self.ray_direction(col, row, width, height))


@ti.func
def camera_direction(
    x_scale: ti.f32,
    y_scale: ti.f32,
    col: ti.i32,
    row: ti.i32,
    width: ti.i32,
    height: ti.i32,
) -> vec3:
    """Compute a camera-space primary ray direction inside a Taichi kernel.

    Args:
        x_scale: Projection entry m[0][0] (yy / aspect).
        y_scale: Projection entry m[1][1] (yy).
        col: Pixel column (0 = left).
        row: Pixel row (0 = top).
        width: Buffer width in pixels.
        height: Buffer height in pixels.

    Returns:
        The normalised direction through the pixel.
    """
    ndc_x = 2.0 * ti.cast(col, ti.f32) / ti.cast(width, ti.f32) - 1.0
    ndc_y = 1.0 - 2.0 * ti.cast(row, ti.f32) / ti.cast(height, ti.f32)
    return tm.normalize(vec3(ndc_x / x_scale, ndc_y / y_scale, -1.0))
