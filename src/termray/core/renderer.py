"""Frame renderer: scene in, filled framebuffer out.

The Renderer owns a Framebuffer and a Scene. Each frame it clears the
framebuffer, traces one primary ray per pixel and writes the shaded colour
through the framebuffer's pixel format. Pixels whose primary ray hits
nothing keep the background.

Two backends produce identical frames (up to float32 rounding):

    - "taichi": the whole frame in one Taichi kernel; needs every object
      and light to have a kernel representation
    - "host": every pixel traced in Python through the framebuffer's
      thread-pool region update; works with any Object or Light
    - "auto": "taichi" when the scene allows it, else "host"

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from termray.core.renderer import Renderer
    >>> from termray.display.framebuffer import Framebuffer
    >>> from termray.scene.presets import create_demo_scene
    >>>
    >>> renderer = Renderer(Framebuffer(40, 20), create_demo_scene())
    >>> frame = renderer.render(max_depth=1)
    >>> print("\\n".join("".join(row) for row in frame.rows()))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Optional

from termray.core.integrator import WhittedIntegrator
from termray.core.ray import Ray
from termray.core.shading import DEFAULT_MAX_DEPTH, check_max_depth, trace
from termray.core.transform import Transform
from termray.core.vector import Vector3
from termray.display.framebuffer import Framebuffer
from termray.scene.device import DeviceScene
from termray.scene.scene import Scene

if TYPE_CHECKING:
    from termray.display.sink import Sink

# Type alias for backend options
Backend = Literal["auto", "taichi", "host"]

BACKENDS = ("auto", "taichi", "host")


class Renderer:
    """Renders a Scene into a Framebuffer.

    Attributes:
        framebuffer: The output buffer.
        scene: The scene to render. Changes to it are picked up on the next
            render.
        view: Placement of the camera in the world.
        pixel_aspect: Width/height of one output cell (0.5 for typical
            terminal glyphs).

    Args:
        framebuffer: The output buffer.
        scene: The scene to render.
        backend: "auto", "taichi" or "host".
        view: Camera placement (default: origin, looking down -z).
        pixel_aspect: Width/height of one output cell.

    Raises:
        ValueError: If the backend is unknown, or "taichi" is requested for
            a scene that cannot be uploaded.
    """

    def __init__(
        self,
        framebuffer: Framebuffer,
        scene: Scene,
        *,
        backend: Backend = "auto",
        view: Optional[Transform] = None,
        pixel_aspect: float = 1.0,
    ) -> None:
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {backend!r} (expected one of {BACKENDS})")
        if backend == "taichi" and not scene.is_device_ready:
            raise ValueError(
                "The taichi backend needs every object and light to have a kernel representation"
            )
        self.framebuffer = framebuffer
        self.scene = scene
        self.backend = backend
        self.view = view if view is not None else Transform()
        self.pixel_aspect = pixel_aspect
        self._integrator: Optional[WhittedIntegrator] = None
        self._device_scene: Optional[DeviceScene] = None
        self._device_key: Optional[tuple] = None

    @property
    def aspect_ratio(self) -> float:
        """Projection aspect ratio for the current framebuffer."""
        height = max(self.framebuffer.height, 1)
        return self.framebuffer.width / height * self.pixel_aspect

    def resolve_backend(self) -> str:
        """The backend the next render will use."""
        if self.backend == "auto":
            return "taichi" if self.scene.is_device_ready else "host"
        return self.backend

    # -------------------------------------------------------------------------
    # Per-pixel queries
    # -------------------------------------------------------------------------

    def primary_ray(self, row: int, col: int) -> Ray:
        """World-space ray from the eye through pixel (row, col)."""
        direction = self.scene.camera.ray_direction(
            col,
            row,
            self.framebuffer.width,
            self.framebuffer.height,
            self.aspect_ratio,
        )
        return Ray.toward(self.view.position, self.view.apply_direction(direction))

    def trace_pixel(self, row: int, col: int, max_depth: int = DEFAULT_MAX_DEPTH) -> Optional[Vector3]:
        """Shade one pixel on the host.

        Used for debugging individual pixels and by the host backend.

        Returns:
            The pixel colour, or None if the primary ray hits nothing.
        """
        return trace(self.scene, self.primary_ray(row, col), max_depth)

    # -------------------------------------------------------------------------
    # Frames
    # -------------------------------------------------------------------------

    def render(self, max_depth: int = DEFAULT_MAX_DEPTH) -> Framebuffer:
        """Clear the framebuffer and render the scene into it.

        Args:
            max_depth: Maximum number of surface interactions per pixel
                (1 = no reflections).

        Returns:
            The filled framebuffer.

        Raises:
            ValueError: If ``max_depth`` is less than 1.
        """
        check_max_depth(max_depth)
        self.framebuffer.clear()
        if self.framebuffer.height == 0:
            return self.framebuffer

        if self.resolve_backend() == "taichi":
            self._render_taichi(max_depth)
        else:
            self.framebuffer.update(
                None, None, lambda row, col: self.trace_pixel(row, col, max_depth)
            )
        return self.framebuffer

    def _upload_scene(self) -> DeviceScene:
        """Return the uploaded scene, re-uploading only when it changed.

        A changed scene that fits the existing fields is reloaded into them;
        new fields are allocated only when it has grown.
        """
        key = (
            tuple(
                (e.object.device_kind, e.object.device_params(), e.material)
                for e in self.scene.elements
            ),
            tuple(
                (light.device_kind, *light.device_params()) for light in self.scene.lights
            ),
        )
        if self._device_scene is None or not self._device_scene.fits(self.scene):
            self._device_scene = DeviceScene(self.scene)
        elif key != self._device_key:
            self._device_scene.reload(self.scene)
        self._device_key = key
        return self._device_scene

    def _render_taichi(self, max_depth: int) -> None:
        width, height = self.framebuffer.width, self.framebuffer.height
        integrator = self._integrator
        if integrator is None or (integrator.width, integrator.height) != (width, height):
            integrator = WhittedIntegrator(width, height)
            self._integrator = integrator

        integrator.set_view(self.view)
        image, mask = integrator.render(
            self._upload_scene(),
            self.scene.camera,
            max_depth,
            aspect_ratio=self.aspect_ratio,
        )
        self.framebuffer.update(
            None, None, lambda row, col: image[row, col] if mask[row, col] else None
        )

    def present(self, sink: Sink, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        """Render a frame, hand it to ``sink`` and clear the framebuffer.

        Raises:
            ValueError: If ``max_depth`` is less than 1.
            DisplayError: If the sink fails.
        """
        self.render(max_depth)
        try:
            sink.present(self.framebuffer)
        finally:
            self.framebuffer.clear()
