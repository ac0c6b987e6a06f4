"""Matplotlib preview window for framebuffers.

Example:
    >>> from termray.display.preview import PreviewSink
    >>> from termray.core.renderer import Renderer
    >>> from termray.scene.presets import create_mirror_scene
    >>>
    >>> sink = PreviewSink(title="Mirror")
    >>> renderer = Renderer(sink.framebuffer(400, 300), create_mirror_scene())
    >>> renderer.present(sink, max_depth=4)
"""

from __future__ import annotations

from termray.display.export import image_to_uint8
from termray.display.framebuffer import Framebuffer, PixelFormat, RgbFloatFormat
from termray.display.sink import Sink


def show_preview(
    framebuffer: Framebuffer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a framebuffer as a Matplotlib figure.

    Args:
        framebuffer: The framebuffer to display.
        title: Figure title (default shows the dimensions).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    image = image_to_uint8(framebuffer)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image, interpolation="nearest")
    ax.axis("off")

    if title is None:
        title = f"termray - {framebuffer.width}x{framebuffer.height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


class PreviewSink(Sink):
    """Shows each presented frame in a Matplotlib window."""

    def __init__(self, *, title: str | None = None, block: bool = True) -> None:
        self.title = title
        self.block = block
        self._format = RgbFloatFormat()

    @property
    def pixel_format(self) -> PixelFormat:
        return self._format

    def present(self, framebuffer: Framebuffer) -> None:
        show_preview(framebuffer, title=self.title, block=self.block)
