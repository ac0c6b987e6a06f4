"""PNG export of framebuffers.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from termray.display.export import PngSink
    >>> from termray.core.renderer import Renderer
    >>> from termray.scene.presets import create_demo_scene
    >>>
    >>> sink = PngSink("sphere.png")
    >>> renderer = Renderer(sink.framebuffer(320, 240), create_demo_scene())
    >>> renderer.present(sink, max_depth=2)
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from termray.display.framebuffer import (
    ASCII_MAP,
    MAX_INDEX,
    AsciiFormat,
    Framebuffer,
    PixelFormat,
    Rgb8Format,
    RgbFloatFormat,
)
from termray.display.sink import DisplayError, Sink


def image_to_uint8(framebuffer: Framebuffer) -> npt.NDArray[np.uint8]:
    """Convert framebuffer cells to an 8-bit RGB array.

    ASCII cells become grey levels by their position on the ramp.

    Args:
        framebuffer: The framebuffer to convert.

    Returns:
        Array of shape (height, width, 3) with dtype uint8.

    Raises:
        ValueError: If the pixel format is not supported.
    """
    shape = (framebuffer.height, framebuffer.width, 3)
    pixel_format = framebuffer.pixel_format

    if isinstance(pixel_format, Rgb8Format):
        image = np.array(framebuffer.pixels, dtype=np.uint8)
    elif isinstance(pixel_format, RgbFloatFormat):
        image = (np.array(framebuffer.pixels, dtype=np.float32) * 255).astype(np.uint8)
    elif isinstance(pixel_format, AsciiFormat):
        levels = np.array([ASCII_MAP.index(cell) for cell in framebuffer.pixels], dtype=np.float32)
        grey = (levels / MAX_INDEX * 255).astype(np.uint8)
        image = np.repeat(grey[:, np.newaxis], 3, axis=1)
    else:
        raise ValueError(f"Cannot export pixel format {type(pixel_format).__name__}")

    return image.reshape(shape)


def save_png(framebuffer: Framebuffer, filepath: str | Path) -> None:
    """Save a framebuffer as a PNG file.

    Args:
        framebuffer: The framebuffer to save.
        filepath: Output file path (should end in .png).

    Raises:
        OSError: If the file cannot be written.
    """
    pil_image = PILImage.fromarray(image_to_uint8(framebuffer), mode="RGB")
    pil_image.save(filepath)


class PngSink(Sink):
    """Writes each presented frame to a PNG file.

    Args:
        filepath: Output path; overwritten on every frame.
    """

    def __init__(self, filepath: str | Path) -> None:
        self.filepath = Path(filepath)
        self._format = Rgb8Format()

    @property
    def pixel_format(self) -> PixelFormat:
        return self._format

    def present(self, framebuffer: Framebuffer) -> None:
        try:
            save_png(framebuffer, self.filepath)
        except OSError as e:
            raise DisplayError(f"Failed to write {self.filepath}: {e}") from e
