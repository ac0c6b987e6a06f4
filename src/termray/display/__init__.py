"""Framebuffers and output sinks.

Components:
    framebuffer: Framebuffer, pixel formats and region updates
    sink: Sink interface and DisplayError
    terminal: ASCII terminal output
    export: PNG export via Pillow
    preview: Matplotlib preview window
"""

from .export import PngSink, image_to_uint8, save_png
from .framebuffer import (
    ASCII_MAP,
    AsciiFormat,
    Framebuffer,
    PixelFormat,
    Rgb8Format,
    RgbFloatFormat,
    clamp_region,
)
from .preview import PreviewSink, show_preview
from .sink import DisplayError, Sink
from .terminal import TerminalSink, default_framebuffer, terminal_size

__all__ = [
    "ASCII_MAP",
    "PixelFormat",
    "AsciiFormat",
    "Rgb8Format",
    "RgbFloatFormat",
    "Framebuffer",
    "clamp_region",
    "Sink",
    "DisplayError",
    "TerminalSink",
    "terminal_size",
    "default_framebuffer",
    "PngSink",
    "save_png",
    "image_to_uint8",
    "PreviewSink",
    "show_preview",
]
