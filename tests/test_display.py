"""Tests for frame output: terminal, PNG and Matplotlib preview.

Tests cover:
- Terminal size queries and the default framebuffer
- ASCII frames written to a text stream
- PNG export through Pillow
- Preview figures (without opening a window)
- Wrapping of I/O failures in DisplayError
"""

import io
import os
import shutil

import numpy as np
import pytest
from PIL import Image as PILImage

from termray.display.export import PngSink, image_to_uint8, save_png
from termray.display.framebuffer import (
    ASCII_MAP,
    AsciiFormat,
    Framebuffer,
    PixelFormat,
    Rgb8Format,
    RgbFloatFormat,
)
from termray.display.sink import DisplayError
from termray.display.terminal import (
    CLEAR_SCREEN,
    FALLBACK_SIZE,
    TerminalSink,
    default_framebuffer,
    terminal_size,
)


class BrokenStream(io.StringIO):
    def write(self, text):
        raise OSError("stream closed")


class TestTerminal:
    """Tests for terminal output."""

    def test_terminal_size(self, monkeypatch):
        monkeypatch.setattr(
            shutil,
            "get_terminal_size",
            lambda fallback=FALLBACK_SIZE: os.terminal_size((120, 40)),
        )
        assert terminal_size() == (120, 40)

    def test_fallback_size_is_passed(self, monkeypatch):
        seen = []

        def fake(fallback=None):
            seen.append(fallback)
            return os.terminal_size(fallback)

        monkeypatch.setattr(shutil, "get_terminal_size", fake)
        assert terminal_size() == FALLBACK_SIZE
        assert seen == [FALLBACK_SIZE]

    def test_default_framebuffer_covers_terminal(self, monkeypatch):
        monkeypatch.setattr(
            shutil,
            "get_terminal_size",
            lambda fallback=FALLBACK_SIZE: os.terminal_size((30, 10)),
        )
        fb = default_framebuffer()
        assert (fb.width, fb.height) == (30, 10)
        assert isinstance(fb.pixel_format, AsciiFormat)

    def test_present_writes_rows(self):
        stream = io.StringIO()
        sink = TerminalSink(stream)
        fb = sink.framebuffer(3, 2)
        fb.set_pixel(0, 1, (1.0, 1.0, 1.0))
        sink.present(fb)

        background = ASCII_MAP[0]
        assert stream.getvalue() == (
            CLEAR_SCREEN + f"{background}${background}\n" + background * 3 + "\n"
        )

    def test_present_without_clear(self):
        stream = io.StringIO()
        sink = TerminalSink(stream, clear=False)
        sink.present(sink.framebuffer(2, 1))
        assert stream.getvalue() == ASCII_MAP[0] * 2 + "\n"

    def test_write_failure_is_wrapped(self):
        sink = TerminalSink(BrokenStream())
        with pytest.raises(DisplayError):
            sink.present(sink.framebuffer(2, 2))


class TestExport:
    """Tests for PNG export."""

    def test_rgb8_to_uint8(self):
        fb = Framebuffer(3, 2, Rgb8Format())
        fb.set_pixel(1, 2, (1.0, 0.5, 0.0))
        image = image_to_uint8(fb)
        assert image.shape == (2, 3, 3)
        assert image.dtype == np.uint8
        assert tuple(image[1, 2]) == (255, 127, 0)
        assert tuple(image[0, 0]) == (0, 0, 0)

    def test_float_to_uint8(self, float_framebuffer):
        float_framebuffer.set_pixel(0, 0, (1.0, 0.0, 0.5))
        image = image_to_uint8(float_framebuffer)
        assert image.shape == (12, 16, 3)
        assert tuple(image[0, 0]) == (255, 0, 127)

    def test_ascii_to_grey(self):
        fb = Framebuffer(2, 1)
        fb.set_pixel(0, 1, (1.0, 1.0, 1.0))
        image = image_to_uint8(fb)
        assert tuple(image[0, 0]) == (0, 0, 0)
        assert tuple(image[0, 1]) == (255, 255, 255)

    def test_unknown_format(self):
        class HexFormat(PixelFormat):
            background = "000000"

            def encode(self, color):
                return "ffffff"

        with pytest.raises(ValueError):
            image_to_uint8(Framebuffer(2, 2, HexFormat()))

    def test_save_png(self, tmp_path):
        fb = Framebuffer(4, 3, Rgb8Format())
        fb.set_pixel(2, 3, (0.0, 1.0, 0.0))
        path = tmp_path / "frame.png"
        save_png(fb, path)

        with PILImage.open(path) as image:
            assert image.size == (4, 3)
            assert image.mode == "RGB"
            assert image.getpixel((3, 2)) == (0, 255, 0)

    def test_png_sink(self, tmp_path):
        path = tmp_path / "sink.png"
        sink = PngSink(path)
        assert isinstance(sink.pixel_format, Rgb8Format)
        sink.present(sink.framebuffer(5, 5))
        assert path.exists()

    def test_png_sink_failure_is_wrapped(self, tmp_path):
        sink = PngSink(tmp_path / "missing" / "dir" / "frame.png")
        with pytest.raises(DisplayError):
            sink.present(sink.framebuffer(2, 2))


class TestPreview:
    """Tests for the Matplotlib preview, with the window suppressed."""

    def test_show_preview(self, monkeypatch, float_framebuffer):
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from termray.display.preview import show_preview

        shown = []
        monkeypatch.setattr(plt, "show", lambda block=True: shown.append(block))

        float_framebuffer.set_pixel(0, 0, (1.0, 1.0, 1.0))
        show_preview(float_framebuffer, block=False)

        assert shown == [False]
        fig = plt.gcf()
        assert fig.axes[0].get_title() == "termray - 16x12"
        plt.close("all")

    def test_preview_sink_format(self):
        from termray.display.preview import PreviewSink

        sink = PreviewSink(title="Test")
        assert isinstance(sink.pixel_format, RgbFloatFormat)
        assert isinstance(sink.framebuffer(4, 4).pixel_format, RgbFloatFormat)
