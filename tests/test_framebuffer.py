"""Unit tests for the framebuffer.

Tests cover:
- Construction and indexing
- Pixel formats (ASCII ramp, 8-bit and float RGB)
- Region clamping
- Parallel region updates and error propagation
- Circle rasterisation
"""

import threading

import pytest

from termray.core.vector import Vector2
from termray.display.framebuffer import (
    ASCII_MAP,
    MAX_INDEX,
    AsciiFormat,
    Framebuffer,
    Rgb8Format,
    RgbFloatFormat,
    clamp_region,
)


class TestFramebufferBasics:
    """Tests for construction and indexing."""

    def test_starts_with_background(self):
        fb = Framebuffer(3, 2)
        assert fb.width == 3
        assert fb.height == 2
        assert fb.pixels == (ASCII_MAP[0],) * 6

    def test_width_must_be_positive(self):
        with pytest.raises(ValueError):
            Framebuffer(0, 4)

    def test_height_must_not_be_negative(self):
        with pytest.raises(ValueError):
            Framebuffer(4, -1)

    def test_zero_height_is_allowed(self):
        fb = Framebuffer(4, 0)
        assert fb.height == 0
        assert list(fb.rows()) == []

    def test_set_pixel_and_index(self):
        fb = Framebuffer(4, 3, Rgb8Format())
        fb.set_pixel(2, 1, (1.0, 0.0, 0.0))
        assert fb[2, 1] == (255, 0, 0)
        assert fb[1, 2] == (0, 0, 0)
        assert fb.pixels[2 * 4 + 1] == (255, 0, 0)

    def test_set_pixel_out_of_bounds(self):
        fb = Framebuffer(4, 3)
        with pytest.raises(IndexError):
            fb.set_pixel(3, 0, (1.0, 1.0, 1.0))
        with pytest.raises(IndexError):
            fb.set_pixel(0, 4, (1.0, 1.0, 1.0))

    def test_rows_are_row_major(self):
        fb = Framebuffer(2, 2, Rgb8Format())
        fb.set_pixel(0, 1, (1.0, 1.0, 1.0))
        rows = list(fb.rows())
        assert rows == [((0, 0, 0), (255, 255, 255)), ((0, 0, 0), (0, 0, 0))]


class TestPixelFormats:
    """Tests for colour encoding."""

    def test_ascii_ramp_length(self):
        assert len(ASCII_MAP) == 65
        assert MAX_INDEX == 64

    @pytest.mark.parametrize(
        "color, expected",
        [
            ((0.0, 0.0, 0.0), "`"),
            ((1.0, 1.0, 1.0), "$"),
            ((0.0, 0.0, 5.0), "$"),
            ((0.5, 0.0, 0.0), ASCII_MAP[32]),
            ((-1.0, 0.2, 0.0), ASCII_MAP[12]),
            ((float("nan"), 0.0, 0.0), "`"),
        ],
    )
    def test_ascii_uses_brightest_channel(self, color, expected):
        assert AsciiFormat().encode(color) == expected

    def test_rgb8_truncates(self):
        assert Rgb8Format().encode((0.5, 1.0, 0.0)) == (127, 255, 0)

    def test_rgb8_clamps(self):
        assert Rgb8Format().encode((2.0, -1.0, float("nan"))) == (255, 0, 0)

    def test_float_clamps(self):
        assert RgbFloatFormat().encode((0.25, 3.0, -0.5)) == (0.25, 1.0, 0.0)


class TestClampRegion:
    """Tests for region resolution."""

    @pytest.mark.parametrize(
        "region, expected",
        [
            (None, range(0, 10)),
            ((None, None), range(0, 10)),
            ((2, None), range(2, 10)),
            ((None, 4), range(0, 4)),
            ((3, 7), range(3, 7)),
            (slice(3, 7), range(3, 7)),
            (range(3, 7), range(3, 7)),
            ((5, 100), range(5, 10)),
            ((-5, 3), range(0, 3)),
            ((7, 3), range(7, 7)),
            ((20, 30), range(10, 10)),
        ],
    )
    def test_clamping(self, region, expected):
        assert clamp_region(region, 10) == expected

    def test_step_is_rejected(self):
        with pytest.raises(ValueError):
            clamp_region(slice(0, 10, 2), 10)
        with pytest.raises(ValueError):
            clamp_region(range(0, 10, 3), 10)


class TestUpdate:
    """Tests for parallel region updates."""

    def test_full_update_visits_every_cell(self, float_framebuffer):
        seen = set()
        lock = threading.Lock()

        def f(row, col):
            with lock:
                seen.add((row, col))
            return (col / 16.0, row / 12.0, 0.0)

        float_framebuffer.update(None, None, f)
        assert seen == {(r, c) for r in range(12) for c in range(16)}
        assert float_framebuffer[11, 15] == (15 / 16.0, 11 / 12.0, 0.0)

    def test_partial_region_leaves_rest_untouched(self):
        fb = Framebuffer(4, 2)
        fb.update(None, (1, 3), lambda row, col: (1.0, 1.0, 1.0))
        assert ["".join(row) for row in fb.rows()] == ["`$$`", "`$$`"]

    def test_none_keeps_previous_value(self):
        fb = Framebuffer(3, 3, Rgb8Format())
        fb.update(None, None, lambda row, col: (1.0, 1.0, 1.0))
        fb.update(None, None, lambda row, col: (0.0, 0.0, 0.0) if row == col else None)
        assert fb[0, 0] == (0, 0, 0)
        assert fb[1, 1] == (0, 0, 0)
        assert fb[0, 1] == (255, 255, 255)
        assert fb[2, 0] == (255, 255, 255)

    def test_out_of_range_region_is_noop(self):
        fb = Framebuffer(4, 4)
        calls = []
        fb.update((10, 20), None, lambda row, col: calls.append((row, col)))
        assert calls == []

    def test_clear_restores_background(self, float_framebuffer):
        float_framebuffer.update(None, None, lambda row, col: (1.0, 1.0, 1.0))
        float_framebuffer.clear()
        assert float_framebuffer.pixels == ((0.0, 0.0, 0.0),) * (16 * 12)

    def test_single_worker(self):
        fb = Framebuffer(5, 5, Rgb8Format(), max_workers=1)
        fb.update((1, 4), (1, 4), lambda row, col: (1.0, 0.0, 0.0))
        assert sum(1 for p in fb.pixels if p == (255, 0, 0)) == 9

    def test_uses_multiple_threads(self):
        fb = Framebuffer(2, 64, max_workers=4)
        threads = set()
        lock = threading.Lock()
        barrier = threading.Barrier(4, timeout=5.0)
        waited = set()

        def f(row, col):
            name = threading.current_thread().name
            with lock:
                first = name not in waited
                waited.add(name)
                threads.add(name)
            if first:
                barrier.wait()
            return (0.0, 0.0, 0.0)

        fb.update(None, None, f)
        assert len(threads) == 4

    def test_exceptions_propagate(self):
        fb = Framebuffer(8, 8, max_workers=4)

        def f(row, col):
            if row == 5 and col == 5:
                raise RuntimeError("boom")
            return (1.0, 1.0, 1.0)

        with pytest.raises(RuntimeError, match="boom"):
            fb.update(None, None, f)

    def test_update_raw_stores_values_unencoded(self):
        fb = Framebuffer(3, 1)
        fb.update_raw(None, None, lambda row, col: str(col))
        assert fb.pixels == ("0", "1", "2")


class TestDrawCircle:
    """Tests for disc rasterisation."""

    def test_radius_one_is_a_plus(self):
        fb = Framebuffer(5, 5, Rgb8Format())
        fb.draw_circle(Vector2(2.0, 2.0), 1.0, (1.0, 1.0, 1.0))
        lit = {
            (row, col)
            for row in range(5)
            for col in range(5)
            if fb[row, col] == (255, 255, 255)
        }
        assert lit == {(2, 2), (1, 2), (3, 2), (2, 1), (2, 3)}

    def test_center_is_column_then_row(self):
        fb = Framebuffer(6, 4, Rgb8Format())
        fb.draw_circle(Vector2(4.0, 1.0), 0.0, (1.0, 0.0, 0.0))
        assert fb[1, 4] == (255, 0, 0)
        assert sum(1 for p in fb.pixels if p != (0, 0, 0)) == 1

    def test_clipped_at_edges(self):
        fb = Framebuffer(4, 4, Rgb8Format())
        fb.draw_circle(Vector2(0.0, 0.0), 2.0, (1.0, 1.0, 1.0))
        assert fb[0, 0] == (255, 255, 255)
        assert fb[2, 0] == (255, 255, 255)
        assert fb[2, 2] == (0, 0, 0)
