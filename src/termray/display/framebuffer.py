"""Framebuffer with pixel formats and parallel region updates.

A Framebuffer is a flat, row-major list of ``width x height`` cells. What a
cell holds is decided by its PixelFormat:

    - AsciiFormat: one glyph from a 65-character brightness ramp
    - Rgb8Format: an (r, g, b) tuple of ints in [0, 255]
    - RgbFloatFormat: an (r, g, b) tuple of floats in [0, 1]

Region updates evaluate a callback for every cell of a rectangle. Rows are
split into disjoint chunks and handed to a thread pool; every task writes
only its own rows.

Example:
    >>> from termray.display.framebuffer import Framebuffer
    >>> fb = Framebuffer(4, 2)
    >>> fb.update(None, (1, 3), lambda row, col: (1.0, 1.0, 1.0))
    >>> ["".join(row) for row in fb.rows()]
    ['`$$`', '`$$`']
"""

from __future__ import annotations

import math
import os
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, Union

from termray.core.vector import Vector2

# Brightness ramp, darkest first
ASCII_MAP = "`^\",:;Il!i~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"
MAX_INDEX = len(ASCII_MAP) - 1

# Region bound: slice, range, (start, stop) with optional ends, or None for all
Region = Union[slice, range, tuple[Optional[int], Optional[int]], None]

Color = Sequence[float]


def _clamp_unit(value: float) -> float:
    """Clamp to [0, 1], mapping NaN to 0."""
    if not value > 0.0:
        return 0.0
    return min(float(value), 1.0)


# =============================================================================
# Pixel Formats
# =============================================================================


class PixelFormat(ABC):
    """How colours are stored in framebuffer cells."""

    background: Any

    @abstractmethod
    def encode(self, color: Color) -> Any:
        """Convert an RGB colour into a cell value."""


class AsciiFormat(PixelFormat):
    """Glyph cells chosen by brightness.

    Brightness is the HSV value (largest channel), clamped to [0, 1] and
    mapped onto ``ASCII_MAP`` by truncation.
    """

    background = ASCII_MAP[0]

    def encode(self, color: Color) -> str:
        value = _clamp_unit(max(_clamp_unit(c) for c in color))
        return ASCII_MAP[int(value * MAX_INDEX)]


class Rgb8Format(PixelFormat):
    """8-bit RGB cells: clamp, scale by 255, truncate."""

    background = (0, 0, 0)

    def encode(self, color: Color) -> tuple[int, int, int]:
        r, g, b = (int(_clamp_unit(c) * 255.0) for c in color)
        return (r, g, b)


class RgbFloatFormat(PixelFormat):
    """Float RGB cells clamped to [0, 1]."""

    background = (0.0, 0.0, 0.0)

    def encode(self, color: Color) -> tuple[float, float, float]:
        r, g, b = (_clamp_unit(c) for c in color)
        return (r, g, b)


# =============================================================================
# Regions
# =============================================================================


def clamp_region(region: Region, length: int) -> range:
    """Resolve a region to a half-open range inside ``[0, length)``.

    Missing ends mean "from the start" and "to the end". Negative bounds are
    clamped to 0, not counted from the end.

    Raises:
        ValueError: If a slice or range has a step other than 1.
    """
    if region is None:
        start, stop = None, None
    elif isinstance(region, (slice, range)):
        if region.step not in (None, 1):
            raise ValueError(f"Region step must be 1, got {region.step}")
        start, stop = region.start, region.stop
    else:
        start, stop = region

    start = 0 if start is None else min(max(start, 0), length)
    stop = length if stop is None else min(max(stop, 0), length)
    return range(start, max(start, stop))


def _chunks(rows: range, count: int) -> list[range]:
    """Split ``rows`` into at most ``count`` contiguous, disjoint ranges."""
    if len(rows) == 0:
        return []
    size = math.ceil(len(rows) / count)
    return [range(start, min(start + size, rows.stop)) for start in range(rows.start, rows.stop, size)]


# =============================================================================
# Framebuffer
# =============================================================================


class Framebuffer:
    """A width x height grid of encoded pixels.

    Attributes:
        width: Number of columns (fixed).
        height: Number of rows.
        pixel_format: Encoder for cell values.

    Args:
        width: Number of columns (positive).
        height: Number of rows (non-negative).
        pixel_format: Defaults to AsciiFormat.
        max_workers: Thread pool size for updates; defaults to os.cpu_count().

    Raises:
        ValueError: If ``width`` is not positive or ``height`` is negative.
    """

    def __init__(
        self,
        width: int,
        height: int,
        pixel_format: Optional[PixelFormat] = None,
        *,
        max_workers: Optional[int] = None,
    ) -> None:
        if width <= 0:
            raise ValueError(f"Framebuffer width = {width} must be positive")
        if height < 0:
            raise ValueError(f"Framebuffer height = {height} must not be negative")
        self.pixel_format = pixel_format if pixel_format is not None else AsciiFormat()
        self.max_workers = max_workers or os.cpu_count() or 1
        self._width = width
        self._pixels: list[Any] = [self.pixel_format.background] * (width * height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return len(self._pixels) // self._width

    @property
    def pixels(self) -> tuple[Any, ...]:
        """Snapshot of every cell in row-major order."""
        return tuple(self._pixels)

    def __getitem__(self, index: tuple[int, int]) -> Any:
        row, col = index
        return self._pixels[self._offset(row, col)]

    def _offset(self, row: int, col: int) -> int:
        if not (0 <= row < self.height and 0 <= col < self._width):
            raise IndexError(
                f"Pixel ({row}, {col}) outside {self._width}x{self.height} framebuffer"
            )
        return row * self._width + col

    def rows(self) -> Iterator[tuple[Any, ...]]:
        """Iterate over rows, top to bottom."""
        for start in range(0, len(self._pixels), self._width):
            yield tuple(self._pixels[start : start + self._width])

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def update(
        self,
        rows: Region,
        cols: Region,
        f: Callable[[int, int], Optional[Color]],
    ) -> None:
        """Recompute a rectangle of pixels in parallel.

        ``f(row, col)`` is called for every cell of the clamped region. A
        colour result is encoded by the pixel format; None leaves the cell
        as it is.

        Args:
            rows: Row region (half-open, clamped to the buffer).
            cols: Column region (half-open, clamped to the buffer).
            f: Colour callback, called concurrently from worker threads.
        """
        encode = self.pixel_format.encode

        def encoded(row: int, col: int) -> Any:
            color = f(row, col)
            return None if color is None else encode(color)

        self.update_raw(rows, cols, encoded)

    def update_raw(
        self,
        rows: Region,
        cols: Region,
        f: Callable[[int, int], Any],
    ) -> None:
        """Like ``update`` but ``f`` returns already-encoded cell values.

        Exceptions raised by ``f`` propagate to the caller once every
        chunk has finished.
        """
        row_range = clamp_region(rows, self.height)
        col_range = clamp_region(cols, self._width)
        if len(row_range) == 0 or len(col_range) == 0:
            return

        pixels = self._pixels
        width = self._width

        def fill(chunk: range) -> None:
            for row in chunk:
                base = row * width
                for col in col_range:
                    value = f(row, col)
                    if value is not None:
                        pixels[base + col] = value

        chunks = _chunks(row_range, self.max_workers)
        if len(chunks) == 1:
            fill(chunks[0])
            return

        with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
            futures = [executor.submit(fill, chunk) for chunk in chunks]
        for future in futures:
            future.result()

    def set_pixel(self, row: int, col: int, color: Color) -> None:
        """Encode and store a single pixel.

        Raises:
            IndexError: If (row, col) is outside the buffer.
        """
        self._pixels[self._offset(row, col)] = self.pixel_format.encode(color)

    def clear(self) -> None:
        """Reset every cell to the format's background."""
        self._pixels[:] = [self.pixel_format.background] * len(self._pixels)

    def draw_circle(self, center: Vector2, radius: float, color: Color) -> None:
        """Fill a disc of pixels.

        The bounding box is ``round(center -/+ radius)`` with both ends
        included; inside it, cells whose (col, row) lies within ``radius`` of
        ``center`` are set.

        Args:
            center: Disc centre as (x = column, y = row).
            radius: Disc radius in pixels.
            color: Fill colour.
        """
        value = self.pixel_format.encode(color)
        cols = (round(center.x - radius), round(center.x + radius) + 1)
        rows = (round(center.y - radius), round(center.y + radius) + 1)

        def inside(row: int, col: int) -> Any:
            if Vector2(float(col), float(row)).distance(center) <= radius:
                return value
            return None

        self.update_raw(rows, cols, inside)

    def __repr__(self) -> str:
        return (
            f"Framebuffer(width={self._width}, height={self.height}, "
            f"pixel_format={type(self.pixel_format).__name__})"
        )
