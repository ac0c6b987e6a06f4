"""ASCII output to a terminal.

Example:
    >>> from termray.display.terminal import TerminalSink, default_framebuffer
    >>> sink = TerminalSink()
    >>> fb = default_framebuffer()
    >>> sink.present(fb)  # clears the screen and prints the glyph rows
"""

from __future__ import annotations

import shutil
import sys
from typing import Optional, TextIO

from termray.display.framebuffer import AsciiFormat, Framebuffer, PixelFormat
from termray.display.sink import DisplayError, Sink

# Erase the screen and move the cursor to the top-left corner
CLEAR_SCREEN = "\033[2J\033[1;1H"

# Used when the size cannot be queried (e.g. output is not a terminal)
FALLBACK_SIZE = (80, 24)

# Terminal cells are roughly twice as tall as they are wide
TERMINAL_PIXEL_ASPECT = 0.5


def terminal_size() -> tuple[int, int]:
    """Return the terminal size as (columns, lines)."""
    size = shutil.get_terminal_size(fallback=FALLBACK_SIZE)
    return size.columns, size.lines


def default_framebuffer(pixel_format: Optional[PixelFormat] = None) -> Framebuffer:
    """A framebuffer covering the whole terminal window."""
    columns, lines = terminal_size()
    return Framebuffer(max(columns, 1), max(lines, 0), pixel_format)


class TerminalSink(Sink):
    """Writes ASCII frames to a text stream.

    Args:
        stream: Destination; defaults to ``sys.stdout`` at present time.
        clear: Whether to clear the screen before each frame.
    """

    def __init__(self, stream: Optional[TextIO] = None, *, clear: bool = True) -> None:
        self._stream = stream
        self._clear = clear
        self._format = AsciiFormat()

    @property
    def pixel_format(self) -> PixelFormat:
        return self._format

    def present(self, framebuffer: Framebuffer) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        try:
            if self._clear:
                stream.write(CLEAR_SCREEN)
            for row in framebuffer.rows():
                stream.write("".join(str(cell) for cell in row))
                stream.write("\n")
            stream.flush()
        except OSError as e:
            raise DisplayError(f"Failed to write frame to terminal: {e}") from e
