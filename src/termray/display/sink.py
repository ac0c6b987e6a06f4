"""Output sinks for finished frames."""

from __future__ import annotations

from abc import ABC, abstractmethod

from termray.display.framebuffer import Framebuffer, PixelFormat


class DisplayError(RuntimeError):
    """A sink failed to present a frame."""


class Sink(ABC):
    """Destination for a rendered framebuffer.

    A sink declares the pixel format it expects; framebuffers meant for it
    should be built with ``sink.pixel_format``.
    """

    @property
    @abstractmethod
    def pixel_format(self) -> PixelFormat:
        """The cell format this sink consumes."""

    @abstractmethod
    def present(self, framebuffer: Framebuffer) -> None:
        """Show or store the frame.

        Raises:
            DisplayError: If the output cannot be written.
        """

    def framebuffer(self, width: int, height: int) -> Framebuffer:
        """Create a framebuffer in this sink's pixel format."""
        return Framebuffer(width, height, self.pixel_format)
