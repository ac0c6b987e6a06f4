#!/usr/bin/env python3
"""Render a scene to the terminal or to a PNG file.

Usage:
    termray [options]

Options:
    --scene NAME            Built-in scene: demo, mirror (default: demo)
    --scene-file PATH       Load the scene from a JSON file instead
    --output PATH           Write a PNG instead of drawing in the terminal
    --preview               Show the frame in a Matplotlib window
    --width WIDTH           Output width (default: terminal width or 320)
    --height HEIGHT         Output height (default: terminal height or 240)
    --depth DEPTH           Maximum bounces per pixel (default: 4)
    --backend NAME          auto, taichi or host (default: auto)
    --arch NAME             Taichi arch: auto, cpu or gpu (default: auto)
    --position X Y Z        Camera position (default: 0 0 0)
    --rotation R P Y        Camera roll, pitch, yaw in degrees (default: 0 0 0)
    --frames N              Number of frames; the camera pans about y (default: 1)
    --fps FPS               Frame rate cap for animations (default: 24)
    --quiet                 Suppress progress output

Example:
    termray --scene mirror --depth 6
    termray --scene-file scenes/demo.json --output demo.png --width 640 --height 480
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional, Sequence

import taichi as ti

from termray.core.quaternion import EulerAngles, Versor
from termray.core.renderer import BACKENDS, Renderer
from termray.core.shading import DEFAULT_MAX_DEPTH
from termray.core.transform import Transform
from termray.core.vector import Vector3
from termray.display.export import PngSink
from termray.display.preview import PreviewSink
from termray.display.sink import Sink
from termray.display.terminal import TERMINAL_PIXEL_ASPECT, TerminalSink, terminal_size
from termray.scene.config import load_scene
from termray.scene.presets import PRESETS
from termray.scene.scene import Scene

# Default image size for file and window output
DEFAULT_IMAGE_SIZE = (320, 240)

# Pitch step (rotation about y) per animation frame, in degrees
PAN_STEP = 5.0


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="termray",
        description="Ray trace a scene of spheres into the terminal or a PNG file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=sorted(PRESETS),
        default="demo",
        help="Built-in scene (default: demo)",
    )
    parser.add_argument(
        "--scene-file",
        type=str,
        default=None,
        help="Load the scene from a JSON file",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write a PNG to this path instead of drawing in the terminal",
    )
    output.add_argument(
        "--preview",
        action="store_true",
        help="Show the frame in a Matplotlib window",
    )
    parser.add_argument("--width", type=int, default=None, help="Output width")
    parser.add_argument("--height", type=int, default=None, help="Output height")
    parser.add_argument(
        "--depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum bounces per pixel (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="auto",
        help="Rendering backend (default: auto)",
    )
    parser.add_argument(
        "--arch",
        choices=("auto", "cpu", "gpu"),
        default="auto",
        help="Taichi architecture (default: auto)",
    )
    parser.add_argument(
        "--position",
        type=float,
        nargs=3,
        default=(0.0, 0.0, 0.0),
        metavar=("X", "Y", "Z"),
        help="Camera position (default: 0 0 0)",
    )
    parser.add_argument(
        "--rotation",
        type=float,
        nargs=3,
        default=(0.0, 0.0, 0.0),
        metavar=("ROLL", "PITCH", "YAW"),
        help="Camera rotation in degrees (default: 0 0 0)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=1,
        help="Number of frames to render (default: 1)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=24.0,
        help="Frame rate cap for animations (default: 24)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def init_taichi(arch: str, quiet: bool = False) -> None:
    """Initialize Taichi, falling back to the CPU when no GPU is usable."""
    if arch == "cpu":
        ti.init(arch=ti.cpu)
        return
    try:
        ti.init(arch=ti.gpu)
        if not quiet:
            print("Using GPU backend", file=sys.stderr)
    except Exception:
        if arch == "gpu":
            raise
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend", file=sys.stderr)


def build_scene(args: argparse.Namespace) -> Scene:
    if args.scene_file is not None:
        return load_scene(args.scene_file)
    return PRESETS[args.scene]()


def build_sink(args: argparse.Namespace) -> tuple[Sink, int, int, float]:
    """Pick the sink and output size.

    Returns:
        Tuple of (sink, width, height, pixel_aspect).
    """
    if args.output is not None or args.preview:
        sink: Sink = PngSink(args.output) if args.output is not None else PreviewSink()
        width = args.width or DEFAULT_IMAGE_SIZE[0]
        height = args.height or DEFAULT_IMAGE_SIZE[1]
        return sink, width, height, 1.0

    columns, lines = terminal_size()
    width = args.width or columns
    # Leave the last line for the cursor
    height = args.height or max(lines - 1, 1)
    return TerminalSink(), width, height, TERMINAL_PIXEL_ASPECT


def run(args: argparse.Namespace) -> None:
    """Render the requested frames."""
    scene = build_scene(args)
    sink, width, height, pixel_aspect = build_sink(args)

    roll, pitch, yaw = args.rotation
    view = Transform(
        position=Vector3(*args.position),
        rotation=Versor.from_euler(EulerAngles(roll, pitch, yaw)),
    )
    renderer = Renderer(
        sink.framebuffer(width, height),
        scene,
        backend=args.backend,
        view=view,
        pixel_aspect=pixel_aspect,
    )

    if not args.quiet:
        print(
            f"Rendering {width}x{height} with the {renderer.resolve_backend()} backend...",
            file=sys.stderr,
        )

    budget = 1.0 / args.fps if args.fps > 0 else 0.0
    for frame in range(args.frames):
        start = time.perf_counter()
        renderer.view = Transform(
            position=view.position,
            rotation=Versor.from_euler(EulerAngles(roll, pitch + frame * PAN_STEP, yaw)),
        )
        renderer.present(sink, max_depth=args.depth)

        remaining = budget - (time.perf_counter() - start)
        if frame < args.frames - 1 and remaining > 0:
            time.sleep(remaining)

    if args.output is not None and not args.quiet:
        print(f"Saved to: {args.output}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    try:
        init_taichi(args.arch, args.quiet)
        run(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
