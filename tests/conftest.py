"""Pytest configuration for termray tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti

from termray.core.vector import Vector3
from termray.display.framebuffer import Framebuffer, RgbFloatFormat
from termray.geometry.sphere import Sphere
from termray.lighting.ambient import Ambient
from termray.lighting.point import Point
from termray.scene.element import Material
from termray.scene.scene import Scene


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def red_sphere_scene() -> Scene:
    """A unit red sphere at z = -3, lit by a point light at the origin."""
    scene = Scene()
    scene.add(Sphere(Vector3(0.0, 0.0, -3.0), 1.0), Material(Vector3(1.0, 0.0, 0.0)))
    scene.add_light(Point(Vector3(0.0, 0.0, 0.0), Vector3(1.0, 1.0, 1.0), 4.0))
    return scene


@pytest.fixture
def mirror_pair_scene() -> Scene:
    """A half mirror facing a green sphere, with ambient and point lights."""
    scene = Scene()
    scene.add(
        Sphere(Vector3(0.0, 0.0, -4.0), 1.0),
        Material(Vector3(0.5, 0.5, 0.5), reflectiveness=Vector3.splat(0.5)),
    )
    scene.add(
        Sphere(Vector3(0.0, 0.0, 2.0), 1.0),
        Material(Vector3(0.0, 1.0, 0.0)),
    )
    scene.add_light(Ambient(Vector3.splat(0.2)))
    scene.add_light(Point(Vector3(0.0, 2.0, -1.0), Vector3(1.0, 1.0, 1.0), 3.0))
    return scene


@pytest.fixture
def float_framebuffer() -> Framebuffer:
    """A small float RGB framebuffer."""
    return Framebuffer(16, 12, RgbFloatFormat())
