"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere
- Tangent rays and spheres behind the origin
- Outward normals
- Agreement between the host and Taichi intersection
"""

import pytest
import taichi as ti

from termray.core.ray import Ray
from termray.core.vector import Vector3
from termray.geometry.sphere import Sphere, intersect_time


class TestSphereBasics:
    """Tests for Sphere construction."""

    def test_radius_must_be_positive(self):
        with pytest.raises(ValueError):
            Sphere(Vector3.zero(), 0.0)
        with pytest.raises(ValueError):
            Sphere(Vector3.zero(), -1.0)

    def test_device_params(self):
        sphere = Sphere(Vector3(1.0, 2.0, 3.0), 0.5)
        assert sphere.device_params() == (1.0, 2.0, 3.0, 0.5)

    def test_equality(self):
        assert Sphere(Vector3.zero(), 1.0) == Sphere(Vector3.zero(), 1.0)
        assert Sphere(Vector3.zero(), 1.0) != Sphere(Vector3.zero(), 2.0)


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """Ray from z=-5 toward the unit sphere hits the near side at t=4."""
        sphere = Sphere(Vector3.zero(), 1.0)
        ray = Ray.toward(Vector3(0.0, 0.0, -5.0), Vector3(0.0, 0.0, 1.0))
        hit = sphere.is_hit_by(ray)
        assert hit is not None
        assert hit.time == pytest.approx(4.0)
        assert hit.position.isclose(Vector3(0.0, 0.0, -1.0))

    def test_miss(self):
        sphere = Sphere(Vector3.zero(), 1.0)
        ray = Ray.toward(Vector3(0.0, 0.0, -5.0), Vector3(1.0, 0.0, 0.0))
        assert sphere.is_hit_by(ray) is None

    def test_inside_hits_far_side(self):
        """From the centre of a radius-5 sphere the hit is at t=5."""
        sphere = Sphere(Vector3.zero(), 5.0)
        ray = Ray.toward(Vector3.zero(), Vector3(0.0, 1.0, 0.0))
        hit = sphere.is_hit_by(ray)
        assert hit is not None
        assert hit.time == pytest.approx(5.0)

    def test_sphere_behind_origin(self):
        sphere = Sphere(Vector3(0.0, 0.0, 5.0), 1.0)
        ray = Ray.toward(Vector3.zero(), Vector3(0.0, 0.0, -1.0))
        assert sphere.is_hit_by(ray) is None

    def test_tangent_ahead(self):
        assert intersect_time(
            Vector3(1.0, 0.0, -5.0), Vector3(0.0, 0.0, 1.0), Vector3.zero(), 1.0
        ) == pytest.approx(5.0)

    def test_tangent_behind_is_a_miss(self):
        assert (
            intersect_time(Vector3(1.0, 0.0, 5.0), Vector3(0.0, 0.0, 1.0), Vector3.zero(), 1.0)
            is None
        )

    def test_non_finite_origin_is_a_miss(self):
        origin = Vector3(float("nan"), 0.0, 0.0)
        assert intersect_time(origin, Vector3(0.0, 0.0, 1.0), Vector3.zero(), 1.0) is None

    def test_normal_points_outward(self):
        sphere = Sphere(Vector3(1.0, 1.0, 1.0), 2.0)
        normal = sphere.normal(Vector3(1.0, 3.0, 1.0))
        assert normal.isclose(Vector3(0.0, 1.0, 0.0))


class TestTaichiSphere:
    """Tests for the Taichi intersection functions."""

    @pytest.mark.parametrize(
        "origin, direction, center, radius",
        [
            ((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0),
            ((0.0, 0.0, -5.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 1.0),
            ((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 0.0), 5.0),
            ((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 5.0), 1.0),
            ((0.3, -0.2, 1.0), (0.0, 0.0, -1.0), (0.0, 0.0, -3.0), 1.0),
        ],
    )
    def test_hit_sphere_matches_host(self, origin, direction, center, radius):
        from termray.geometry.sphere import MISS, hit_sphere, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(
            ox: ti.f32, oy: ti.f32, oz: ti.f32,
            dx: ti.f32, dy: ti.f32, dz: ti.f32,
            cx: ti.f32, cy: ti.f32, cz: ti.f32, r: ti.f32,
        ):
            result[None] = hit_sphere(
                vec3(ox, oy, oz), vec3(dx, dy, dz), vec3(cx, cy, cz), r
            )

        test_kernel(*origin, *direction, *center, radius)
        expected = intersect_time(
            Vector3(*origin), Vector3(*direction), Vector3(*center), radius
        )
        if expected is None:
            assert result[None] == MISS
        else:
            assert abs(result[None] - expected) < 1e-4

    def test_sphere_normal(self):
        from termray.geometry.sphere import sphere_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = sphere_normal(vec3(1.0, 1.0, 1.0), vec3(1.0, 3.0, 1.0))

        test_kernel()
        n = result[None]
        assert abs(n[0]) < 1e-6
        assert abs(n[1] - 1.0) < 1e-6
        assert abs(n[2]) < 1e-6
