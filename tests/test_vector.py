"""Unit tests for the vector value types.

Tests cover:
- Construction, accessors and immutability
- Scalar and per-lane arithmetic
- Dot and cross products
- Unit vector refinement
- Lane width conversions
"""

import math

import pytest

from termray.core.vector import EPSILON, UnitVector3, Vector2, Vector3, Vector4


class TestConstruction:
    """Tests for building vectors."""

    def test_components(self):
        v = Vector3(1.0, 2.0, 3.0)
        assert (v.x, v.y, v.z) == (1.0, 2.0, 3.0)
        assert len(v) == 3
        assert list(v) == [1.0, 2.0, 3.0]

    def test_wrong_component_count(self):
        with pytest.raises(TypeError):
            Vector3(1.0, 2.0)

    def test_splat_and_zero(self):
        assert Vector4.splat(2.0) == Vector4(2.0, 2.0, 2.0, 2.0)
        assert Vector2.zero() == Vector2(0.0, 0.0)

    def test_immutable(self):
        v = Vector3(1.0, 2.0, 3.0)
        with pytest.raises(AttributeError):
            v.x = 5.0

    def test_to_numpy_is_a_copy(self):
        v = Vector3(1.0, 2.0, 3.0)
        array = v.to_numpy()
        array[0] = 10.0
        assert v.x == 1.0

    def test_hashable(self):
        assert len({Vector3(1.0, 0.0, 0.0), Vector3(1.0, 0.0, 0.0)}) == 1


class TestArithmetic:
    """Tests for vector arithmetic."""

    def test_add_sub_neg(self):
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(4.0, 5.0, 6.0)
        assert a + b == Vector3(5.0, 7.0, 9.0)
        assert b - a == Vector3(3.0, 3.0, 3.0)
        assert -a == Vector3(-1.0, -2.0, -3.0)

    def test_scalar_multiply_both_sides(self):
        v = Vector2(1.0, -2.0)
        assert v * 2.0 == Vector2(2.0, -4.0)
        assert 2.0 * v == Vector2(2.0, -4.0)

    def test_scalar_divide(self):
        assert Vector3(2.0, 4.0, 6.0) / 2.0 == Vector3(1.0, 2.0, 3.0)

    def test_vector_times_vector_is_rejected(self):
        with pytest.raises(TypeError):
            Vector3(1.0, 2.0, 3.0) * Vector3(1.0, 2.0, 3.0)

    def test_mixed_widths_are_rejected(self):
        with pytest.raises(TypeError):
            Vector3(1.0, 2.0, 3.0) + Vector4(1.0, 2.0, 3.0, 4.0)

    def test_wide_mul_and_div(self):
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(2.0, 4.0, 0.5)
        assert a.wide_mul(b) == Vector3(2.0, 8.0, 1.5)
        assert a.wide_div(b) == Vector3(0.5, 0.5, 6.0)

    def test_reduce_add(self):
        assert Vector4(1.0, 2.0, 3.0, 4.0).reduce_add() == 10.0

    def test_clamp(self):
        assert Vector3(-1.0, 0.5, 2.0).clamp(0.0, 1.0) == Vector3(0.0, 0.5, 1.0)


class TestProducts:
    """Tests for dot and cross products."""

    def test_dot_is_symmetric(self):
        a = Vector3(1.0, -2.0, 0.5)
        b = Vector3(3.0, 0.25, -4.0)
        assert a.dot(b) == b.dot(a)
        assert a @ b == a.dot(b)

    def test_norms(self):
        v = Vector3(3.0, 4.0, 0.0)
        assert v.sq_norm() == 25.0
        assert v.norm() == 5.0
        assert v.distance(Vector3.zero()) == 5.0

    def test_cross_basis(self):
        x = Vector3(1.0, 0.0, 0.0)
        y = Vector3(0.0, 1.0, 0.0)
        z = Vector3(0.0, 0.0, 1.0)
        assert x.cross(y) == z
        assert y.cross(z) == x
        assert z.cross(x) == y

    def test_cross_is_anti_commutative(self):
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(-4.0, 0.5, 2.0)
        assert a.cross(b) == -b.cross(a)

    def test_cross_is_orthogonal(self):
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(-4.0, 0.5, 2.0)
        c = a.cross(b)
        assert abs(c.dot(a)) < 1e-12
        assert abs(c.dot(b)) < 1e-12

    def test_zxy_swizzle(self):
        assert Vector3(1.0, 2.0, 3.0).zxy == Vector3(3.0, 1.0, 2.0)


class TestUnitVector:
    """Tests for the UnitVector3 refinement."""

    def test_direct_construction_is_rejected(self):
        with pytest.raises(TypeError):
            UnitVector3(1.0, 0.0, 0.0)

    def test_from_vector_accepts_unit(self):
        unit = UnitVector3.from_vector(Vector3(0.0, 1.0, 0.0))
        assert isinstance(unit, UnitVector3)

    def test_from_vector_rejects_non_unit(self):
        assert UnitVector3.from_vector(Vector3(2.0, 0.0, 0.0)) is None
        assert UnitVector3.from_vector(Vector3(1.0, 1.0, 0.0)) is None

    def test_from_vector_tolerance(self):
        # Squared norm is 1 + EPSILON / 2, inside the tolerance
        nearly = Vector3(math.sqrt(1.0 + EPSILON / 2.0), 0.0, 0.0)
        assert UnitVector3.from_vector(nearly) is not None

    def test_normalize(self):
        unit = UnitVector3.normalize(Vector3(0.0, 3.0, 4.0))
        assert isinstance(unit, UnitVector3)
        assert unit.isclose(Vector3(0.0, 0.6, 0.8))

    def test_normalize_zero_is_not_finite(self):
        unit = UnitVector3.normalize(Vector3.zero())
        assert not unit.is_finite()
        assert unit.is_nan()

    def test_new_unchecked_asserts(self):
        with pytest.raises(AssertionError):
            UnitVector3.new_unchecked(Vector3(2.0, 0.0, 0.0))

    def test_arithmetic_drops_refinement(self):
        unit = UnitVector3.normalize(Vector3(1.0, 0.0, 0.0))
        assert not isinstance(unit * 2.0, UnitVector3)
        assert isinstance(-unit, UnitVector3)


class TestLaneConversions:
    """Tests for moving between 2, 3 and 4 lanes."""

    def test_vector2_extend(self):
        assert Vector2(1.0, 2.0).extend(3.0) == Vector3(1.0, 2.0, 3.0)

    def test_from_vector2(self):
        assert Vector3.from_vector2(Vector2(1.0, 2.0), 3.0) == Vector3(1.0, 2.0, 3.0)

    def test_vector3_extend_and_back(self):
        v = Vector3(1.0, 2.0, 3.0)
        wide = v.extend(1.0)
        assert wide == Vector4(1.0, 2.0, 3.0, 1.0)
        assert wide.xyz == v

    def test_extend_defaults_to_direction(self):
        assert Vector3(1.0, 2.0, 3.0).extend().w == 0.0
