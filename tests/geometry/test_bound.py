"""
Tests for Bound and the vector helpers
"""

import math

import pytest
from hypothesis import given, strategies as st

from connector_router.geometry.bound import Bound
from connector_router.geometry.vec import Vec, line_intersection, nearest_point_on_line, cubic_point


class TestBoundExpand:
    """Growing and shrinking bounds"""

    def test_uniform_expand(self):
        """A single argument grows every side by the same amount"""
        assert Bound(0, 0, 10, 10).expand(5) == Bound(-5, -5, 20, 20)

    def test_per_side_expand(self):
        """left, top, right, bottom are applied independently"""
        assert Bound(0, 0, 10, 10).expand(1, 2, 3, 4) == Bound(-1, -2, 14, 16)

    def test_over_shrink_collapses_to_center(self):
        """Shrinking past zero collapses onto the center line instead of going negative"""
        assert Bound(0, 0, 10, 10).expand(-6) == Bound(5, 5, 0, 0)

    @given(
        st.floats(-1000, 1000), st.floats(-1000, 1000),
        st.floats(0, 500), st.floats(0, 500), st.floats(-100, 100),
    )
    def test_size_never_negative(self, x, y, w, h, amount):
        """Width and height stay non-negative for any expansion"""
        expanded = Bound(x, y, w, h).expand(amount)
        assert expanded.w >= 0
        assert expanded.h >= 0


class TestBoundQueries:
    """Containment, crossing and relative coordinates"""

    def test_midpoints_order(self):
        """Midpoints are top, right, bottom, left"""
        assert Bound(0, 0, 100, 50).midpoints == [(50, 0), (100, 25), (50, 50), (0, 25)]

    def test_contains_point_is_inclusive(self):
        bound = Bound(0, 0, 10, 10)
        assert bound.contains_point((10, 10))
        assert not bound.contains_point((10.5, 10))
        assert bound.contains_point((10.5, 10), tolerance=1)

    def test_segment_through_interior(self):
        assert Bound(0, 0, 10, 10).segment_crosses_interior((-5, 5), (15, 5))

    def test_segment_along_edge_does_not_cross(self):
        """Running along an edge is allowed"""
        assert not Bound(0, 0, 10, 10).segment_crosses_interior((0, 0), (10, 0))
        assert not Bound(0, 0, 10, 10).segment_crosses_interior((10, -5), (10, 15))

    def test_segment_outside_does_not_cross(self):
        assert not Bound(0, 0, 10, 10).segment_crosses_interior((-5, -5), (-5, 15))

    def test_relative_round_trip(self):
        bound = Bound(10, 20, 100, 50)
        assert bound.to_relative((60, 45)) == (0.5, 0.5)
        assert bound.from_relative((1, 0)) == (110, 20)

    def test_unite_and_include(self):
        assert Bound(0, 0, 10, 10).unite(Bound(20, 5, 10, 10)) == Bound(0, 0, 30, 15)
        assert Bound(0, 0, 10, 10).include((-5, 20)) == Bound(-5, 0, 15, 20)


class TestBoundRotation:
    """Rotation-aware helpers"""

    def test_rotated_point_quarter_turn(self):
        """A quarter turn maps the top midpoint onto the right side"""
        bound = Bound(0, 0, 100, 100, rotate=90)
        assert bound.rotated_point((50, 0)).almost_equal((100, 50))
        assert bound.unrotated_point((100, 50)).almost_equal((50, 0))

    def test_aabb_of_rotated_rectangle(self):
        """A 100x50 rectangle turned 90 degrees covers 50x100 around the same center"""
        aabb = Bound(0, 0, 100, 50, rotate=90).aabb()
        assert aabb.almost_equal(Bound(25, -25, 50, 100))

    def test_aabb_without_rotation_is_identity(self):
        assert Bound(1, 2, 3, 4).aabb() == Bound(1, 2, 3, 4)


class TestVecHelpers:
    """Intersection, projection and Bezier evaluation"""

    def test_segment_intersection(self):
        assert line_intersection((0, 0), (10, 10), (0, 10), (10, 0)) == Vec(5, 5)

    def test_parallel_segments_do_not_intersect(self):
        assert line_intersection((0, 0), (10, 0), (0, 5), (10, 5)) is None

    def test_infinite_lines_intersect_outside_segments(self):
        assert line_intersection((0, 0), (1, 0), (5, -1), (5, -2)) is None
        assert line_intersection((0, 0), (1, 0), (5, -1), (5, -2), infinite=True) == Vec(5, 0)

    def test_nearest_point_on_segment_is_clamped(self):
        assert nearest_point_on_line((0, 0), (10, 0), (20, 5)) == Vec(10, 0)
        assert nearest_point_on_line((0, 0), (10, 0), (20, 5), clamp_to_segment=False) == Vec(20, 0)

    def test_cubic_midpoint_with_zero_handles(self):
        """Zero handles make the cubic a straight line"""
        assert cubic_point((0, 0), (0, 0), (100, 100), (100, 100), 0.5) == Vec(50, 50)

    def test_normalize_zero_vector(self):
        assert Vec(0, 0).normalize() == Vec(0, 0)
        assert math.isclose(Vec(3, 4).normalize().len(), 1.0)

    def test_rotate(self):
        assert Vec(1, 0).rotate(math.pi / 2).almost_equal((0, 1))
        assert Vec(1, 0).project_length((0, 2)) == pytest.approx(0)
