"""
Tests for path post-processing including property-based tests using Hypothesis
"""

from hypothesis import example, given, strategies as st

from connector_router.geometry.point_location import PathPoint
from connector_router.routing.path_optimizer import (
    direct_path,
    merge_path,
    remove_extra_points_on_one_line,
    is_orthogonal_path,
    validate_orthogonal,
    remove_duplicate_points,
)
from connector_router.geometry.vec import Vec


def as_path(*coords):
    return [PathPoint(float(x), float(y)) for x, y in coords]


@st.composite
def orthogonal_paths(draw):
    """Random axis-aligned paths on an integer grid"""
    x, y = draw(st.integers(-50, 50)), draw(st.integers(-50, 50))
    points = [(x, y)]
    for axis, delta in draw(st.lists(st.tuples(st.integers(0, 1), st.integers(-30, 30)), min_size=1, max_size=12)):
        if axis == 0:
            x += delta
        else:
            y += delta
        points.append((x, y))
    return as_path(*points)


class TestDirectPath:
    """Obstacle-free fast paths"""

    def test_aligned_points(self):
        assert direct_path((0, 0), (0, 100)) == [(0, 0), (0, 100)]

    def test_single_elbow_moves_vertically_first(self):
        assert direct_path((0, 0), (10, 10)) == [(0, 0), (0, 10), (10, 10)]


class TestMergePath:
    """Collinear merge of search output"""

    def test_merges_vertical_run(self):
        assert merge_path([(0, 0), (0, 10), (0, 20), (10, 20)]) == [(0, 0), (0, 20), (10, 20)]

    def test_keeps_elbows(self):
        path = [(0, 0), (0, 10), (10, 10), (10, 20)]
        assert merge_path(path) == path

    def test_empty(self):
        assert merge_path([]) == []


class TestRemoveExtraPoints:
    """Collapse of collinear runs left by edits"""

    def test_collapses_runs(self):
        path = as_path((0, 0), (0, 10), (0, 20), (10, 20), (20, 20))
        result = remove_extra_points_on_one_line(path)
        assert [(p.x, p.y) for p in result] == [(0, 0), (0, 20), (20, 20)]

    def test_short_paths_untouched(self):
        path = as_path((0, 0), (5, 5))
        assert remove_extra_points_on_one_line(path) == path

    def test_keeps_pins_of_surviving_points(self):
        path = as_path((0, 0), (0, 10), (10, 10))
        path[1] = path[1].with_pins(True, False)
        assert remove_extra_points_on_one_line(path)[1].pinned_x

    def test_zero_length_segment_does_not_hide_a_run(self):
        path = as_path((0, 0), (0, 0), (1, 0), (0, 0))
        result = remove_extra_points_on_one_line(path)
        assert [(p.x, p.y) for p in result] == [(0, 0), (0, 0)]

    @given(orthogonal_paths())
    @example(as_path((0, 0), (0, 0), (1, 0), (0, 0)))
    def test_idempotent(self, path):
        """Running the collapse twice gives the same result as once"""
        once = remove_extra_points_on_one_line(path)
        assert remove_extra_points_on_one_line(once) == once

    @given(orthogonal_paths())
    def test_result_stays_orthogonal(self, path):
        assert validate_orthogonal(remove_extra_points_on_one_line(path))


class TestOrthogonalChecks:
    """Path shape predicates"""

    def test_orthogonal_path(self):
        assert is_orthogonal_path(as_path((0, 0), (0, 10), (10, 10)))

    def test_diagonal_path(self):
        assert not is_orthogonal_path(as_path((0, 0), (5, 5), (10, 10)))

    def test_remove_duplicate_points(self):
        points = [Vec(0, 0), Vec(0, 0.01), Vec(0, 10)]
        assert remove_duplicate_points(points) == [Vec(0, 0), Vec(0, 10)]
