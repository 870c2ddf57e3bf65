"""
Candidate point generation for orthogonal routing.

The A* search does not walk a uniform grid. Instead it runs over a small set
of "interesting" points derived from the two endpoint bounds: corners and
edge midpoints, gaps between facing edges, and projections of every bound
edge onto the others. Each candidate carries a priority weight; higher weights
mark preferred through-points and are only used to break ties.
"""

from typing import List, Optional, Sequence, Tuple, NamedTuple
import logging

from ..geometry.bound import Bound, Line
from ..geometry.vec import Vec, almost_equal, line_intersection, distance_to_line, is_overlap
from ..geometry.point_location import PathPoint
from ..core.exceptions import CandidateSetError
from .path_optimizer import downscale_precision

logger = logging.getLogger(__name__)

# Side order used for offsets: left, top, right, bottom
LEFT, TOP, RIGHT, BOTTOM = range(4)

PRIORITY_NONE = 0
PRIORITY_CENTER = 2
PRIORITY_MID = 3
PRIORITY_GAP = 6
MAX_PRIORITY = PRIORITY_GAP


class Candidate(NamedTuple):
    """A routing candidate point with its priority weight."""
    x: float
    y: float
    priority: int = PRIORITY_NONE

    @property
    def vec(self) -> Vec:
        return Vec(self.x, self.y)


def _candidate(point: Sequence[float], priority: int = PRIORITY_NONE) -> List[float]:
    x, y = downscale_precision(point)
    return [x, y, priority]


def compute_offsets(
    start_bound: Optional[Bound],
    end_bound: Optional[Bound],
    default: float = 20.0
) -> Tuple[List[float], List[float]]:
    """
    Clearance kept on each side (left, top, right, bottom) of both bounds.

    When the two bounds face each other across a gap narrower than twice the
    default clearance, the facing sides get half the gap so the expanded
    corridors never overlap. A zero result (bounds touching) falls back to
    the default.
    """
    start_offset = [default] * 4
    end_offset = [default] * 4
    if not (start_bound and end_bound):
        return start_offset, end_offset

    def shrink(side: int, facing: bool, a: Line, b: Line):
        if facing:
            dist = distance_to_line(a[0], a[1], b[0], clamp_to_segment=False)
            start_offset[side] = max(min(dist / 2, start_offset[side]), 0)

    # end bound above the start bound
    shrink(
        TOP,
        is_overlap(start_bound.upper_line, end_bound.lower_line, 0)
        and start_bound.upper_line[0].y > end_bound.lower_line[0].y,
        start_bound.upper_line, end_bound.lower_line,
    )
    # end bound right of the start bound
    shrink(
        RIGHT,
        is_overlap(start_bound.right_line, end_bound.left_line, 1)
        and start_bound.right_line[0].x < end_bound.left_line[0].x,
        start_bound.right_line, end_bound.left_line,
    )
    # end bound below the start bound
    shrink(
        BOTTOM,
        is_overlap(start_bound.lower_line, end_bound.upper_line, 0)
        and start_bound.lower_line[0].y < end_bound.upper_line[0].y,
        start_bound.lower_line, end_bound.upper_line,
    )
    # end bound left of the start bound
    shrink(
        LEFT,
        is_overlap(start_bound.left_line, end_bound.right_line, 1)
        and start_bound.left_line[0].x > end_bound.right_line[0].x,
        start_bound.left_line, end_bound.right_line,
    )

    # Facing sides share one value
    for start_side, end_side in ((LEFT, RIGHT), (TOP, BOTTOM), (RIGHT, LEFT), (BOTTOM, TOP)):
        value = min(start_offset[start_side], end_offset[end_side])
        if value == 0:
            value = default
        start_offset[start_side] = end_offset[end_side] = value

    return start_offset, end_offset


def expand_bound(bound: Optional[Bound], offsets: Sequence[float]) -> Optional[Bound]:
    if bound is None:
        return None
    return bound.expand(offsets[LEFT], offsets[TOP], offsets[RIGHT], offsets[BOTTOM])


def next_point(bound: Bound, point: PathPoint, offsets: Sequence[float]) -> Vec:
    """
    First step of a route leaving ``bound`` from ``point``.

    Points on an edge step straight out by that side's offset. Points that
    are not on an edge (rotated shapes) step out along the axis closest to
    their tangent, to just beyond the bound.
    """
    x, y = point.x, point.y

    if almost_equal(bound.x, x):
        return Vec(x - offsets[LEFT], y)
    if almost_equal(bound.y, y):
        return Vec(x, y - offsets[TOP])
    if almost_equal(bound.max_x, x):
        return Vec(x + offsets[RIGHT], y)
    if almost_equal(bound.max_y, y):
        return Vec(x, y + offsets[BOTTOM])

    direction = (Vec(x, y) - bound.center).normalize()
    tangent = point.tangent
    horizontal = abs(tangent.x) < abs(tangent.y)

    if horizontal:
        if direction.x > 0:
            return Vec(bound.max_x + offsets[RIGHT], y)
        return Vec(bound.x - offsets[LEFT], y)

    if direction.y > 0:
        return Vec(x, bound.max_y + offsets[BOTTOM])
    return Vec(x, bound.y - offsets[TOP])


def _push(points: List[List[float]], vecs: Sequence[Sequence[float]], priority: int = PRIORITY_NONE):
    points.extend(_candidate(v, priority) for v in vecs)


def _push_intersection(points: List[List[float]], a: Line, b: Line, priority: int = PRIORITY_NONE):
    hit = line_intersection(a[0], a[1], b[0], b[1], infinite=True)
    if hit is not None:
        _push(points, [hit], priority)


def _push_outer_points(points: List[List[float]], expand_start: Bound, expand_end: Bound, outer: Bound):
    _push(points, outer.vertices_and_midpoints)
    _push(points, [outer.center], PRIORITY_CENTER)

    for line in (
        expand_start.upper_line, expand_start.horizontal_line, expand_start.lower_line,
        expand_end.upper_line, expand_end.horizontal_line, expand_end.lower_line,
    ):
        _push_intersection(points, line, outer.left_line)
        _push_intersection(points, line, outer.right_line)

    for line in (
        expand_start.left_line, expand_start.vertical_line, expand_start.right_line,
        expand_end.left_line, expand_end.vertical_line, expand_end.right_line,
    ):
        _push_intersection(points, line, outer.upper_line)
        _push_intersection(points, line, outer.lower_line)


def _push_bound_mid_points(
    points: List[List[float]],
    bound1: Bound,
    bound2: Bound,
    expand1: Bound,
    expand2: Bound
):
    """Points on the centre line of the gap when ``bound2`` lies right of or below ``bound1``."""
    if bound1.max_x < bound2.x:
        mid_x = (bound1.max_x + bound2.x) / 2
        vertical = (Vec(mid_x, 0), Vec(mid_x, 1))
        for index, line in enumerate((
            expand1.horizontal_line, expand2.horizontal_line,
            expand1.upper_line, expand1.lower_line,
            expand2.upper_line, expand2.lower_line,
        )):
            _push_intersection(points, line, vertical, PRIORITY_GAP if index < 2 else PRIORITY_MID)

    if bound1.max_y < bound2.y:
        mid_y = (bound1.max_y + bound2.y) / 2
        horizontal = (Vec(0, mid_y), Vec(1, mid_y))
        for index, line in enumerate((
            expand1.vertical_line, expand2.vertical_line,
            expand1.left_line, expand1.right_line,
            expand2.left_line, expand2.right_line,
        )):
            _push_intersection(points, line, horizontal, PRIORITY_GAP if index < 2 else PRIORITY_MID)


def _push_gap_mid_point(
    points: List[List[float]],
    point: Sequence[float],
    bound: Bound,
    bound2: Bound,
    expand: Bound,
    expand2: Bound
):
    """Midpoint between facing edges on the line leaving ``point``."""
    px, py = point[0], point[1]

    if almost_equal(py, bound.y, 0.02) or almost_equal(py, bound.max_y, 0.02):
        # on top or on bottom: walk vertically
        probe = (Vec(px, py), Vec(px, py + 1))
        hits = [
            line_intersection(probe[0], probe[1], line[0], line[1], infinite=True)
            for line in (bound.upper_line, bound.lower_line, bound2.upper_line, bound2.lower_line)
        ]
        hits.sort(key=lambda v: v.y)
        mid = hits[1].lerp(hits[2], 0.5)
        _push(points, [mid], PRIORITY_GAP)
        for line in (expand.left_line, expand.right_line, expand2.left_line, expand2.right_line):
            _push_intersection(points, (mid, Vec(mid.x + 1, mid.y)), line)
    else:
        probe = (Vec(px, py), Vec(px + 1, py))
        hits = [
            line_intersection(probe[0], probe[1], line[0], line[1], infinite=True)
            for line in (bound.left_line, bound.right_line, bound2.left_line, bound2.right_line)
        ]
        hits.sort(key=lambda v: v.x)
        mid = hits[1].lerp(hits[2], 0.5)
        _push(points, [mid], PRIORITY_GAP)
        for line in (expand.upper_line, expand.lower_line, expand2.upper_line, expand2.lower_line):
            _push_intersection(points, (mid, Vec(mid.x, mid.y + 1)), line)


def remove_duplicate_points(points: List[List[float]], tolerance: float = 0.02) -> List[List[float]]:
    """
    Snap near-equal coordinates together, then collapse duplicates.

    Coordinates within ``tolerance`` of their sorted predecessor are snapped
    onto it (x first, then y), after which points equal on both axes are
    collapsed keeping the copy with the highest priority.
    """
    points = [list(p) for p in points]

    points.sort(key=lambda p: p[0])
    for i in range(1, len(points)):
        if almost_equal(points[i][0], points[i - 1][0], tolerance):
            points[i][0] = points[i - 1][0]

    points.sort(key=lambda p: p[1])
    for i in range(1, len(points)):
        if almost_equal(points[i][1], points[i - 1][1], tolerance):
            points[i][1] = points[i - 1][1]

    points.sort(key=lambda p: (p[0], p[1]))
    i = 1
    while i < len(points):
        cur = points[i]
        last = points[i - 1]
        if almost_equal(cur[0], last[0], tolerance) and almost_equal(cur[1], last[1], tolerance):
            if cur[2] <= last[2]:
                del points[i]
            else:
                del points[i - 1]
            continue
        i += 1

    return points


def assert_unique(points: Sequence[Sequence[float]]):
    """Raise ``CandidateSetError`` when two candidates share coordinates."""
    keys = sorted(f"{p[0]},{p[1]}" for p in points)
    for prev, cur in zip(keys, keys[1:]):
        if prev == cur:
            logger.error(f"Duplicate routing candidate after deduplication: {cur}")
            raise CandidateSetError(f"duplicate candidate point {cur}")


def _find(points: Sequence[Sequence[float]], target: Sequence[float], tolerance: float) -> Optional[List[float]]:
    for p in points:
        if almost_equal(p[0], target[0], tolerance) and almost_equal(p[1], target[1], tolerance):
            return p
    return None


def collect_candidates(
    start_point: Sequence[float],
    end_point: Sequence[float],
    next_start: Sequence[float],
    last_end: Sequence[float],
    start_bound: Optional[Bound],
    end_bound: Optional[Bound],
    expand_start: Optional[Bound],
    expand_end: Optional[Bound],
    tolerance: float = 0.02
) -> Tuple[List[Candidate], Candidate, Candidate]:
    """
    Build the candidate point set for one search.

    Args:
        start_point, end_point: Route endpoints (on the bound edges when bounded)
        next_start, last_end: First and last points outside the expanded bounds
        start_bound, end_bound: Unexpanded endpoint bounds (None for free ends)
        expand_start, expand_end: Bounds grown by their clearance offsets
        tolerance: Deduplication tolerance

    Returns:
        Tuple of (candidates, search start, search goal)

    Raises:
        CandidateSetError: If deduplication leaves coincident candidates
    """
    line_bound = Bound.from_points([start_point, end_point])
    outer = expand_start.unite(expand_end) if expand_start and expand_end else None

    points: List[List[float]] = [_candidate(next_start), _candidate(last_end)]
    _push(points, line_bound.vertices_and_midpoints)

    if not start_bound or not end_bound:
        _push(points, [line_bound.center], PRIORITY_MID)

    if outer:
        _push_outer_points(points, expand_start, expand_end, outer)

    if start_bound and end_bound:
        _push_gap_mid_point(points, start_point, start_bound, end_bound, expand_start, expand_end)
        _push_gap_mid_point(points, end_point, end_bound, start_bound, expand_end, expand_start)
        _push_bound_mid_points(points, start_bound, end_bound, expand_start, expand_end)
        _push_bound_mid_points(points, end_bound, start_bound, expand_end, expand_start)

    if expand_start:
        _push(points, expand_start.vertices_and_midpoints)
        _push(points, expand_start.include(last_end).points)

    if expand_end:
        _push(points, expand_end.vertices_and_midpoints)
        _push(points, expand_end.include(next_start).points)

    points = remove_duplicate_points(points, tolerance)
    assert_unique(points)

    start = _find(points, downscale_precision(next_start), tolerance)
    goal = _find(points, downscale_precision(last_end), tolerance)
    if start is None or goal is None:
        raise CandidateSetError("route start or goal lost during candidate deduplication")

    # Drop candidates buried inside either corridor, keeping the search ends
    for corridor in (expand_start, expand_end):
        if corridor is None:
            continue
        inner = corridor.expand(-1)
        points = [p for p in points if p is start or p is goal or not inner.contains_point(p)]

    candidates = [Candidate(p[0], p[1], int(p[2])) for p in points]
    return candidates, Candidate(start[0], start[1], int(start[2])), Candidate(goal[0], goal[1], int(goal[2]))
