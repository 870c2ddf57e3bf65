"""
Path optimization for orthogonal connector routing.

Post-processes raw search output into clean Manhattan paths:
- Merge collinear runs produced by the candidate graph
- Collapse collinear runs left behind by interactive edits
- Build direct (zero or one elbow) paths for the fast cases
"""

from typing import List, Sequence, Tuple

from ..geometry.vec import Vec, almost_equal
from ..geometry.point_location import PathPoint


def downscale_precision(point: Sequence[float]) -> Tuple[float, float]:
    """Round a point to two decimals, the precision candidates are compared at."""
    return (round(point[0], 2), round(point[1], 2))


def direct_path(start: Sequence[float], end: Sequence[float], tolerance: float = 0.02) -> List[Vec]:
    """
    Shortest orthogonal path with no obstacles.

    Returns the two points when they already share an axis, otherwise inserts
    a single elbow that moves vertically first.
    """
    start = Vec(start[0], start[1])
    end = Vec(end[0], end[1])

    if almost_equal(start.x, end.x, tolerance) or almost_equal(start.y, end.y, tolerance):
        return [start, end]

    return [start, Vec(start.x, end.y), end]


def merge_path(points: Sequence[Sequence[float]], tolerance: float = 0.02) -> List[Vec]:
    """
    Merge collinear segments.

    Removes every interior waypoint whose neighbours lie on the same vertical
    or horizontal line.

    Args:
        points: Raw path from the search
        tolerance: Coordinate tolerance for collinearity

    Returns:
        Path with minimal waypoints
    """
    if not points:
        return []

    result = [Vec(points[0][0], points[0][1])]

    for i in range(1, len(points) - 1):
        last = points[i - 1]
        cur = points[i]
        nxt = points[i + 1]

        if almost_equal(last[0], cur[0], tolerance) and almost_equal(cur[0], nxt[0], tolerance):
            continue
        if almost_equal(last[1], cur[1], tolerance) and almost_equal(cur[1], nxt[1], tolerance):
            continue

        result.append(Vec(cur[0], cur[1]))

    if len(points) > 1:
        result.append(Vec(points[-1][0], points[-1][1]))

    return result


def segment_axis(a: Sequence[float], b: Sequence[float], tolerance: float = 0.0) -> int:
    """
    Axis held constant along segment a-b.

    Returns 0 when the segment is vertical (x shared), 1 otherwise.
    """
    if tolerance:
        return 0 if almost_equal(a[0], b[0], tolerance) else 1
    return 0 if a[0] == b[0] else 1


def _collapse_runs(path: Sequence[PathPoint], tolerance: float) -> List[PathPoint]:
    new_path = [path[0]]
    last_index_on_line = 1
    line_dir = segment_axis(path[0], path[1], tolerance)

    for i in range(2, len(path)):
        if almost_equal(path[i][line_dir], path[i - 1][line_dir], tolerance):
            last_index_on_line = i
            continue

        new_path.append(path[last_index_on_line])
        last_index_on_line = i
        line_dir = segment_axis(path[i], path[i - 1], tolerance)

    new_path.append(path[last_index_on_line])
    return new_path


def remove_extra_points_on_one_line(path: Sequence[PathPoint], tolerance: float = 0.05) -> List[PathPoint]:
    """
    Collapse runs of three or more points lying on one axis-aligned line.

    Only the first and last point of each run are kept. A zero-length segment
    has no direction of its own, so one pass can leave a run behind it; passes
    repeat until nothing more is removed.
    """
    result = list(path)
    while len(result) >= 3:
        collapsed = _collapse_runs(result, tolerance)
        if len(collapsed) == len(result):
            break
        result = collapsed
    return result


def is_orthogonal_path(path: Sequence[Sequence[float]], tolerance: float = 0.02) -> bool:
    """Check that every interior point shares an axis with its predecessor."""
    for i in range(1, len(path) - 1):
        cur = path[i]
        prev = path[i - 1]
        if not almost_equal(cur[0], prev[0], tolerance) and not almost_equal(cur[1], prev[1], tolerance):
            return False
    return True


def validate_orthogonal(path: Sequence[Sequence[float]], tolerance: float = 0.02) -> bool:
    """Check that every consecutive pair of points shares an axis."""
    return all(
        almost_equal(a[0], b[0], tolerance) or almost_equal(a[1], b[1], tolerance)
        for a, b in zip(path, path[1:])
    )


def remove_duplicate_points(points: Sequence[Vec], tolerance: float = 0.02) -> List[Vec]:
    """Remove consecutive duplicate points."""
    if not points:
        return []

    cleaned = [points[0]]
    for point in points[1:]:
        if cleaned[-1].dist(point) > tolerance:
            cleaned.append(point)
    return cleaned
