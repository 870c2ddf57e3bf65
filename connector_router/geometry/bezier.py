"""
Cubic Bezier helpers for curve-mode connectors.
"""

from typing import List, Sequence, TYPE_CHECKING
import math

from .bound import Bound
from .vec import Vec, cubic_point

if TYPE_CHECKING:
    from .point_location import PathPoint


def _axis_extrema(p0: float, c0: float, c1: float, p1: float) -> List[float]:
    """Parameters in (0, 1) where the derivative of one axis vanishes."""
    a = -p0 + 3 * c0 - 3 * c1 + p1
    b = 2 * (p0 - 2 * c0 + c1)
    c = c0 - p0

    roots: List[float] = []
    if abs(a) < 1e-12:
        if abs(b) > 1e-12:
            roots.append(-c / b)
    else:
        disc = b * b - 4 * a * c
        if disc >= 0:
            sq = math.sqrt(disc)
            roots.append((-b + sq) / (2 * a))
            roots.append((-b - sq) / (2 * a))

    return [t for t in roots if 0 < t < 1]


def cubic_extrema(
    p0: Sequence[float],
    c0: Sequence[float],
    c1: Sequence[float],
    p1: Sequence[float]
) -> List[Vec]:
    """Endpoints plus every axis extremum of a single cubic segment."""
    ts = _axis_extrema(p0[0], c0[0], c1[0], p1[0]) + _axis_extrema(p0[1], c0[1], c1[1], p1[1])
    return [Vec(p0[0], p0[1]), Vec(p1[0], p1[1])] + [cubic_point(p0, c0, c1, p1, t) for t in ts]


def bezier_bound(path: Sequence['PathPoint']) -> Bound:
    """
    Tight bounding box of a piecewise cubic path.

    Segment ``i`` runs from ``path[i]`` with handle ``path[i].abs_out`` to
    ``path[i + 1]`` with handle ``path[i + 1].abs_in``.
    """
    if len(path) < 2:
        return Bound.from_points([p.vec for p in path])

    points: List[Vec] = []
    for start, end in zip(path, path[1:]):
        points.extend(cubic_extrema(start.vec, start.abs_out, end.abs_in, end.vec))
    return Bound.from_points(points)


def sample_bezier_path(path: Sequence['PathPoint'], steps: int = 16) -> List[Vec]:
    """Polyline approximation of a piecewise cubic path."""
    if len(path) < 2:
        return [p.vec for p in path]

    samples = [path[0].vec]
    for start, end in zip(path, path[1:]):
        for i in range(1, steps + 1):
            samples.append(cubic_point(start.vec, start.abs_out, end.abs_in, end.vec, i / steps))
    return samples

