"""
Geometry kernel: vectors, rotated bounds, Bezier helpers and path points.
"""

from .vec import Vec, vec, almost_equal, line_intersection, nearest_point_on_line, cubic_point
from .bound import Bound
from .bezier import bezier_bound, sample_bezier_path
from .point_location import PathPoint, serialize_path, deserialize_path

__all__ = [
    'Vec',
    'vec',
    'almost_equal',
    'line_intersection',
    'nearest_point_on_line',
    'cubic_point',
    'Bound',
    'bezier_bound',
    'sample_bezier_path',
    'PathPoint',
    'serialize_path',
    'deserialize_path',
]
