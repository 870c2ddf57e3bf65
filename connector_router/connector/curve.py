"""
Control-point smoothing for curve-mode connectors.

Every function takes a sequence of ``PathPoint`` and returns a new tuple;
nothing is mutated in place.
"""

from typing import Sequence, Tuple

from ..geometry.point_location import PathPoint
from ..geometry.vec import Vec

Path = Tuple[PathPoint, ...]


def _replace(points: Sequence[PathPoint], index: int, point: PathPoint) -> Path:
    updated = list(points)
    updated[index] = point
    return tuple(updated)


def smooth_closed_point(points: Sequence[PathPoint], index: int) -> Path:
    """Set the controls of an interior point from the directions to its neighbours."""
    if index < 1 or index > len(points) - 2:
        return tuple(points)

    point = points[index]
    to_before = points[index - 1].vec - point.vec
    to_after = points[index + 1].vec - point.vec

    control = (to_before.normalize() - to_after.normalize()).normalize()
    in_vec = control * (to_before.len() / 3)
    out_vec = control * (-to_after.len() / 3)

    return _replace(points, index, point.with_controls(in_vec, out_vec, out_vec.normalize()))


def smooth_open_point(
    points: Sequence[PathPoint],
    index: int,
    strict: bool = True,
    min_control_length: float = 50.0
) -> Path:
    """
    Set the outer control of an end point.

    A strict end (attached to a shape) keeps its control direction and takes
    the neighbour's facing control length, at least ``min_control_length``.
    A free end points its control half way to the neighbour's facing
    control point.
    """
    last = len(points) - 1
    if last < 1 or index not in (0, last):
        return tuple(points)

    point = points[index]
    is_start = index == 0

    if strict:
        current = point.out_vec if is_start else point.in_vec
        direction = current.normalize()
        if direction.is_zero():
            direction = point.tangent.normalize()
        if not direction.is_zero():
            neighbor = points[1] if is_start else points[last - 1]
            neighbor_length = (neighbor.in_vec if is_start else neighbor.out_vec).len()
            control = direction * max(neighbor_length, min_control_length)
            if is_start:
                return _replace(points, index, point.with_controls(out_vec=control))
            return _replace(points, index, point.with_controls(in_vec=control))

    if is_start:
        control = (points[1].abs_in - point.vec) * 0.5
        return _replace(points, index, point.with_controls(out_vec=control))

    control = (points[last - 1].abs_out - point.vec) * 0.5
    return _replace(points, index, point.with_controls(in_vec=control))


def auto_set_controls(
    points: Sequence[PathPoint],
    index: int,
    strict_start: bool,
    strict_end: bool,
    cascade: bool = True,
    min_control_length: float = 50.0
) -> Path:
    """
    Smooth the point at ``index`` and, with ``cascade``, its neighbours.

    Neighbours are the adjacent points plus the matching end point when
    ``index`` is second from either end. Neighbours are smoothed without
    cascading further.
    """
    points = tuple(points)
    if index < 0 or index >= len(points):
        return points

    neighbors = []
    if cascade:
        neighbors = [index - 1, index + 1]
        if index == 2:
            neighbors.append(0)
        if index == len(points) - 3:
            neighbors.append(len(points) - 1)

    def update_neighbors(current: Path) -> Path:
        for neighbor in neighbors:
            current = auto_set_controls(
                current, neighbor, strict_start, strict_end, False, min_control_length
            )
        return current

    if 0 < index < len(points) - 1:
        points = smooth_closed_point(points, index)
        return update_neighbors(points)

    points = update_neighbors(points)
    strict = strict_start if index == 0 else strict_end
    return smooth_open_point(points, index, strict, min_control_length)


def curve_endpoint_controls(
    start: PathPoint,
    end: PathPoint,
    source_attached: bool,
    target_attached: bool,
    attached_handle_length: float = 100.0
) -> Tuple[PathPoint, PathPoint]:
    """
    Initial handles of a curve's two end points.

    Attached ends get a handle along their outward tangent whose length is a
    third of the other end's offset along that tangent, at least
    ``attached_handle_length``. With both ends free the handles run along the
    dominant axis for two thirds of the distance.
    """
    if source_attached or target_attached:
        if source_attached:
            direction = start.tangent.normalize()
            length = max(attached_handle_length, abs((end.vec - start.vec).project_length(direction)) / 3)
            start = start.with_controls(out_vec=direction * length)
        if target_attached:
            direction = end.tangent.normalize()
            length = max(attached_handle_length, abs((start.vec - end.vec).project_length(direction)) / 3)
            end = end.with_controls(in_vec=direction * length)
        return start, end

    delta = end.vec - start.vec
    if abs(delta.x) > abs(delta.y):
        start = start.with_controls(out_vec=Vec(delta.x * 2 / 3, 0.0))
        end = end.with_controls(in_vec=Vec(-delta.x * 2 / 3, 0.0))
    else:
        start = start.with_controls(out_vec=Vec(0.0, delta.y * 2 / 3))
        end = end.with_controls(in_vec=Vec(0.0, -delta.y * 2 / 3))
    return start, end
