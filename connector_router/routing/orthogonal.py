"""
Orthogonal ("Manhattan") connector routing.

Three entry points share one search:
- ``generate_smallest_path``: fresh route between two endpoints
- ``generate_path_to_line``: reconnect an endpoint to a fixed segment
- ``generate_path``: re-route only the unpinned ends of an edited path

plus ``move_point``, the single-segment drag used while editing.
"""

from typing import List, Optional, Sequence, Tuple
import logging

from ..core.config import RouterConfig, DEFAULT_CONFIG
from ..geometry.bound import Bound
from ..geometry.point_location import PathPoint
from ..geometry.vec import Vec, vec, sign, nearest_point_on_line
from .astar import AStarRunner
from .candidates import compute_offsets, expand_bound, next_point, collect_candidates
from .path_optimizer import direct_path, merge_path, downscale_precision, segment_axis

logger = logging.getLogger(__name__)


def _approach_point(point: Vec, toward: Vec, length: float) -> Vec:
    """Point ``length`` behind ``point`` on the dominant axis of point -> toward."""
    dx = toward.x - point.x
    dy = toward.y - point.y
    if abs(dx) > abs(dy):
        return Vec(point.x - sign(dx) * length, point.y)
    return Vec(point.x, point.y - sign(dy) * length)


class OrthogonalRouter:
    """Routes axis-aligned connector paths around the endpoint shapes' bounds."""

    def __init__(self, config: Optional[RouterConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.last_runner: Optional[AStarRunner] = None

    # ------------------------------------------------------------------
    # Full route
    # ------------------------------------------------------------------

    def generate_smallest_path(
        self,
        start_point: PathPoint,
        end_point: PathPoint,
        start_bound: Optional[Bound] = None,
        end_bound: Optional[Bound] = None
    ) -> List[Vec]:
        """
        Minimal Manhattan route between two endpoints.

        Args:
            start_point: Resolved source point (tangent used off-edge)
            end_point: Resolved target point
            start_bound: Axis-aligned bound of the source shape, if any
            end_bound: Axis-aligned bound of the target shape, if any

        Returns:
            List of route points from ``start_point`` to ``end_point``;
            every consecutive pair shares one coordinate

        Raises:
            CandidateSetError: If the candidate set is internally inconsistent
        """
        start_point = _as_path_point(start_point)
        end_point = _as_path_point(end_point)
        tolerance = self.config.merge_tolerance

        start_offset, end_offset = compute_offsets(start_bound, end_bound, self.config.clearance)
        expand_start = expand_bound(start_bound, start_offset)
        expand_end = expand_bound(end_bound, end_offset)

        start = start_point.vec
        end = end_point.vec

        if not start_bound and not end_bound and start.dist(end) <= tolerance:
            return [start, end]

        if (
            start_bound and end_bound
            and start_bound.contains_point(end)
            and end_bound.contains_point(start)
        ):
            return direct_path(start, end, tolerance)

        if start_bound and expand_start.contains_point(end):
            return direct_path(start, end, tolerance)

        if end_bound and expand_end.contains_point(start):
            return direct_path(start, end, tolerance)

        next_start = next_point(start_bound, start_point, start_offset) if start_bound else start
        last_end = next_point(end_bound, end_point, end_offset) if end_bound else end

        candidates, search_start, search_goal = collect_candidates(
            start, end, next_start, last_end,
            start_bound, end_bound, expand_start, expand_end,
            self.config.dedup_tolerance,
        )

        origin_start = vec(downscale_precision(start))
        origin_end = vec(downscale_precision(end))
        approach = self.config.free_end_approach
        if not start_bound:
            origin_start = _approach_point(origin_start, origin_end, approach)
        if not end_bound:
            origin_end = _approach_point(origin_end, origin_start, approach)

        runner = AStarRunner(
            candidates,
            search_start,
            search_goal,
            origin_start,
            origin_end,
            [b for b in (start_bound, end_bound) if b],
            [b for b in (expand_start, expand_end) if b],
        )
        self.last_runner = runner

        if not runner.run():
            logger.warning(
                f"No orthogonal route found from {tuple(start)} to {tuple(end)}, using direct path"
            )
            return direct_path(start, end, tolerance)

        path = list(runner.path)
        if not end_bound:
            path.pop()
        if not start_bound:
            path.pop(0)

        merged = merge_path(path, tolerance)
        if len(merged) < 2:
            return [start, end]
        return merged

    # ------------------------------------------------------------------
    # Route to a fixed line
    # ------------------------------------------------------------------

    def generate_path_to_line(
        self,
        point: PathPoint,
        bound: Optional[Bound],
        line: Tuple[PathPoint, PathPoint]
    ) -> List[PathPoint]:
        """
        Route from ``point`` onto the axis of a fixed segment.

        Without a bound the route is the perpendicular foot on the line.
        With a bound, the route leaves the bound first and the final waypoint
        is snapped exactly onto the line's axis value and pinned.

        Returns:
            Points starting at ``point``; the last one lies on the line
        """
        point = _as_path_point(point)
        start, end = line

        if start.vec == end.vec:
            nudge = self.config.degenerate_nudge
            if start.pinned_x and end.pinned_x:
                end = end.with_position((end.x, end.y + nudge))
            elif start.pinned_y and end.pinned_y:
                end = end.with_position((end.x + nudge, end.y))

        line_dir = segment_axis(start, end)
        foot = nearest_point_on_line(start.vec, end.vec, point.vec, clamp_to_segment=False)

        if not bound:
            on_line = PathPoint.from_vec(foot).with_pins(line_dir == 0, line_dir == 1)
            return [point, on_line]

        outside = point.vec + (foot - point.vec).normalize() * (max(bound.w, bound.h) + self.config.clearance)
        target = Vec(outside.x, foot.y) if line_dir == 0 else Vec(foot.x, outside.y)

        route = [
            PathPoint.from_vec(p)
            for p in self.generate_smallest_path(point, PathPoint.from_vec(target), bound, None)
        ]
        route[0] = point

        if len(route) >= 2:
            last_dir = segment_axis(route[-1], route[-2])
            if last_dir == line_dir and len(route) > 2:
                route.pop()

        route[-1] = route[-1].with_axis(line_dir, start[line_dir]).with_pins(line_dir == 0, line_dir == 1)
        return route

    # ------------------------------------------------------------------
    # Partial re-route
    # ------------------------------------------------------------------

    def generate_path(
        self,
        path: Sequence[PathPoint],
        start_point: PathPoint,
        end_point: PathPoint,
        start_bound: Optional[Bound] = None,
        end_bound: Optional[Bound] = None
    ) -> List[PathPoint]:
        """
        Re-route a path while keeping its user-pinned middle.

        The points strictly between the first and last pinned point are kept
        verbatim; both ends are reconnected with ``generate_path_to_line``.
        With fewer than two distinct pinned points the whole path is routed
        from scratch.
        """
        path = list(path) if len(path) >= 2 else [start_point, end_point]
        path[0] = start_point
        path[-1] = end_point

        first = next((i for i, p in enumerate(path) if p.is_pinned), None)
        last = next((i for i in range(len(path) - 1, -1, -1) if path[i].is_pinned), None)

        if first is None or last is None or first == last:
            return [
                PathPoint.from_vec(p)
                for p in self.generate_smallest_path(start_point, end_point, start_bound, end_bound)
            ]

        between = path[first + 1:last]
        to_first = self.generate_path_to_line(start_point, start_bound, (path[first], path[first + 1]))
        to_last = self.generate_path_to_line(end_point, end_bound, (path[last], path[last - 1]))

        logger.debug(f"Partial re-route keeps {len(between)} pinned interior points")
        return to_first + between + list(reversed(to_last))

    # ------------------------------------------------------------------
    # Interactive segment move
    # ------------------------------------------------------------------

    def move_point(
        self,
        path: Sequence[PathPoint],
        index: int,
        point: Sequence[float],
        start_point: PathPoint,
        end_point: PathPoint,
        start_bound: Optional[Bound] = None,
        end_bound: Optional[Bound] = None
    ) -> Tuple[List[PathPoint], int]:
        """
        Drag the segment ``path[index] -> path[index + 1]``.

        Only the coordinate perpendicular to the segment changes, on both of
        its points, and that axis gets pinned. Dragging the first or last
        segment re-derives the route from the endpoint anchor onto the moved
        segment, which can insert points ahead of it.

        Returns:
            Tuple of (new path, index of the dragged segment in the new path)
        """
        path = list(path)
        original_length = len(path)
        new_index = index
        point = vec(point)

        before_index = index
        after_index = index + 1
        moving_dir = 0 if path[before_index].x == path[after_index].x else 1

        if index == original_length - 2:
            end_line_point = end_point.with_axis(moving_dir, point[moving_dir]).with_pins(
                moving_dir == 0, moving_dir == 1
            )
            path[before_index] = path[before_index].with_axis(moving_dir, point[moving_dir]).pin_axis(moving_dir)
            to_line = self.generate_path_to_line(end_point, end_bound, (path[before_index], end_line_point))
            # The old end point is replaced by the point on the moved line
            path = path[:-1] + list(reversed(to_line))

        if index == 0:
            start_line_point = start_point.with_axis(moving_dir, point[moving_dir]).with_pins(
                moving_dir == 0, moving_dir == 1
            )
            path[after_index] = path[after_index].with_axis(moving_dir, point[moving_dir]).pin_axis(moving_dir)
            to_line = self.generate_path_to_line(start_point, start_bound, (start_line_point, path[after_index]))
            added = len(to_line) - 1
            path = to_line + path[1:]
            new_index = added
            before_index = added
            after_index += added

        if 0 < index < original_length - 2:
            for i in (before_index, after_index):
                path[i] = path[i].with_axis(moving_dir, point[moving_dir]).pin_axis(moving_dir)

        self._snap_to_neighbor_lines(path, new_index, before_index, after_index, moving_dir, point)
        return path, new_index

    def _snap_to_neighbor_lines(
        self,
        path: List[PathPoint],
        new_index: int,
        before_index: int,
        after_index: int,
        moving_dir: int,
        point: Vec
    ):
        """Align the dragged segment with the parallel segment two steps away when close."""
        snap = self.config.alignment_snap

        def line_value(i: int, j: int) -> Optional[Tuple[int, float]]:
            if i < 0 or j < 0 or i >= len(path) or j >= len(path):
                return None
            direction = segment_axis(path[i], path[j])
            return direction, path[i][direction]

        for line in (line_value(new_index - 2, new_index - 1), line_value(new_index + 2, new_index + 3)):
            if line is None:
                continue
            direction, value = line
            if direction == moving_dir and abs(point[moving_dir] - value) < snap:
                path[before_index] = path[before_index].with_axis(moving_dir, value)
                path[after_index] = path[after_index].with_axis(moving_dir, value)


def _as_path_point(point) -> PathPoint:
    if isinstance(point, PathPoint):
        return point
    return PathPoint.from_vec(point)
