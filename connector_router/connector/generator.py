"""
Connector path generation: the single entry point for every path change.

The generator resolves both ends, runs the mode-specific algorithm and
writes the new bounding box and relative path back to the connector.
"""

from typing import List, Optional, Sequence, Tuple
import logging

from ..core.config import RouterConfig, DEFAULT_CONFIG
from ..core.exceptions import InvalidConnectionError, UnresolvableEndpointError
from ..geometry.bezier import bezier_bound
from ..geometry.bound import Bound
from ..geometry.point_location import PathPoint
from ..geometry.vec import cubic_point
from ..routing.orthogonal import OrthogonalRouter
from ..routing.path_optimizer import is_orthogonal_path, remove_extra_points_on_one_line
from .anchors import AnchorResolver, ShapeGetter
from .curve import auto_set_controls, curve_endpoint_controls
from .model import Connector, ConnectorMode

logger = logging.getLogger(__name__)


class ConnectorPathGenerator:
    """Computes and writes back connector paths for all three modes."""

    def __init__(self, shape_getter: ShapeGetter, config: Optional[RouterConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.shape_getter = shape_getter
        self.resolver = AnchorResolver(shape_getter, self.config)
        self.router = OrthogonalRouter(self.config)

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------

    def has_valid_endpoints(self, connector: Connector) -> bool:
        """False when an end references a shape that cannot be resolved right now."""
        for connection in (connector.source, connector.target):
            if connection.is_free:
                continue
            try:
                self.resolver.shape(connection.shape_id)
            except (UnresolvableEndpointError, InvalidConnectionError) as e:
                logger.debug(f"Connector '{connector.id}' is not routable: {e}")
                return False
        return True

    # ------------------------------------------------------------------
    # Recompute
    # ------------------------------------------------------------------

    def recompute_from_ends(self, connector: Connector) -> bool:
        """
        Re-derive the path from the current positions of both ends.

        Returns:
            False when an end cannot be resolved; the stored path is left
            untouched and the connector is marked unroutable

        Raises:
            CandidateSetError: If orthogonal candidate generation breaks its invariants
        """
        if not self.has_valid_endpoints(connector):
            connector.routable = False
            return False
        connector.routable = True

        mode_updating = connector.flags.mode_updating
        if mode_updating and connector.mode == ConnectorMode.ORTHOGONAL:
            self._reset_path_if_not_orthogonal(connector)

        absolute_path = self._generate_path(connector)

        if connector.mode == ConnectorMode.CURVE:
            strict_start, strict_end = self._strict_ends(connector)
            last = len(absolute_path) - 1
            if mode_updating:
                # Interior points first, then both ends
                for index in list(range(1, last)) + [0, last]:
                    absolute_path = auto_set_controls(
                        absolute_path, index, strict_start, strict_end, False, self.config.min_control_length
                    )
            else:
                for index in (0, last):
                    absolute_path = auto_set_controls(
                        absolute_path, index, strict_start, strict_end, True, self.config.min_control_length
                    )

        self._write(connector, absolute_path)
        connector.flags.mode_updating = False
        logger.debug(f"Recomputed {connector!r}")
        return True

    def _reset_path_if_not_orthogonal(self, connector: Connector):
        path = connector.relative_path
        if len(path) > 2 and not is_orthogonal_path(path, self.config.merge_tolerance):
            logger.debug(f"Discarding non-orthogonal path of connector '{connector.id}' after mode switch")
            connector.write_path(connector.bound, [path[0], path[-1]])

    def _generate_path(self, connector: Connector) -> List[PathPoint]:
        if connector.mode == ConnectorMode.ORTHOGONAL:
            return self._generate_orthogonal_path(connector)
        if connector.mode == ConnectorMode.CURVE:
            return self._generate_curve_path(connector)
        return self._generate_straight_path(connector)

    def _with_ends(self, connector: Connector, start: PathPoint, end: PathPoint) -> List[PathPoint]:
        path = list(connector.absolute_path)
        if len(path) < 2:
            return [start, end]
        path[0] = start
        path[-1] = end
        return path

    def _generate_straight_path(self, connector: Connector) -> List[PathPoint]:
        start, end = self.resolver.compute_center_facing(connector)
        return self._with_ends(connector, start, end)

    def _generate_curve_path(self, connector: Connector) -> List[PathPoint]:
        start, end = self.resolver.compute_center_facing(connector)
        start, end = curve_endpoint_controls(
            start,
            end,
            not connector.source.is_free,
            not connector.target.is_free,
            self.config.attached_handle_length,
        )
        return self._with_ends(connector, start, end)

    def _generate_orthogonal_path(self, connector: Connector) -> List[PathPoint]:
        start, end = self.resolver.compute_start_end(connector)
        start_bound, end_bound = self.resolver.start_end_bounds(connector)
        path = self.router.generate_path(
            list(connector.absolute_path), start, end, start_bound, end_bound
        )
        return remove_extra_points_on_one_line(path, self.config.collinear_tolerance)

    def _strict_ends(self, connector: Connector) -> Tuple[bool, bool]:
        return (
            self.resolver.is_attached(connector.source),
            self.resolver.is_attached(connector.target),
        )

    # ------------------------------------------------------------------
    # Write-back
    # ------------------------------------------------------------------

    def new_bound(self, connector: Connector, absolute_path: Sequence[PathPoint]) -> Bound:
        """Tight box of the path (of the whole Bezier curve in curve mode)."""
        if connector.mode == ConnectorMode.CURVE:
            return bezier_bound(absolute_path)
        return Bound.from_points([p.vec for p in absolute_path])

    def _write(self, connector: Connector, absolute_path: Sequence[PathPoint]):
        connector.write_path_absolute(absolute_path, self.new_bound(connector, absolute_path))
        connector.update_label()

    def update_points(
        self,
        connector: Connector,
        absolute_path: Sequence[PathPoint],
        updated_index: Optional[int] = None
    ):
        """Write an edited absolute path, smoothing around ``updated_index`` in curve mode."""
        absolute_path = tuple(absolute_path)
        if connector.mode == ConnectorMode.CURVE and updated_index is not None:
            strict_start, strict_end = self._strict_ends(connector)
            absolute_path = auto_set_controls(
                absolute_path, updated_index, strict_start, strict_end, True, self.config.min_control_length
            )
        self._write(connector, absolute_path)

    # ------------------------------------------------------------------
    # Interactive edits
    # ------------------------------------------------------------------

    def move_point(self, connector: Connector, index: int, point: Sequence[float]) -> int:
        """
        Move the point (or, in orthogonal mode, the segment) at ``index``.

        Returns:
            Index of the moved point in the new path; orthogonal moves of an
            end segment may insert points ahead of it
        """
        absolute_path = list(connector.absolute_path)
        new_index = index

        if connector.mode == ConnectorMode.ORTHOGONAL:
            if not self.has_valid_endpoints(connector):
                return index
            start, end = self.resolver.compute_start_end(connector)
            start_bound, end_bound = self.resolver.start_end_bounds(connector)
            absolute_path, new_index = self.router.move_point(
                absolute_path, index, point, start, end, start_bound, end_bound
            )
        else:
            absolute_path[index] = absolute_path[index].with_position(point).with_pins(False, False)
            if connector.mode == ConnectorMode.CURVE:
                strict_start, strict_end = self._strict_ends(connector)
                absolute_path = auto_set_controls(
                    absolute_path, index, strict_start, strict_end, True, self.config.min_control_length
                )

        self._write(connector, absolute_path)
        return new_index

    def add_point_into_path(self, connector: Connector, insert_index: int):
        """
        Insert a point in the middle of segment ``insert_index - 1`` -> ``insert_index``.

        Curve mode evaluates the Bezier at t=0.5; straight mode takes the
        linear midpoint. Orthogonal paths and out-of-range indexes are left
        as they are.
        """
        absolute_path = list(connector.absolute_path)

        if 1 <= insert_index <= len(absolute_path) - 1 and connector.mode != ConnectorMode.ORTHOGONAL:
            before = absolute_path[insert_index - 1]
            after = absolute_path[insert_index]
            if connector.mode == ConnectorMode.CURVE:
                middle = cubic_point(before.vec, before.abs_out, after.abs_in, after.vec, 0.5)
            else:
                middle = before.vec.lerp(after.vec, 0.5)
            absolute_path.insert(insert_index, PathPoint.from_vec(middle))

        self.update_points(connector, absolute_path, insert_index)

    def remove_point(self, connector: Connector, index: int) -> bool:
        """Remove an interior waypoint of a straight or curve path."""
        absolute_path = list(connector.absolute_path)
        if connector.mode == ConnectorMode.ORTHOGONAL or not 0 < index < len(absolute_path) - 1:
            return False

        del absolute_path[index]
        self.update_points(connector, absolute_path, index - 1)
        return True

    def remove_extra_points(self, connector: Connector):
        """Collapse collinear runs of an orthogonal path; other modes are untouched."""
        if connector.mode != ConnectorMode.ORTHOGONAL:
            return
        absolute_path = remove_extra_points_on_one_line(
            connector.absolute_path, self.config.collinear_tolerance
        )
        self._write(connector, absolute_path)
