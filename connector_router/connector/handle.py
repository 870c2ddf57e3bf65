"""
Pointer-driven edits of a connector: dragging its ends and its waypoints.

Each drag stashes the fields it touches on the first move, recomputes
synchronously on every move and commits on release. Releasing without
having moved changes nothing.
"""

from typing import List, Optional, Sequence, Tuple
import logging

from ..geometry.bound import Bound
from ..geometry.vec import Vec, cubic_point
from .generator import ConnectorPathGenerator
from .model import Connector, ConnectorMode
from .snapping import ConnectionOverlay, SnapResult

logger = logging.getLogger(__name__)

ENDPOINT_FIELDS = ('source', 'target', 'bound', 'relative_path', 'label')
WAYPOINT_FIELDS = ('bound', 'label', 'relative_path')

# Handle kinds
AVAILABLE = 'available'
SEGMENT = 'segment'

EDGE_HANDLE_MARGIN = 40.0
MIN_HANDLE_SEGMENT = 20.0


class EndpointDrag:
    """Drag of the ``source`` or ``target`` end of a connector."""

    def __init__(
        self,
        connector: Connector,
        end: str,
        overlay: ConnectionOverlay,
        generator: ConnectorPathGenerator
    ):
        if end not in ('source', 'target'):
            raise ValueError(f"end must be 'source' or 'target', got {end!r}")
        self.connector = connector
        self.end = end
        self.overlay = overlay
        self.generator = generator
        self.moving = False

    def pointer_move(self, point: Sequence[float]) -> SnapResult:
        connector = self.connector
        if not self.moving:
            self.moving = True
            connector.stash(*ENDPOINT_FIELDS)

        other = connector.target if self.end == 'source' else connector.source
        excluded = [other.shape_id] if other.shape_id else []
        result = self.overlay.render_connector(point, excluded)

        setattr(connector, self.end, result.connection)
        self.generator.recompute_from_ends(connector)
        return result

    def pointer_up(self) -> bool:
        """Commit the drag; returns False when the pointer never moved."""
        moved = self.moving
        if moved:
            self.moving = False
            self.connector.pop(*ENDPOINT_FIELDS)
        self.overlay.clear()
        return moved

    def cancel(self):
        if self.moving:
            self.moving = False
            self.connector.restore()
        self.overlay.clear()


class WaypointDrag:
    """
    Drag of an interior path point or of a segment's middle handle.

    ``AVAILABLE`` handles sit on an existing interior point of a straight or
    curve path. ``SEGMENT`` handles sit in the middle of segment
    ``point_index -> point_index + 1``: orthogonal paths move that segment,
    other modes first insert a point there and then move it.
    """

    def __init__(self, connector: Connector, point_index: int, kind: str, generator: ConnectorPathGenerator):
        if kind not in (AVAILABLE, SEGMENT):
            raise ValueError(f"Unknown handle kind {kind!r}")
        self.connector = connector
        self.point_index = point_index
        self.kind = kind
        self.generator = generator
        self.moving = False
        self.moving_index: Optional[int] = point_index if kind == AVAILABLE else None

    def pointer_move(self, point: Sequence[float]) -> Optional[int]:
        connector = self.connector
        if not self.moving:
            self.moving = True
            connector.stash(*WAYPOINT_FIELDS)

        if self.moving_index is None:
            if connector.mode == ConnectorMode.ORTHOGONAL:
                self.moving_index = self.generator.move_point(connector, self.point_index, point)
                return self.moving_index
            self.generator.add_point_into_path(connector, self.point_index + 1)
            self.moving_index = self.point_index + 1

        self.moving_index = self.generator.move_point(connector, self.moving_index, point)
        return self.moving_index

    def pointer_up(self) -> bool:
        """Commit the drag and settle the path; False when nothing moved."""
        self.moving_index = None
        if not self.moving:
            return False

        self.moving = False
        self.generator.remove_extra_points(self.connector)
        self.connector.pop(*WAYPOINT_FIELDS)
        self.generator.recompute_from_ends(self.connector)
        logger.debug(f"Committed waypoint drag on connector '{self.connector.id}'")
        return True

    def cancel(self):
        self.moving_index = None
        if self.moving:
            self.moving = False
            self.connector.restore()


def middle_handle_positions(
    connector: Connector,
    bounds: Tuple[Optional[Bound], Optional[Bound]] = (None, None)
) -> List[Tuple[int, Vec]]:
    """
    Visible middle handles as ``(segment start index, position)`` pairs.

    In orthogonal mode a handle is hidden when its segment is too short to
    grab, and an end segment's handle is hidden while the adjacent waypoint
    is still inside the clearance zone around the endpoint's shape.
    """
    path = connector.absolute_path
    start_bound, end_bound = bounds
    is_orthogonal = connector.mode == ConnectorMode.ORTHOGONAL
    handles = []

    for index in range(1, len(path)):
        start = path[index - 1]
        end = path[index]
        if connector.mode == ConnectorMode.CURVE:
            center = cubic_point(start.vec, start.abs_out, end.abs_in, end.vec, 0.5)
        else:
            center = start.vec.lerp(end.vec, 0.5)

        if is_orthogonal:
            if start.vec.dist(end.vec) <= MIN_HANDLE_SEGMENT + 0.02:
                continue
            if index == 1 or index == len(path) - 1:
                point_index = index if index == 1 else index - 1
                bound = start_bound if index == 1 else end_bound
                anchor = path[0] if index == 1 else path[-1]
                if bound is not None:
                    min_dist = min(
                        abs(anchor.x - bound.min_x),
                        abs(anchor.x - bound.max_x),
                        abs(anchor.y - bound.min_y),
                        abs(anchor.y - bound.max_y),
                    ) + EDGE_HANDLE_MARGIN
                    if path[point_index].vec.dist(anchor.vec) <= min_dist + 0.02:
                        continue

        handles.append((index - 1, center))

    return handles
