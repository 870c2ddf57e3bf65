"""
Anchor resolution: turning a connection end into a concrete path point.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from ..core.config import RouterConfig, DEFAULT_CONFIG
from ..core.exceptions import InvalidConnectionError, UnresolvableEndpointError
from ..geometry.bound import Bound
from ..geometry.point_location import PathPoint
from ..geometry.vec import Vec, vec, to_radian
from .model import Connection, Connector
from .shapes import EDGE_NORMALS, edge_normal

logger = logging.getLogger(__name__)

ShapeGetter = Callable[[str], Optional[object]]

# Relative anchor locations: top, right, bottom, left
ENDPOINT_LOCATIONS: Tuple[Vec, ...] = (Vec(0.5, 0.0), Vec(1.0, 0.5), Vec(0.5, 1.0), Vec(0.0, 0.5))


@dataclass(frozen=True)
class Anchor:
    """A cardinal anchor: absolute point on the outline and its relative coordinate."""
    point: PathPoint
    coord: Vec


def calculate_nearest_location(
    point: Sequence[float],
    bound: Bound,
    locations: Sequence[Vec] = ENDPOINT_LOCATIONS
) -> Vec:
    """Relative location (of ``locations``) whose rotated position is nearest to ``point``."""
    best = locations[0]
    shortest = float('inf')
    for location in locations:
        candidate = bound.rotated_point(bound.from_relative(location))
        d = candidate.dist(point)
        if d < shortest:
            shortest = d
            best = location
    return best


class AnchorResolver:
    """
    Resolves connection ends against the shapes they reference.

    Shapes are looked up through ``shape_getter`` on every call; the resolver
    never holds on to a shape.
    """

    def __init__(self, shape_getter: ShapeGetter, config: Optional[RouterConfig] = None):
        self.shape_getter = shape_getter
        self.config = config or DEFAULT_CONFIG

    def shape(self, shape_id: str):
        """
        Look up a connectable shape.

        Raises:
            UnresolvableEndpointError: If no element has this id
            InvalidConnectionError: If the element cannot take connections
        """
        element = self.shape_getter(shape_id)
        if element is None:
            raise UnresolvableEndpointError(shape_id)
        if isinstance(element, Connector) or not getattr(element, 'connectable', False):
            raise InvalidConnectionError(f"Element '{shape_id}' cannot be a connector endpoint")
        return element

    # Anchors

    def get_anchors(self, shape) -> List[Anchor]:
        """
        The four cardinal anchors of a shape (top, bottom, left, right).

        Each anchor is found by probing from the center to a point just past
        an edge midpoint and taking the first outline crossing, so non
        rectangular outlines get anchors on their actual boundary.
        """
        bound = shape.bound
        offset = self.config.anchor_probe_offset
        cx, cy = bound.center
        angle = to_radian(bound.rotate)

        probes = (
            (Vec(cx, bound.y - offset), EDGE_NORMALS[0]),
            (Vec(cx, bound.max_y + offset), EDGE_NORMALS[2]),
            (Vec(bound.x - offset, cy), EDGE_NORMALS[3]),
            (Vec(bound.max_x + offset, cy), EDGE_NORMALS[1]),
        )

        anchors = []
        for probe, normal in probes:
            hits = shape.line_intersections(bound.center, bound.rotated_point(probe))
            if not hits:
                logger.warning(f"Anchor probe found no outline crossing on shape '{shape.id}'")
                continue
            point = vec(hits[0])
            coord = bound.to_relative(bound.unrotated_point(point))
            tangent = normal.rotate(angle) if angle else normal
            anchors.append(Anchor(PathPoint.from_vec(point, tangent), coord))
        return anchors

    def nearest_anchor(self, shape, point: Sequence[float]) -> PathPoint:
        anchors = self.get_anchors(shape)
        if not anchors:
            return PathPoint.from_vec(shape.bound.center)
        return min(anchors, key=lambda a: a.point.vec.dist(point)).point

    def relative_location(self, shape, rel: Sequence[float]) -> PathPoint:
        """Point at a relative position with the outward normal of its nearest edge."""
        location = shape.relative_point_location(rel)
        return location.with_controls(tangent=edge_normal(shape.bound, rel))

    # Endpoint resolution

    def reference_point(self, connection: Connection) -> Vec:
        """Position used when the opposite end needs something to aim at."""
        if connection.is_free:
            return Vec(*connection.position)
        shape = self.shape(connection.shape_id)
        if connection.position is None:
            return shape.bound.center
        return self.relative_location(shape, connection.position).vec

    def resolve_endpoint(self, connection: Connection, opposite_point: Sequence[float]) -> PathPoint:
        """Resolve one end; an auto end picks the anchor nearest ``opposite_point``."""
        if connection.is_free:
            return PathPoint.from_vec(connection.position)
        shape = self.shape(connection.shape_id)
        if connection.position is None:
            return self.nearest_anchor(shape, opposite_point)
        return self.relative_location(shape, connection.position)

    def compute_start_end(self, connector: Connector) -> Tuple[PathPoint, PathPoint]:
        """
        Resolve both ends of a connector.

        When both ends are auto, the pair of anchors with the smallest
        distance wins; a later pair must beat the current one by more than
        ``pair_tie_slack`` so ties keep enumeration order.

        Raises:
            UnresolvableEndpointError: If a referenced shape is missing
        """
        source, target = connector.source, connector.target

        if source.is_auto and target.is_auto:
            start_anchors = self.get_anchors(self.shape(source.shape_id))
            end_anchors = self.get_anchors(self.shape(target.shape_id))
            slack = self.config.pair_tie_slack
            best: Optional[Tuple[PathPoint, PathPoint]] = None
            min_dist = float('inf')
            for sa in start_anchors:
                for ea in end_anchors:
                    d = sa.point.vec.dist(ea.point.vec)
                    if d + slack < min_dist:
                        min_dist = d
                        best = (sa.point, ea.point)
            if best is None:
                return (
                    PathPoint.from_vec(self.reference_point(source)),
                    PathPoint.from_vec(self.reference_point(target)),
                )
            return best

        start = self.resolve_endpoint(source, self.reference_point(target))
        end = self.resolve_endpoint(target, start.vec if target.is_auto else self.reference_point(source))
        return start, end

    def compute_center_facing(self, connector: Connector) -> Tuple[PathPoint, PathPoint]:
        """
        Resolve both ends for straight and curve modes.

        Two auto ends each take the anchor nearest the other shape's center;
        otherwise this is ``compute_start_end``.
        """
        source, target = connector.source, connector.target
        if source.is_auto and target.is_auto:
            start_shape = self.shape(source.shape_id)
            end_shape = self.shape(target.shape_id)
            return (
                self.nearest_anchor(start_shape, end_shape.bound.center),
                self.nearest_anchor(end_shape, start_shape.bound.center),
            )
        return self.compute_start_end(connector)

    def start_end_bounds(self, connector: Connector) -> Tuple[Optional[Bound], Optional[Bound]]:
        """Rotated axis-aligned bounds of the attached shapes (None for free ends)."""
        def bound_of(connection: Connection) -> Optional[Bound]:
            if connection.is_free:
                return None
            return self.shape(connection.shape_id).bound.aabb()

        return bound_of(connector.source), bound_of(connector.target)

    def is_attached(self, connection: Connection) -> bool:
        """True when the end references a shape that currently exists."""
        return connection.shape_id is not None and self.shape_getter(connection.shape_id) is not None
