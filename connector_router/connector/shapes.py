"""
Shapes a connector can attach to.

The router only needs a narrow view of a shape: its (rotated) bound and a
few outline queries. ``Shape`` describes that surface; ``RectShape`` is the
rotated-rectangle implementation used by the scene loader and the tests.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable
from ..geometry.bound import Bound
from ..geometry.point_location import PathPoint
from ..geometry.vec import Vec, vec, line_intersection, nearest_point_on_line, to_radian
from .model import Connector


# Outward normals in the unrotated frame: top, right, bottom, left
EDGE_NORMALS = (Vec(0.0, -1.0), Vec(1.0, 0.0), Vec(0.0, 1.0), Vec(-1.0, 0.0))


@runtime_checkable
class Shape(Protocol):
    """Capabilities the router consumes from a shape."""

    id: str
    bound: Bound
    connectable: bool
    group: Optional[str]

    def nearest_point(self, point: Sequence[float]) -> Vec:
        ...

    def point_inside(self, point: Sequence[float], tolerance: float = 0.0) -> bool:
        ...

    def relative_point_location(self, rel: Sequence[float]) -> PathPoint:
        ...

    def line_intersections(self, start: Sequence[float], end: Sequence[float]) -> List[Vec]:
        ...


def edge_normal(bound: Bound, rel: Sequence[float]) -> Vec:
    """
    Outward normal of the edge nearest to a relative position.

    Distances are measured in absolute units so thin shapes pick the right
    edge; ties resolve in top, right, bottom, left order. The result is
    rotated with the bound.
    """
    rx, ry = rel[0], rel[1]
    distances = (
        ry * bound.h,
        (1 - rx) * bound.w,
        (1 - ry) * bound.h,
        rx * bound.w,
    )
    side = min(range(4), key=lambda i: abs(distances[i]))
    normal = EDGE_NORMALS[side]
    if bound.rotate:
        normal = normal.rotate(to_radian(bound.rotate))
    return normal


@dataclass
class RectShape:
    """A connectable rectangle, optionally rotated about its center."""
    id: str
    bound: Bound
    connectable: bool = True
    group: Optional[str] = None

    @classmethod
    def from_xywh(cls, shape_id: str, xywh: Sequence[float], rotate: float = 0.0, group: Optional[str] = None) -> 'RectShape':
        return cls(shape_id, Bound.deserialize(xywh, rotate), group=group)

    @property
    def edges(self) -> List[Tuple[Vec, Vec]]:
        vertices = self.bound.rotated_vertices()
        return [(vertices[i], vertices[(i + 1) % 4]) for i in range(4)]

    def nearest_point(self, point: Sequence[float]) -> Vec:
        """Closest point on the (rotated) outline."""
        candidates = [nearest_point_on_line(a, b, point) for a, b in self.edges]
        return min(candidates, key=lambda p: p.dist(point))

    def point_inside(self, point: Sequence[float], tolerance: float = 0.0) -> bool:
        local = self.bound.unrotated_point(point)
        return self.bound.contains_point(local, tolerance)

    def relative_point_location(self, rel: Sequence[float]) -> PathPoint:
        point = self.bound.rotated_point(self.bound.from_relative(rel))
        return PathPoint.from_vec(point, edge_normal(self.bound, rel))

    def line_intersections(self, start: Sequence[float], end: Sequence[float]) -> List[Vec]:
        """Outline crossings of segment start-end, nearest to ``start`` first."""
        hits: List[Vec] = []
        for a, b in self.edges:
            hit = line_intersection(start, end, a, b)
            if hit is not None and not any(hit.almost_equal(h) for h in hits):
                hits.append(hit)
        origin = vec(start)
        hits.sort(key=lambda h: h.dist(origin))
        return hits


@dataclass
class GroupShape:
    """
    A group frame around member shapes.

    Groups are not connectable; snapping only reports their bound so the
    host can draw a highlight box around the group of the matched shape.
    """
    id: str
    bound: Bound
    members: List[str] = field(default_factory=list)
    connectable: bool = False
    group: Optional[str] = None


# ----------------------------------------------------------------------------
# Element variant resolved at the event boundary
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class ConnectorElement:
    connector: Connector

    @property
    def id(self) -> str:
        return self.connector.id


@dataclass(frozen=True)
class ShapeElement:
    shape: Union[RectShape, GroupShape, Shape]

    @property
    def id(self) -> str:
        return self.shape.id


ElementKind = Union[ConnectorElement, ShapeElement]


def classify(element) -> ElementKind:
    """Wrap a surface element in its tagged variant."""
    if isinstance(element, (ConnectorElement, ShapeElement)):
        return element
    if isinstance(element, Connector):
        return ConnectorElement(element)
    return ShapeElement(element)


def is_connectable(element) -> bool:
    return not isinstance(element, Connector) and bool(getattr(element, 'connectable', False))

