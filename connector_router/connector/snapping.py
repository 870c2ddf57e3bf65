"""
Interactive snapping of a dragged connector end onto nearby shapes.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging

from ..core.config import RouterConfig, DEFAULT_CONFIG
from ..geometry.bound import Bound
from ..geometry.vec import Vec, vec, clamp
from .anchors import AnchorResolver
from .model import Connection
from .shapes import GroupShape
from .surface import Surface

logger = logging.getLogger(__name__)

# Match priorities, highest wins
MATCH_INSIDE = 1
MATCH_OUTLINE = 2
MATCH_ANCHOR = 3


@dataclass
class Viewport:
    """Model-to-screen transform: screen = (model - origin) * zoom."""
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0
    width: float = 1920.0
    height: float = 1080.0

    def to_view(self, point: Sequence[float]) -> Vec:
        return Vec((point[0] - self.x) * self.zoom, (point[1] - self.y) * self.zoom)

    def to_model(self, point: Sequence[float]) -> Vec:
        return Vec(point[0] / self.zoom + self.x, point[1] / self.zoom + self.y)

    @property
    def viewport_bounds(self) -> Bound:
        return Bound(self.x, self.y, self.width / self.zoom, self.height / self.zoom)


@dataclass(frozen=True)
class SnapResult:
    """Connection chosen for a pointer position and what it matched."""
    connection: Connection
    highlight_point: Optional[Vec] = None
    priority: int = 0


class ConnectionOverlay:
    """
    Picks the connection a dragged end should take.

    Priority, per shape near the pointer: an anchor within the snap radius,
    then the nearest outline point within the radius (stored relative and
    clamped to the bound), then the shape body (auto connection). With no
    match the end stays free at the pointer. Radii are in screen pixels.
    """

    def __init__(self, surface: Surface, viewport: Optional[Viewport] = None, config: Optional[RouterConfig] = None):
        self.surface = surface
        self.viewport = viewport or Viewport()
        self.config = config or DEFAULT_CONFIG
        self.resolver = AnchorResolver(surface.get, self.config)

        self.points: List[Vec] = []
        self.highlight_point: Optional[Vec] = None
        self.source_bounds: Optional[Bound] = None
        self.target_bounds: Optional[Bound] = None

    def _clear_points(self):
        self.points = []
        self.highlight_point = None

    def clear(self):
        self.source_bounds = None
        self.target_bounds = None
        self._clear_points()

    def _screen_distance(self, a: Sequence[float], b: Sequence[float]) -> float:
        return self.viewport.to_view(a).dist(self.viewport.to_view(b))

    def render_connector(self, point: Sequence[float], excluded_ids: Sequence[str] = ()) -> SnapResult:
        """
        Resolve the connection for a pointer at ``point`` (model coordinates).

        Shapes later on the surface sit on top and win ties between equal
        priority matches. Anchor matches end the search immediately.
        """
        point = vec(point)
        radius = self.config.snap_radius
        self._clear_points()

        best: Optional[SnapResult] = None
        matched = None

        for shape in self.surface.get_elements_by_bound(self.viewport.viewport_bounds):
            if shape.id in excluded_ids:
                continue
            if not shape.bound.aabb().expand(self.config.hit_expand).contains_point(point):
                continue

            anchors = self.resolver.get_anchors(shape)
            self.points = [a.point.vec for a in anchors]

            nearest_anchor = min(anchors, key=lambda a: self._screen_distance(a.point.vec, point), default=None)
            if nearest_anchor is not None and self._screen_distance(nearest_anchor.point.vec, point) < radius:
                best = SnapResult(
                    Connection.attached(shape.id, nearest_anchor.coord),
                    nearest_anchor.point.vec,
                    MATCH_ANCHOR,
                )
                matched = shape
                break

            outline = vec(shape.nearest_point(point))
            if self._screen_distance(outline, point) < radius:
                if best is None or best.priority <= MATCH_OUTLINE:
                    local = shape.bound.unrotated_point(outline)
                    rel = shape.bound.to_relative(local)
                    best = SnapResult(
                        Connection.attached(shape.id, (clamp(rel.x, 0, 1), clamp(rel.y, 0, 1))),
                        outline,
                        MATCH_OUTLINE,
                    )
                    matched = shape
                continue

            if shape.point_inside(point) and (best is None or best.priority <= MATCH_INSIDE):
                best = SnapResult(Connection.attached(shape.id), None, MATCH_INSIDE)
                matched = shape

        self.target_bounds = self._group_bound(matched)

        if best is None:
            best = SnapResult(Connection.free(point))
        self.highlight_point = best.highlight_point

        logger.debug(f"Snapped pointer {tuple(point)} to {best.connection}")
        return best

    def _group_bound(self, shape) -> Optional[Bound]:
        if shape is None or not shape.group:
            return None
        group = self.surface.get(shape.group)
        if isinstance(group, GroupShape):
            return group.bound
        return None
