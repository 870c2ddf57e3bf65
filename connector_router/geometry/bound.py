"""
Axis-aligned rectangles with optional rotation about their own center.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple
import math

from .vec import Vec, vec, to_radian


Line = Tuple[Vec, Vec]


@dataclass(frozen=True)
class Bound:
    """
    Rectangle ``{x, y, w, h}`` plus a rotation in degrees.

    The rotation is always about the rectangle's center and only matters for
    the rotation-aware helpers (``rotated_point``, ``unrotated_point``,
    ``rotated_vertices``, ``aabb``); every other property describes the
    unrotated rectangle.
    """
    x: float
    y: float
    w: float
    h: float
    rotate: float = 0.0

    # Extents

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.w

    @property
    def max_y(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> Vec:
        return Vec(self.x + self.w / 2, self.y + self.h / 2)

    @property
    def points(self) -> List[Vec]:
        """Vertices clockwise from the top-left corner."""
        return [
            Vec(self.x, self.y),
            Vec(self.max_x, self.y),
            Vec(self.max_x, self.max_y),
            Vec(self.x, self.max_y),
        ]

    @property
    def midpoints(self) -> List[Vec]:
        """Edge midpoints: top, right, bottom, left."""
        cx, cy = self.center
        return [
            Vec(cx, self.y),
            Vec(self.max_x, cy),
            Vec(cx, self.max_y),
            Vec(self.x, cy),
        ]

    @property
    def vertices_and_midpoints(self) -> List[Vec]:
        return self.points + self.midpoints

    # Edge segments

    @property
    def upper_line(self) -> Line:
        return (Vec(self.x, self.y), Vec(self.max_x, self.y))

    @property
    def lower_line(self) -> Line:
        return (Vec(self.x, self.max_y), Vec(self.max_x, self.max_y))

    @property
    def left_line(self) -> Line:
        return (Vec(self.x, self.y), Vec(self.x, self.max_y))

    @property
    def right_line(self) -> Line:
        return (Vec(self.max_x, self.y), Vec(self.max_x, self.max_y))

    @property
    def horizontal_line(self) -> Line:
        cy = self.center.y
        return (Vec(self.x, cy), Vec(self.max_x, cy))

    @property
    def vertical_line(self) -> Line:
        cx = self.center.x
        return (Vec(cx, self.y), Vec(cx, self.max_y))

    # Derived bounds

    def expand(self, left: float, top: float = None, right: float = None, bottom: float = None) -> 'Bound':
        """
        Grow each side outward (negative values shrink).

        With a single argument every side grows by the same amount. Width and
        height never go negative; an over-shrunk side collapses onto the
        rectangle's center line.
        """
        if top is None:
            top = left
        if right is None:
            right = left
        if bottom is None:
            bottom = top

        x = self.x - left
        y = self.y - top
        w = self.w + left + right
        h = self.h + top + bottom

        if w < 0:
            x = self.center.x
            w = 0.0
        if h < 0:
            y = self.center.y
            h = 0.0

        return Bound(x, y, w, h, self.rotate)

    def unite(self, other: 'Bound') -> 'Bound':
        x1 = min(self.x, other.x)
        y1 = min(self.y, other.y)
        x2 = max(self.max_x, other.max_x)
        y2 = max(self.max_y, other.max_y)
        return Bound(x1, y1, x2 - x1, y2 - y1)

    def include(self, point: Sequence[float]) -> 'Bound':
        """Smallest bound covering this one and ``point``."""
        x1 = min(self.x, point[0])
        y1 = min(self.y, point[1])
        x2 = max(self.max_x, point[0])
        y2 = max(self.max_y, point[1])
        return Bound(x1, y1, x2 - x1, y2 - y1)

    # Containment

    def contains_point(self, point: Sequence[float], tolerance: float = 0.0) -> bool:
        """Inclusive containment; ``tolerance`` widens every side."""
        px, py = point[0], point[1]
        return (
            self.x - tolerance <= px <= self.max_x + tolerance
            and self.y - tolerance <= py <= self.max_y + tolerance
        )

    def is_point_strictly_inside(self, point: Sequence[float], eps: float = 1e-6) -> bool:
        px, py = point[0], point[1]
        return (
            self.x + eps < px < self.max_x - eps
            and self.y + eps < py < self.max_y - eps
        )

    def segment_crosses_interior(self, a: Sequence[float], b: Sequence[float], eps: float = 1e-6) -> bool:
        """
        Check whether segment a-b passes through the open interior.

        Segments running along an edge, or touching the rectangle only at
        its boundary, do not count as crossing. Uses Liang-Barsky clipping
        against the rectangle shrunk by ``eps``.
        """
        x0, y0 = a[0], a[1]
        dx, dy = b[0] - x0, b[1] - y0
        t0, t1 = 0.0, 1.0

        for p, q in (
            (-dx, x0 - (self.x + eps)),
            (dx, (self.max_x - eps) - x0),
            (-dy, y0 - (self.y + eps)),
            (dy, (self.max_y - eps) - y0),
        ):
            if p == 0:
                if q <= 0:
                    return False
                continue
            t = q / p
            if p < 0:
                t0 = max(t0, t)
            else:
                t1 = min(t1, t)
            if t0 >= t1:
                return False

        return True

    # Relative coordinates

    def to_relative(self, point: Sequence[float]) -> Vec:
        rx = (point[0] - self.x) / self.w if self.w else 0.0
        ry = (point[1] - self.y) / self.h if self.h else 0.0
        return Vec(rx, ry)

    def from_relative(self, rel: Sequence[float]) -> Vec:
        return Vec(self.x + rel[0] * self.w, self.y + rel[1] * self.h)

    # Rotation

    def rotated_point(self, point: Sequence[float]) -> Vec:
        """Map a point from the bound's unrotated frame to world space."""
        if not self.rotate:
            return vec(point)
        return vec(point).rotate_about(self.center, to_radian(self.rotate))

    def unrotated_point(self, point: Sequence[float]) -> Vec:
        """Map a world-space point back into the bound's unrotated frame."""
        if not self.rotate:
            return vec(point)
        return vec(point).rotate_about(self.center, -to_radian(self.rotate))

    def rotated_vertices(self) -> List[Vec]:
        return [self.rotated_point(p) for p in self.points]

    def aabb(self) -> 'Bound':
        """Axis-aligned bound of the rotated rectangle (rotation dropped)."""
        if not self.rotate:
            return Bound(self.x, self.y, self.w, self.h)
        return Bound.from_points(self.rotated_vertices())

    # Construction / serialization

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> 'Bound':
        xs: List[float] = []
        ys: List[float] = []
        for p in points:
            xs.append(p[0])
            ys.append(p[1])
        if not xs:
            return cls(0.0, 0.0, 0.0, 0.0)
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def serialize(self) -> List[float]:
        return [self.x, self.y, self.w, self.h]

    @classmethod
    def deserialize(cls, xywh: Sequence[float], rotate: float = 0.0) -> 'Bound':
        x, y, w, h = xywh
        return cls(float(x), float(y), float(w), float(h), rotate)

    def almost_equal(self, other: 'Bound', eps: float = 1e-6) -> bool:
        return all(
            math.isclose(a, b, abs_tol=eps)
            for a, b in zip(self.serialize() + [self.rotate], other.serialize() + [other.rotate])
        )
