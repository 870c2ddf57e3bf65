"""
2D vector helpers used across routing and anchor resolution.

Points and vectors share one representation: an immutable ``Vec`` tuple.
"""

from typing import NamedTuple, Optional, Sequence, Tuple
import math


DEFAULT_EPSILON = 1e-4


class Vec(NamedTuple):
    """Immutable 2D vector / point."""
    x: float
    y: float

    def __add__(self, other):  # type: ignore[override]
        return Vec(self.x + other[0], self.y + other[1])

    def __sub__(self, other):
        return Vec(self.x - other[0], self.y - other[1])

    def __mul__(self, scalar):  # type: ignore[override]
        return Vec(self.x * scalar, self.y * scalar)

    def __neg__(self):
        return Vec(-self.x, -self.y)

    def add(self, other: Sequence[float]) -> 'Vec':
        return self + other

    def sub(self, other: Sequence[float]) -> 'Vec':
        return self - other

    def mul(self, scalar: float) -> 'Vec':
        return self * scalar

    def len(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def dist(self, other: Sequence[float]) -> float:
        return math.hypot(self.x - other[0], self.y - other[1])

    def normalize(self) -> 'Vec':
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.len()
        if length == 0:
            return Vec(0.0, 0.0)
        return Vec(self.x / length, self.y / length)

    def rotate(self, angle: float) -> 'Vec':
        """Rotate about the origin by ``angle`` radians."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return Vec(self.x * cos_a - self.y * sin_a, self.x * sin_a + self.y * cos_a)

    def rotate_about(self, center: Sequence[float], angle: float) -> 'Vec':
        return (self - center).rotate(angle) + center

    def project_length(self, direction: Sequence[float]) -> float:
        """Signed length of this vector projected onto ``direction``."""
        unit = Vec(direction[0], direction[1]).normalize()
        return self.x * unit.x + self.y * unit.y

    def lerp(self, other: Sequence[float], t: float) -> 'Vec':
        return Vec(self.x + (other[0] - self.x) * t, self.y + (other[1] - self.y) * t)

    def is_zero(self, eps: float = DEFAULT_EPSILON) -> bool:
        return abs(self.x) < eps and abs(self.y) < eps

    def almost_equal(self, other: Sequence[float], eps: float = DEFAULT_EPSILON) -> bool:
        return almost_equal(self.x, other[0], eps) and almost_equal(self.y, other[1], eps)


def vec(point: Sequence[float]) -> Vec:
    """Coerce any (x, y) sequence to a ``Vec``."""
    if isinstance(point, Vec):
        return point
    return Vec(float(point[0]), float(point[1]))


def almost_equal(a: float, b: float, eps: float = DEFAULT_EPSILON) -> bool:
    return abs(a - b) < eps


def sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[1] - a[1] * b[0]


def line_intersection(
    a0: Sequence[float],
    a1: Sequence[float],
    b0: Sequence[float],
    b1: Sequence[float],
    infinite: bool = False
) -> Optional[Vec]:
    """
    Intersection point of segments (or lines) a0-a1 and b0-b1.

    Args:
        a0, a1: First segment
        b0, b1: Second segment
        infinite: Treat both as infinite lines instead of segments

    Returns:
        Intersection point, or None when parallel or not intersecting
    """
    r = Vec(a1[0] - a0[0], a1[1] - a0[1])
    s = Vec(b1[0] - b0[0], b1[1] - b0[1])
    denom = cross(r, s)
    if abs(denom) < 1e-12:
        return None

    qp = Vec(b0[0] - a0[0], b0[1] - a0[1])
    t = cross(qp, s) / denom
    u = cross(qp, r) / denom

    if not infinite and not (-1e-9 <= t <= 1 + 1e-9 and -1e-9 <= u <= 1 + 1e-9):
        return None

    return Vec(a0[0] + t * r.x, a0[1] + t * r.y)


def nearest_point_on_line(
    a: Sequence[float],
    b: Sequence[float],
    p: Sequence[float],
    clamp_to_segment: bool = True
) -> Vec:
    """Foot of the perpendicular from ``p`` onto line a-b."""
    a = vec(a)
    ab = vec(b) - a
    length_sq = dot(ab, ab)
    if length_sq == 0:
        return a
    t = dot(vec(p) - a, ab) / length_sq
    if clamp_to_segment:
        t = clamp(t, 0.0, 1.0)
    return a + ab * t


def distance_to_line(
    a: Sequence[float],
    b: Sequence[float],
    p: Sequence[float],
    clamp_to_segment: bool = True
) -> float:
    return nearest_point_on_line(a, b, p, clamp_to_segment).dist(p)


def is_overlap(
    line1: Tuple[Sequence[float], Sequence[float]],
    line2: Tuple[Sequence[float], Sequence[float]],
    axis: int,
    strict: bool = False
) -> bool:
    """Check whether two segments overlap when projected on ``axis`` (0: x, 1: y)."""
    lo1, hi1 = sorted((line1[0][axis], line1[1][axis]))
    lo2, hi2 = sorted((line2[0][axis], line2[1][axis]))
    if strict:
        return lo1 < hi2 and lo2 < hi1
    return lo1 <= hi2 and lo2 <= hi1


def cubic_point(
    p0: Sequence[float],
    c0: Sequence[float],
    c1: Sequence[float],
    p1: Sequence[float],
    t: float
) -> Vec:
    """Evaluate a cubic Bezier at ``t`` with De Casteljau's construction."""
    a = vec(p0).lerp(c0, t)
    b = vec(c0).lerp(c1, t)
    c = vec(c1).lerp(p1, t)
    d = a.lerp(b, t)
    e = b.lerp(c, t)
    return d.lerp(e, t)


def to_radian(degrees: float) -> float:
    return degrees * math.pi / 180.0
