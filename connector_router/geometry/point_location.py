"""
PathPoint: the element type of a connector path.

A path point carries its position, the outward tangent of the outline it
sits on (for endpoints), the inbound/outbound Bezier control offsets and the
per-axis pin flags set by interactive edits.
"""

from dataclasses import dataclass, field, replace
from typing import List, Sequence

from .vec import Vec, vec
from ..core.types import SerializedPathPoint


ZERO = Vec(0.0, 0.0)


@dataclass(frozen=True)
class PathPoint:
    """
    Immutable path point.

    Attributes:
        x, y: Position
        tangent: Outward direction at an anchor (zero for free points)
        in_vec: Inbound control offset relative to the point
        out_vec: Outbound control offset relative to the point
        pinned_x: The x coordinate was fixed by a user edit
        pinned_y: The y coordinate was fixed by a user edit
    """
    x: float
    y: float
    tangent: Vec = field(default=ZERO)
    in_vec: Vec = field(default=ZERO)
    out_vec: Vec = field(default=ZERO)
    pinned_x: bool = False
    pinned_y: bool = False

    def __post_init__(self):
        # Accept any (x, y) sequence for the vector fields
        object.__setattr__(self, 'tangent', vec(self.tangent))
        object.__setattr__(self, 'in_vec', vec(self.in_vec))
        object.__setattr__(self, 'out_vec', vec(self.out_vec))

    @classmethod
    def from_vec(cls, point: Sequence[float], tangent: Sequence[float] = ZERO) -> 'PathPoint':
        return cls(float(point[0]), float(point[1]), tangent=vec(tangent))

    @property
    def vec(self) -> Vec:
        return Vec(self.x, self.y)

    @property
    def abs_in(self) -> Vec:
        return Vec(self.x + self.in_vec.x, self.y + self.in_vec.y)

    @property
    def abs_out(self) -> Vec:
        return Vec(self.x + self.out_vec.x, self.y + self.out_vec.y)

    @property
    def is_pinned(self) -> bool:
        return self.pinned_x or self.pinned_y

    def __getitem__(self, axis: int) -> float:
        """Coordinate by axis index (0: x, 1: y)."""
        if axis == 0:
            return self.x
        if axis == 1:
            return self.y
        raise IndexError(axis)

    def pinned(self, axis: int) -> bool:
        return self.pinned_x if axis == 0 else self.pinned_y

    def with_position(self, point: Sequence[float]) -> 'PathPoint':
        return replace(self, x=float(point[0]), y=float(point[1]))

    def with_axis(self, axis: int, value: float) -> 'PathPoint':
        if axis == 0:
            return replace(self, x=float(value))
        return replace(self, y=float(value))

    def with_pins(self, pinned_x: bool, pinned_y: bool) -> 'PathPoint':
        return replace(self, pinned_x=pinned_x, pinned_y=pinned_y)

    def pin_axis(self, axis: int) -> 'PathPoint':
        """Pin ``axis`` while keeping any existing pin on the other axis."""
        return replace(
            self,
            pinned_x=self.pinned_x or axis == 0,
            pinned_y=self.pinned_y or axis == 1,
        )

    def with_controls(
        self,
        in_vec: Sequence[float] = None,
        out_vec: Sequence[float] = None,
        tangent: Sequence[float] = None
    ) -> 'PathPoint':
        return replace(
            self,
            in_vec=self.in_vec if in_vec is None else vec(in_vec),
            out_vec=self.out_vec if out_vec is None else vec(out_vec),
            tangent=self.tangent if tangent is None else vec(tangent),
        )

    def translated(self, dx: float, dy: float) -> 'PathPoint':
        return replace(self, x=self.x + dx, y=self.y + dy)

    def serialize(self) -> SerializedPathPoint:
        """Wire format: ``[[x, y], [tx, ty], [inX, inY], [outX, outY], pinnedX, pinnedY]``."""
        return [
            [self.x, self.y],
            [self.tangent.x, self.tangent.y],
            [self.in_vec.x, self.in_vec.y],
            [self.out_vec.x, self.out_vec.y],
            1 if self.pinned_x else 0,
            1 if self.pinned_y else 0,
        ]

    @classmethod
    def deserialize(cls, data: Sequence) -> 'PathPoint':
        xy, tangent, in_vec, out_vec, pinned_x, pinned_y = data
        return cls(
            float(xy[0]),
            float(xy[1]),
            tangent=vec(tangent),
            in_vec=vec(in_vec),
            out_vec=vec(out_vec),
            pinned_x=bool(pinned_x),
            pinned_y=bool(pinned_y),
        )


def serialize_path(path: Sequence[PathPoint]) -> List[SerializedPathPoint]:
    return [p.serialize() for p in path]


def deserialize_path(data: Sequence[Sequence]) -> List[PathPoint]:
    return [PathPoint.deserialize(item) for item in data]
