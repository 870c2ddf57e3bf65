"""
Connector entity: two connection ends, a routing mode and the stored path.

The path is stored relative to the connector's bounding box origin; the
absolute path is always derived from it. ``write_path`` is the only way the
path and box change together.
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from ..core.exceptions import InvalidConnectionError, InvalidPathError
from ..core.types import ConnectionDict, ConnectorDict
from ..geometry.bezier import sample_bezier_path
from ..geometry.bound import Bound
from ..geometry.point_location import PathPoint, serialize_path, deserialize_path
from ..geometry.vec import Vec

RELATIVE_EPSILON = 1e-6


class ConnectorMode(IntEnum):
    STRAIGHT = 0
    ORTHOGONAL = 1
    CURVE = 2


class Connection(BaseModel):
    """
    One end of a connector.

    With ``shape_id`` the end is attached to a shape and ``position`` (when
    given) is relative to the shape's bound. Without a position the end is
    "auto" and the nearest anchor is picked on every recompute. Without a
    shape id, ``position`` is an absolute point.
    """
    model_config = ConfigDict(frozen=True)

    shape_id: Optional[str] = None
    position: Optional[Tuple[float, float]] = None

    @model_validator(mode='after')
    def validate_end(self):
        if self.shape_id is None and self.position is None:
            raise ValueError("a connection needs a shape id or a position")
        if self.shape_id is not None and self.position is not None:
            for value in self.position:
                if not -RELATIVE_EPSILON <= value <= 1 + RELATIVE_EPSILON:
                    raise ValueError(
                        f"relative position {self.position} of shape '{self.shape_id}' is outside [0, 1]"
                    )
        return self

    @property
    def is_auto(self) -> bool:
        return self.shape_id is not None and self.position is None

    @property
    def is_free(self) -> bool:
        return self.shape_id is None

    @classmethod
    def free(cls, point: Sequence[float]) -> 'Connection':
        return cls.build(position=point)

    @classmethod
    def attached(cls, shape_id: str, position: Optional[Sequence[float]] = None) -> 'Connection':
        return cls.build(shape_id=shape_id, position=position)

    @classmethod
    def build(cls, shape_id: Optional[str] = None, position: Optional[Sequence[float]] = None) -> 'Connection':
        """Validated constructor raising ``InvalidConnectionError``."""
        try:
            return cls(
                shape_id=shape_id,
                position=tuple(float(v) for v in position) if position is not None else None,
            )
        except ValidationError as e:
            raise InvalidConnectionError(f"Invalid connection: {e}") from e

    @classmethod
    def from_dict(cls, data: ConnectionDict) -> 'Connection':
        return cls.build(shape_id=data.get('id'), position=data.get('position'))

    def to_dict(self) -> ConnectionDict:
        data: ConnectionDict = {}
        if self.shape_id is not None:
            data['id'] = self.shape_id
        if self.position is not None:
            data['position'] = list(self.position)
        return data


@dataclass
class TransientFlags:
    """Per-connector state that is never persisted."""
    local_updating: bool = False
    mode_updating: bool = False


@dataclass(frozen=True)
class Label:
    """Text label placed at a fractional distance along the path."""
    distance: float = 0.5
    width: float = 0.0
    height: float = 0.0
    x: float = 0.0
    y: float = 0.0

    @property
    def xywh(self) -> List[float]:
        return [self.x, self.y, self.width, self.height]

    def centered_at(self, point: Sequence[float]) -> 'Label':
        return replace(self, x=point[0] - self.width / 2, y=point[1] - self.height / 2)


STASHABLE_FIELDS = ('bound', 'relative_path', 'label', 'source', 'target', 'mode')


class Connector:
    """A connector element on the surface."""

    def __init__(
        self,
        connector_id: str,
        source: Connection,
        target: Connection,
        mode: ConnectorMode = ConnectorMode.ORTHOGONAL,
        bound: Optional[Bound] = None,
        relative_path: Sequence[PathPoint] = (),
        rotate: float = 0.0,
        label: Optional[Label] = None
    ):
        self.id = connector_id
        self.source = source
        self.target = target
        self.mode = ConnectorMode(mode)
        self.bound = bound or Bound(0.0, 0.0, 0.0, 0.0)
        self.relative_path: Tuple[PathPoint, ...] = tuple(relative_path)
        self.rotate = rotate
        self.label = label
        self.flags = TransientFlags()
        self.routable = True
        self._stash: Dict[str, Any] = {}

    @property
    def mode(self) -> ConnectorMode:
        return self._mode

    @mode.setter
    def mode(self, value):
        self._mode = ConnectorMode(value)

    @classmethod
    def create(
        cls,
        connector_id: str,
        source: Connection,
        target: Connection,
        mode: ConnectorMode = ConnectorMode.ORTHOGONAL,
        label: Optional[Label] = None
    ) -> 'Connector':
        """
        New connector with the default two-point path.

        Free ends start at their position; attached ends start at the origin
        until the first recompute resolves them.
        """
        start = Vec(*source.position) if source.is_free else Vec(0.0, 0.0)
        end = Vec(*target.position) if target.is_free else Vec(0.0, 0.0)
        connector = cls(connector_id, source, target, mode, label=label)
        connector.write_path_absolute([PathPoint.from_vec(start), PathPoint.from_vec(end)])
        return connector

    # Path views

    @property
    def absolute_path(self) -> Tuple[PathPoint, ...]:
        dx, dy = self.bound.x, self.bound.y
        return tuple(p.translated(dx, dy) for p in self.relative_path)

    @property
    def label_xywh(self) -> Optional[List[float]]:
        return self.label.xywh if self.label else None

    def write_path(self, bound: Bound, relative_path: Sequence[PathPoint]):
        """Replace bounding box and relative path together."""
        self.bound = bound
        self.relative_path = tuple(relative_path)

    def write_path_absolute(self, absolute_path: Sequence[PathPoint], bound: Optional[Bound] = None):
        """Store an absolute path, translating it into the frame of ``bound``."""
        if bound is None:
            bound = Bound.from_points([p.vec for p in absolute_path])
        self.write_path(bound, [p.translated(-bound.x, -bound.y) for p in absolute_path])

    def point_at_distance(self, fraction: float) -> Vec:
        """Point at ``fraction`` (0..1) of the path's length."""
        path = self.absolute_path
        if not path:
            return Vec(self.bound.x, self.bound.y)

        if self.mode == ConnectorMode.CURVE:
            points = sample_bezier_path(path)
        else:
            points = [p.vec for p in path]

        lengths = [a.dist(b) for a, b in zip(points, points[1:])]
        total = sum(lengths)
        if total == 0:
            return points[0]

        remaining = max(0.0, min(1.0, fraction)) * total
        for (a, b), length in zip(zip(points, points[1:]), lengths):
            if remaining <= length and length > 0:
                return a.lerp(b, remaining / length)
            remaining -= length
        return points[-1]

    def update_label(self):
        """Re-place the label at its fractional distance along the path."""
        if self.label is not None:
            self.label = self.label.centered_at(self.point_at_distance(self.label.distance))

    # Stash / commit for interactive edits

    def stash(self, *fields: str):
        """Snapshot ``fields`` so an interactive edit can be rolled back."""
        for name in fields:
            if name not in STASHABLE_FIELDS:
                raise ValueError(f"Field '{name}' cannot be stashed")
            if name not in self._stash:
                self._stash[name] = getattr(self, name)

    def pop(self, *fields: str):
        """Commit ``fields``: keep their current values and drop the snapshot."""
        for name in fields or tuple(self._stash):
            self._stash.pop(name, None)

    def restore(self):
        """Roll every stashed field back to its snapshot."""
        for name, value in self._stash.items():
            setattr(self, name, value)
        self._stash.clear()

    @property
    def stashed(self) -> Tuple[str, ...]:
        return tuple(self._stash)

    # Serialization

    def serialize(self) -> ConnectorDict:
        data: ConnectorDict = {
            'id': self.id,
            'mode': int(self.mode),
            'source': self.source.to_dict(),
            'target': self.target.to_dict(),
            'xywh': self.bound.serialize(),
            'rotate': self.rotate,
            'points': serialize_path(self.relative_path),
            'routable': self.routable,
        }
        if self.label is not None:
            data['label_xywh'] = self.label.xywh
            data['label_distance'] = self.label.distance
        return data

    @classmethod
    def deserialize(cls, data: ConnectorDict) -> 'Connector':
        """
        Rebuild a connector from its serialized form.

        Raises:
            InvalidPathError: If ``points`` or ``xywh`` are malformed
            InvalidConnectionError: If either end is invalid
        """
        try:
            points = deserialize_path(data.get('points', []))
            bound = Bound.deserialize(data['xywh'])
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidPathError(f"Connector '{data.get('id')}' has a malformed path: {e}") from e

        label = None
        if 'label_xywh' in data:
            x, y, w, h = data['label_xywh']
            label = Label(distance=data.get('label_distance', 0.5), width=w, height=h, x=x, y=y)

        connector = cls(
            data['id'],
            Connection.from_dict(data['source']),
            Connection.from_dict(data['target']),
            ConnectorMode(data.get('mode', ConnectorMode.ORTHOGONAL)),
            bound=bound,
            relative_path=points,
            rotate=data.get('rotate', 0.0),
            label=label,
        )
        connector.routable = data.get('routable', True)
        return connector

    def __repr__(self):
        return f"Connector(id={self.id!r}, mode={self.mode.name}, points={len(self.relative_path)})"
