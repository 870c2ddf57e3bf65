"""
Scene files: shapes, groups and connectors described in YAML.

Example::

    name: demo
    shapes:
      - {id: a, x: 0, y: 0, w: 100, h: 100}
      - {id: b, x: 300, y: 0, w: 100, h: 100, rotate: 15, group: g}
    groups:
      - {id: g, members: [b]}
    connectors:
      - id: a-b
        mode: orthogonal
        source: {shape: a}
        target: {shape: b, position: [0, 0.5]}
      - id: free
        mode: curve
        source: {point: [0, 300]}
        target: {shape: a, near: [50, 200]}
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Literal, Optional, Tuple, Union
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..connector.anchors import calculate_nearest_location
from ..connector.generator import ConnectorPathGenerator
from ..connector.model import Connection, Connector, ConnectorMode, Label
from ..connector.scheduler import ConnectorUpdateScheduler
from ..connector.shapes import GroupShape, RectShape
from ..connector.surface import Surface
from ..core.config import RouterConfig
from ..core.exceptions import InvalidConnectionError, RouterError, SceneError
from ..core.types import SceneResultDict

logger = logging.getLogger(__name__)

MODE_NAMES = {
    'straight': ConnectorMode.STRAIGHT,
    'orthogonal': ConnectorMode.ORTHOGONAL,
    'curve': ConnectorMode.CURVE,
}


# ============================================================================
# Pydantic Models for Scene Validation
# ============================================================================

class ShapeEntry(BaseModel):
    """A rectangle shape"""
    id: str
    x: float
    y: float
    w: float = Field(gt=0)
    h: float = Field(gt=0)
    rotate: float = 0.0
    group: Optional[str] = None


class GroupEntry(BaseModel):
    """A group of shapes"""
    id: str
    members: List[str] = Field(min_length=1)


class EndEntry(BaseModel):
    """One connector end: attached to a shape or a free point"""
    model_config = ConfigDict(extra='forbid')

    shape: Optional[str] = None
    position: Optional[Tuple[float, float]] = None
    near: Optional[Tuple[float, float]] = None
    point: Optional[Tuple[float, float]] = None

    @model_validator(mode='after')
    def validate_end(self):
        if (self.shape is None) == (self.point is None):
            raise ValueError("an end needs exactly one of 'shape' or 'point'")
        if self.point is not None and (self.position is not None or self.near is not None):
            raise ValueError("'position' and 'near' only apply to ends attached to a shape")
        if self.position is not None and self.near is not None:
            raise ValueError("use either 'position' or 'near', not both")
        return self


class LabelEntry(BaseModel):
    distance: float = Field(0.5, ge=0, le=1)
    width: float = Field(0.0, ge=0)
    height: float = Field(0.0, ge=0)


class ConnectorEntry(BaseModel):
    """A connector between two ends"""
    id: str
    mode: Union[Literal['straight', 'orthogonal', 'curve'], int] = 'orthogonal'
    source: EndEntry
    target: EndEntry
    label: Optional[LabelEntry] = None

    @property
    def connector_mode(self) -> ConnectorMode:
        if isinstance(self.mode, str):
            return MODE_NAMES[self.mode]
        return ConnectorMode(self.mode)


class SceneModel(BaseModel):
    """Pydantic model for scene validation"""
    model_config = ConfigDict(extra='ignore')

    name: Optional[str] = None
    shapes: List[ShapeEntry] = Field(default_factory=list)
    groups: List[GroupEntry] = Field(default_factory=list)
    connectors: List[ConnectorEntry] = Field(default_factory=list)


# ============================================================================
# Scene
# ============================================================================

@dataclass
class Scene:
    """A loaded scene ready to be routed."""
    name: str
    surface: Surface
    connectors: List[Connector] = field(default_factory=list)

    @classmethod
    def from_model(cls, model: SceneModel, name: str) -> 'Scene':
        surface = Surface()
        shapes = {}
        for entry in model.shapes:
            shape = RectShape.from_xywh(entry.id, (entry.x, entry.y, entry.w, entry.h), entry.rotate, entry.group)
            shapes[entry.id] = shape
            surface.add(shape)

        for entry in model.groups:
            missing = [m for m in entry.members if m not in shapes]
            if missing:
                raise SceneError(f"Group '{entry.id}' references unknown shapes: {', '.join(missing)}")
            bound = shapes[entry.members[0]].bound.aabb()
            for member in entry.members[1:]:
                bound = bound.unite(shapes[member].bound.aabb())
            surface.add(GroupShape(entry.id, bound, list(entry.members)))

        connectors = []
        for entry in model.connectors:
            label = Label(entry.label.distance, entry.label.width, entry.label.height) if entry.label else None
            connectors.append(Connector.create(
                entry.id,
                _connection(entry.source, shapes),
                _connection(entry.target, shapes),
                entry.connector_mode,
                label=label,
            ))

        return cls(name=name, surface=surface, connectors=connectors)

    def route(self, config: Optional[RouterConfig] = None) -> SceneResultDict:
        """
        Add every connector to the surface and flush the scheduler once.

        Returns:
            Serialized connectors; ends referencing missing shapes keep their
            initial path and are reported as not routable
        """
        generator = ConnectorPathGenerator(self.surface.get, config)
        scheduler = ConnectorUpdateScheduler(self.surface, generator)
        try:
            for connector in self.connectors:
                if connector.id in self.surface:
                    continue
                try:
                    self.surface.add(connector)
                except (InvalidConnectionError, ValueError) as e:
                    raise SceneError(f"Connector '{connector.id}' cannot be added: {e}") from e
            updated = scheduler.flush()
        finally:
            scheduler.dispose()

        if scheduler.failures:
            failed = ', '.join(sorted(scheduler.failures))
            raise SceneError(f"Routing failed for connector(s): {failed}")

        logger.info(f"Routed {updated} of {len(self.connectors)} connectors in scene '{self.name}'")
        return {
            'scene': self.name,
            'connectors': [c.serialize() for c in self.connectors],
            'timestamp': datetime.now().isoformat(timespec='seconds'),
        }


def _connection(entry: EndEntry, shapes: dict) -> Connection:
    if entry.point is not None:
        return Connection.free(entry.point)
    if entry.near is not None:
        shape = shapes.get(entry.shape)
        if shape is None:
            raise SceneError(f"'near' needs a known shape, '{entry.shape}' is not defined")
        return Connection.attached(entry.shape, calculate_nearest_location(entry.near, shape.bound))
    return Connection.attached(entry.shape, entry.position)


def load_scene(scene_path: str) -> Scene:
    """
    Load and validate a YAML scene file

    Raises:
        FileNotFoundError: If the file does not exist
        SceneError: If the YAML or its structure is invalid
    """
    path = Path(scene_path)
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {scene_path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SceneError(f"Invalid YAML in {scene_path}: {e}") from e

    if not isinstance(data, dict):
        raise SceneError(f"Scene file {scene_path} must contain a mapping at the top level")

    try:
        model = SceneModel(**data)
        return Scene.from_model(model, model.name or path.stem)
    except ValidationError as e:
        raise SceneError(f"Scene validation failed: {e}") from e
    except SceneError:
        raise
    except (RouterError, ValueError) as e:
        raise SceneError(f"Scene '{path.stem}' is inconsistent: {e}") from e
