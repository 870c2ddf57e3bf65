"""
Connector entities and everything that keeps their paths up to date.

- model: connector, connection ends, modes
- shapes: the shape surface connectors attach to
- anchors: resolving connection ends to path points
- generator: mode-specific path generation and write-back
- scheduler: batching of recomputes triggered by surface changes
- snapping / handle: interactive editing
"""

from .model import Connection, Connector, ConnectorMode, Label, TransientFlags
from .shapes import RectShape, GroupShape, Shape, classify
from .anchors import AnchorResolver, calculate_nearest_location
from .generator import ConnectorPathGenerator
from .surface import Surface, ShapeAdded, ShapeUpdated, ShapeRemoved
from .scheduler import ConnectorUpdateScheduler, PendingSet
from .snapping import ConnectionOverlay, Viewport, SnapResult
from .handle import EndpointDrag, WaypointDrag, middle_handle_positions

__all__ = [
    'Connection',
    'Connector',
    'ConnectorMode',
    'Label',
    'TransientFlags',
    'RectShape',
    'GroupShape',
    'Shape',
    'classify',
    'AnchorResolver',
    'calculate_nearest_location',
    'ConnectorPathGenerator',
    'Surface',
    'ShapeAdded',
    'ShapeUpdated',
    'ShapeRemoved',
    'ConnectorUpdateScheduler',
    'PendingSet',
    'ConnectionOverlay',
    'Viewport',
    'SnapResult',
    'EndpointDrag',
    'WaypointDrag',
    'middle_handle_positions',
]
