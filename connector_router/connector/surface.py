"""
In-memory surface document holding shapes and connectors.

The surface is the change feed the scheduler listens to: every add, update
and remove is announced to subscribers as an event model.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Union
import logging

from pydantic import BaseModel, ConfigDict

from ..core.exceptions import InvalidConnectionError
from ..geometry.bound import Bound
from .model import Connection, Connector
from .shapes import ConnectorElement, classify, is_connectable

logger = logging.getLogger(__name__)

GEOMETRY_PROPS = frozenset({'bound', 'xywh', 'rotate'})
CONNECTION_PROPS = frozenset({'source', 'target'})


class ShapeAdded(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str


class ShapeUpdated(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str
    props: List[str]


class ShapeRemoved(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str


SurfaceEvent = Union[ShapeAdded, ShapeUpdated, ShapeRemoved]
Listener = Callable[[SurfaceEvent], None]


class Surface:
    """Ordered element store; later elements sit above earlier ones."""

    def __init__(self):
        self._elements: Dict[str, Any] = {}
        self._listeners: List[Listener] = []

    # Queries

    def get(self, element_id: str) -> Optional[Any]:
        return self._elements.get(element_id)

    def __contains__(self, element_id: str) -> bool:
        return element_id in self._elements

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._elements.values()))

    def __len__(self) -> int:
        return len(self._elements)

    @property
    def connectors(self) -> List[Connector]:
        return [e for e in self._elements.values() if isinstance(e, Connector)]

    def get_connectors(self, shape_id: str) -> List[Connector]:
        """Connectors with either end attached to ``shape_id``."""
        return [
            c for c in self.connectors
            if c.source.shape_id == shape_id or c.target.shape_id == shape_id
        ]

    def get_elements_by_bound(self, bound: Bound) -> List[Any]:
        """Connectable shapes whose rotated bound overlaps ``bound``."""
        found = []
        for element in self._elements.values():
            if not is_connectable(element):
                continue
            box = element.bound.aabb()
            if (
                box.x <= bound.max_x and bound.x <= box.max_x
                and box.y <= bound.max_y and bound.y <= box.max_y
            ):
                found.append(element)
        return found

    # Mutations

    def add(self, element: Any) -> Any:
        """
        Add a shape or connector.

        Raises:
            ValueError: If the id is already taken
            InvalidConnectionError: If a connector end references another connector
        """
        kind = classify(element)
        if kind.id in self._elements:
            raise ValueError(f"Element '{kind.id}' already exists")
        if isinstance(kind, ConnectorElement):
            self._validate_connection(kind.connector.source)
            self._validate_connection(kind.connector.target)

        self._elements[kind.id] = element
        logger.debug(f"Added element '{kind.id}'")
        self._emit(ShapeAdded(id=kind.id))
        return element

    def update(self, element_id: str, **props: Any) -> Any:
        """
        Set properties on an element and announce which ones changed.

        Shapes also accept ``xywh`` and ``rotate``, which rebuild their bound.

        Raises:
            KeyError: If no element has this id
            InvalidConnectionError: If a new connection end references a connector
        """
        element = self._elements.get(element_id)
        if element is None:
            raise KeyError(f"Element '{element_id}' not found")
        changed = sorted(props)

        if isinstance(element, Connector):
            for name in sorted(CONNECTION_PROPS.intersection(props)):
                self._validate_connection(props[name])
        elif 'xywh' in props or 'rotate' in props:
            current = element.bound
            xywh = props.pop('xywh', current.serialize())
            rotate = props.pop('rotate', current.rotate)
            element.bound = Bound.deserialize(xywh, rotate)

        for name, value in props.items():
            setattr(element, name, value)

        self._emit(ShapeUpdated(id=element_id, props=changed))
        return element

    def remove(self, element_id: str) -> Optional[Any]:
        element = self._elements.pop(element_id, None)
        if element is not None:
            logger.debug(f"Removed element '{element_id}'")
            self._emit(ShapeRemoved(id=element_id))
        return element

    def _validate_connection(self, connection: Connection):
        if connection.shape_id is None:
            return
        target = self._elements.get(connection.shape_id)
        if isinstance(target, Connector):
            raise InvalidConnectionError(
                f"Connector ends cannot attach to connector '{connection.shape_id}'"
            )

    # Change feed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def dispose():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return dispose

    def _emit(self, event: SurfaceEvent):
        for listener in list(self._listeners):
            listener(event)
