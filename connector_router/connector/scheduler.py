"""
Change batching for connector recomputes.

Surface events only mark connectors as pending; the host calls ``flush()``
at its own tick boundary and every pending connector is recomputed once,
however many events touched it.
"""

from typing import Callable, Dict, Iterable, List, Optional
import logging

from ..core.exceptions import RouterError
from .generator import ConnectorPathGenerator
from .model import Connector
from .shapes import ConnectorElement, classify
from .surface import (
    CONNECTION_PROPS,
    GEOMETRY_PROPS,
    ShapeAdded,
    ShapeRemoved,
    ShapeUpdated,
    Surface,
    SurfaceEvent,
)

logger = logging.getLogger(__name__)


class PendingSet:
    """Insertion-ordered set of connector ids."""

    def __init__(self):
        self._ids: Dict[str, None] = {}

    def add(self, connector_id: str) -> bool:
        """Add an id; returns False if it was already pending."""
        if connector_id in self._ids:
            return False
        self._ids[connector_id] = None
        return True

    def drain(self) -> List[str]:
        """Return the pending ids and empty the set."""
        ids = list(self._ids)
        self._ids.clear()
        return ids

    def clear(self):
        self._ids.clear()

    def __contains__(self, connector_id: str) -> bool:
        return connector_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(list(self._ids))


class ConnectorUpdateScheduler:
    """
    Keeps connector paths in sync with the surface.

    - Shape added, moved, resized, rotated or removed: its connectors are queued
    - Connector added: queued
    - Connector ``mode`` changed: flagged for a full re-route and queued
    - Connector end changed while ``local_updating``: queued, flag cleared
    """

    def __init__(
        self,
        surface: Surface,
        generator: ConnectorPathGenerator,
        recompute_existing: bool = True
    ):
        self.surface = surface
        self.generator = generator
        self.pending = PendingSet()
        self.failures: Dict[str, RouterError] = {}
        self._unsubscribe: Optional[Callable[[], None]] = surface.subscribe(self.handle_event)

        if recompute_existing:
            for connector in surface.connectors:
                self._recompute(connector)

    def enqueue(self, connectors: Iterable[Connector]):
        for connector in connectors:
            if self.pending.add(connector.id):
                logger.debug(f"Queued connector '{connector.id}'")

    def handle_event(self, event: SurfaceEvent):
        if isinstance(event, ShapeRemoved):
            self.enqueue(self.surface.get_connectors(event.id))
            return

        element = self.surface.get(event.id)
        if element is None:
            return
        kind = classify(element)

        if isinstance(event, ShapeAdded):
            if isinstance(kind, ConnectorElement):
                self.enqueue([kind.connector])
            else:
                self.enqueue(self.surface.get_connectors(event.id))
            return

        if isinstance(event, ShapeUpdated):
            props = set(event.props)
            if props & GEOMETRY_PROPS:
                self.enqueue(self.surface.get_connectors(event.id))

            if isinstance(kind, ConnectorElement):
                connector = kind.connector
                if props & CONNECTION_PROPS and connector.flags.local_updating:
                    self.enqueue([connector])
                    connector.flags.local_updating = False
                if 'mode' in props:
                    connector.flags.mode_updating = True
                    self.enqueue([connector])

    def flush(self) -> int:
        """
        Recompute every pending connector once.

        Returns:
            Number of connectors whose path was rewritten
        """
        updated = 0
        for connector_id in self.pending.drain():
            connector = self.surface.get(connector_id)
            if not isinstance(connector, Connector):
                continue
            if self._recompute(connector):
                updated += 1

        if updated:
            logger.info(f"Flushed {updated} connector update(s)")
        return updated

    def _recompute(self, connector: Connector) -> bool:
        try:
            changed = self.generator.recompute_from_ends(connector)
        except RouterError as e:
            logger.error(f"Recompute of connector '{connector.id}' aborted: {e}")
            self.failures[connector.id] = e
            return False
        self.failures.pop(connector.id, None)
        return changed

    def dispose(self):
        """Stop listening to the surface and drop anything still pending."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.pending.clear()
