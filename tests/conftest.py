"""
Shared pytest fixtures and utilities for testing
"""

import pytest

from connector_router.connector.generator import ConnectorPathGenerator
from connector_router.connector.model import Connection, Connector, ConnectorMode
from connector_router.connector.shapes import RectShape
from connector_router.connector.surface import Surface


@pytest.fixture
def surface():
    """Surface with two side-by-side shapes: 'a' at (0,0,100,100) and 'b' at (300,0,100,100)"""
    surface = Surface()
    surface.add(RectShape.from_xywh('a', (0, 0, 100, 100)))
    surface.add(RectShape.from_xywh('b', (300, 0, 100, 100)))
    return surface


@pytest.fixture
def generator(surface):
    """Path generator reading shapes from the shared surface"""
    return ConnectorPathGenerator(surface.get)


@pytest.fixture
def make_connector(surface):
    """Factory creating a connector and adding it to the shared surface"""
    counter = iter(range(1000))

    def _make(source, target, mode=ConnectorMode.ORTHOGONAL, connector_id=None, add=True):
        connector = Connector.create(connector_id or f"c{next(counter)}", source, target, mode)
        if add:
            surface.add(connector)
        return connector

    return _make


@pytest.fixture
def auto_connection():
    """Factory for auto connections (attached, no fixed position)"""
    return lambda shape_id: Connection.attached(shape_id)

