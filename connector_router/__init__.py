"""
Connector Router - path routing for diagram connectors
Straight, curved and obstacle-aware orthogonal connectors that follow their shapes
"""

from importlib.metadata import version, PackageNotFoundError

from .core.config import RouterConfig
from .connector import Connector, Connection, ConnectorMode, ConnectorPathGenerator, Surface

try:
    __version__ = version("connector-router")
except PackageNotFoundError:
    # Package not installed (development mode)
    __version__ = "0.0.0.dev"

__all__ = ["RouterConfig", "Connector", "Connection", "ConnectorMode", "ConnectorPathGenerator", "Surface"]
