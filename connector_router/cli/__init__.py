"""
CLI utilities for the connector-router command
"""

from .argument_parser import setup_argument_parser
from .config_discovery import discover_config
from .init_command import run_init_command
from .output import print_route_summary, print_separator
from .scene_loader import Scene, load_scene

__all__ = [
    'setup_argument_parser',
    'discover_config',
    'run_init_command',
    'print_route_summary',
    'print_separator',
    'Scene',
    'load_scene',
]
