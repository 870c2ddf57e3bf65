"""
Output formatting and printing utilities for CLI
"""

import sys
from typing import TextIO

from ..connector.model import ConnectorMode
from ..core.types import SceneResultDict


def print_separator(width: int = 70, char: str = '=', stream: TextIO = sys.stderr) -> None:
    """
    Print a separator line

    Args:
        width: Width of the separator
        char: Character to use for separator
        stream: Where to print
    """
    print(char * width, file=stream)


def print_route_summary(result: SceneResultDict, stream: TextIO = sys.stderr) -> None:
    """
    Print one line per connector: mode, number of points and routability

    Goes to stderr by default so stdout stays clean for the exported data.
    """
    connectors = result['connectors']
    print_separator(stream=stream)
    print(f"Scene: {result['scene']} ({len(connectors)} connectors)", file=stream)
    print_separator(char='-', stream=stream)
    for connector in connectors:
        status = "✅" if connector.get('routable', True) else "⚠️  unroutable, stale path kept"
        mode = ConnectorMode(connector['mode']).name.lower()
        print(f"  {connector['id']:<20} {mode:<11} {len(connector['points']):>3} points  {status}", file=stream)
    print_separator(stream=stream)
