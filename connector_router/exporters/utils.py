"""
Utility functions for exporters
"""

import os
import logging
from pathlib import Path
from typing import Any

from ..core.types import SceneResultDict
from .exceptions import PathValidationError, InvalidSceneResultError

logger = logging.getLogger(__name__)

# Constants
MAX_FILENAME_LENGTH = 255
DEFAULT_JSON_FILENAME = "routes.json"
DEFAULT_CSV_FILENAME = "routes.csv"

RESERVED_NAMES = {
    'CON', 'PRN', 'AUX', 'NUL', 'COM1', 'COM2', 'COM3', 'COM4', 'COM5', 'COM6',
    'COM7', 'COM8', 'COM9', 'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5', 'LPT6',
    'LPT7', 'LPT8', 'LPT9',
}


def validate_file_path(file_path: str, must_exist: bool = False) -> Path:
    """
    Validate and sanitize file path for export operations

    Args:
        file_path: Path to validate
        must_exist: Whether parent directory must exist

    Returns:
        Validated Path object

    Raises:
        PathValidationError: If path is invalid or unsafe
    """
    if not file_path or not isinstance(file_path, str):
        raise PathValidationError(f"File path must be a non-empty string, got: {type(file_path)}")

    filename = os.path.basename(file_path)
    if len(filename) > MAX_FILENAME_LENGTH:
        raise PathValidationError(
            f"Filename too long ({len(filename)} chars). Maximum is {MAX_FILENAME_LENGTH}"
        )

    try:
        path = Path(file_path).resolve()
    except (ValueError, OSError) as e:
        raise PathValidationError(f"Invalid file path: {e}")

    if must_exist:
        parent = path.parent
        if not parent.exists():
            raise PathValidationError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise PathValidationError(f"Parent path is not a directory: {parent}")

    if path.stem.upper() in RESERVED_NAMES:
        raise PathValidationError(f"Reserved filename: {filename}")

    return path


def validate_scene_result(result: Any) -> SceneResultDict:
    """
    Validate that a routed scene result has the expected structure

    Args:
        result: Scene result dictionary to validate

    Returns:
        Validated scene result

    Raises:
        InvalidSceneResultError: If the structure is invalid
    """
    if not isinstance(result, dict):
        raise InvalidSceneResultError(f"Scene result must be a dictionary, got: {type(result)}")

    missing_keys = [key for key in ('scene', 'connectors') if key not in result]
    if missing_keys:
        raise InvalidSceneResultError(f"Missing required keys: {', '.join(missing_keys)}")

    if not isinstance(result['connectors'], list):
        raise InvalidSceneResultError(
            f"connectors must be a list, got: {type(result['connectors'])}"
        )

    for index, connector in enumerate(result['connectors']):
        if not isinstance(connector, dict):
            raise InvalidSceneResultError(f"Connector #{index} must be a dictionary")
        for key in ('id', 'mode', 'xywh', 'points'):
            if key not in connector:
                raise InvalidSceneResultError(f"Connector #{index} is missing '{key}'")

    return result
